# File: tests/test_config.py
import json
from pathlib import Path

import pytest
from pydantic import ValidationError
from sierrha.config import SierrhaConfig, load_config, load_extension_config, read_extension_config
from sierrha.exceptions import ConfigurationUnavailable


def write_file(tmp_path: Path, content: str, suffix: str) -> Path:
    path = tmp_path / f"config{suffix}"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.mark.parametrize(
    "content,expect_exc",
    [
        ("debug_mode: true\nhandlers: {404: {error_page: 't3://page?uid=1'}}", None),
        (json.dumps({"debug_mode": True, "handlers": {"404": {"error_page": "1"}}}), None),
        ("handlers: {200: {error_page: '1'}}", ValidationError),
        ("unknown_option: 1", ValidationError),
        ("- just\n- a list", TypeError),
        ("handlers: [unclosed", ValueError),
    ],
)
def test_load_config_variants(tmp_path, content, expect_exc):
    suffix = ".json" if content.strip().startswith("{") else ".yaml"
    cfg_path = write_file(tmp_path, content, suffix)
    if expect_exc:
        with pytest.raises(expect_exc):
            load_config(cfg_path)
    else:
        cfg = load_config(cfg_path)
        assert isinstance(cfg, SierrhaConfig)
        assert cfg.debug_mode is True
        assert 404 in cfg.handlers


def test_defaults():
    cfg = SierrhaConfig()
    assert cfg.debug_mode is False
    assert cfg.cache_lifetime is None
    assert cfg.cache_identifier == "pages"
    assert cfg.cache_namespace == "sierrha"
    assert cfg.request_timeout is None


def test_load_config_default_missing(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(FileNotFoundError):
        load_config(None)


def test_unsupported_format(tmp_path):
    with pytest.raises(ValueError):
        load_config(write_file(tmp_path, "debug_mode = true", ".toml"))


def test_labels_file_relative_to_config(tmp_path):
    (tmp_path / "labels.yaml").write_text("default: {Title: T}", encoding="utf-8")
    cfg = load_config(write_file(tmp_path, "labels_file: labels.yaml", ".yaml"))
    assert cfg.labels_file == (tmp_path / "labels.yaml").resolve()


def test_labels_file_not_found(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(write_file(tmp_path, "labels_file: missing.yaml", ".yaml"))


def test_site_base_url_must_be_absolute(tmp_path):
    content = "sites: [{identifier: main, base_url: /relative, languages: [{locale: en, hreflang: en-US}]}]"
    with pytest.raises(ValidationError):
        load_config(write_file(tmp_path, content, ".yaml"))


def test_read_extension_config_wraps_errors(tmp_path):
    with pytest.raises(ConfigurationUnavailable):
        read_extension_config(tmp_path / "missing.yaml")


@pytest.mark.parametrize("content", ["debug_mode: [broken", "debug_mode: not-a-bool", "- list"])
def test_extension_config_fails_open(tmp_path, content):
    cfg = load_extension_config(write_file(tmp_path, content, ".yaml"))
    assert cfg == SierrhaConfig()
    assert cfg.debug_mode is False


def test_shipped_sample_config_is_valid():
    cfg = load_config(Path(__file__).parent.parent / "configs" / "sierrha.yaml")
    assert set(cfg.handlers) == {403, 404, 503}
    assert cfg.sites[0].languages[1].base == "/de/"
