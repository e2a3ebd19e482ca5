# File: tests/conftest.py
from typing import Dict, List, Mapping, Optional, Tuple

import pytest

from sierrha.cache import MemoryTaggedCache
from sierrha.config import HandlerConfig, LanguageConfig, SierrhaConfig, SiteConfig
from sierrha.fetcher import CacheAsideFetcher
from sierrha.renderer import ErrorPageRenderer
from sierrha.sites import Site, SiteDirectory
from sierrha.transport import TransportResponse
from sierrha.translation import LabelCatalog

ERROR_PAGE_TITLE = "*** Error Title ***"
ERROR_PAGE_MESSAGE = "*** Detailed error description. ***"


class StubTransport:
    """Records every GET and answers with a fixed response or error."""

    def __init__(self, response: Optional[TransportResponse] = None, error: Optional[Exception] = None):
        self.response = response or TransportResponse(status=200, text="")
        self.error = error
        self.calls: List[Tuple[str, Dict[str, str]]] = []

    def get(self, url: str, headers: Optional[Mapping[str, str]] = None) -> TransportResponse:
        self.calls.append((url, dict(headers or {})))
        if self.error is not None:
            raise self.error
        return self.response


class StubTranslator:
    def __init__(self, labels: Mapping[str, str]):
        self.labels = dict(labels)
        self.keys: List[str] = []

    def translate(self, key: str) -> str:
        self.keys.append(key)
        return self.labels.get(key, key)


@pytest.fixture()
def translator() -> StubTranslator:
    return StubTranslator({"Title": ERROR_PAGE_TITLE, "Details": ERROR_PAGE_MESSAGE})


@pytest.fixture()
def cache() -> MemoryTaggedCache:
    return MemoryTaggedCache("pages")


@pytest.fixture()
def renderer() -> ErrorPageRenderer:
    return ErrorPageRenderer()


@pytest.fixture()
def make_fetcher(cache, renderer):
    """Factory: fetcher over the shared cache with a transport answering *status*/*text*."""

    def _make(text: str = "", status: int = 200, error: Optional[Exception] = None):
        transport = StubTransport(TransportResponse(status=status, text=text), error=error)
        return CacheAsideFetcher(cache, transport, renderer), transport

    return _make


@pytest.fixture()
def site_config() -> SiteConfig:
    return SiteConfig(
        identifier="main",
        base_url="https://www.example.com/",
        languages=[
            LanguageConfig(locale="en", hreflang="en-US"),
            LanguageConfig(locale="de", hreflang="de-AT", base="de", label_language="de"),
        ],
        pages={1: "", 42: "not-found"},
    )


@pytest.fixture()
def site(site_config) -> Site:
    return Site.from_config(site_config)


@pytest.fixture()
def site_directory(site) -> SiteDirectory:
    return SiteDirectory([site])


@pytest.fixture()
def catalog() -> LabelCatalog:
    return LabelCatalog.from_file()


@pytest.fixture()
def sierrha_config(site_config) -> SierrhaConfig:
    return SierrhaConfig(
        dev_ip_mask="10.0.0.*",
        handlers={
            404: HandlerConfig(error_page="t3://page?uid=42"),
            403: HandlerConfig(error_page="https://errors.example.com/###ISO_639-1###/403.html"),
            410: HandlerConfig(error_page="t3://file?uid=7"),
        },
        sites=[site_config],
    )
