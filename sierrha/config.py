# File: sierrha/config.py
"""
Модуль для загрузки и валидации конфигурации обработчиков ошибок Sierrha.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
from urllib.parse import urlparse

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from sierrha.exceptions import ConfigurationUnavailable
from sierrha.logger import logger


class LanguageConfig(BaseModel):
    """Язык сайта: ISO-код, тег BCP-47 и префикс пути."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    locale: str = Field(..., min_length=2, max_length=2, description="Код ISO 639-1.")
    hreflang: str = Field(..., min_length=2, description="Тег IETF BCP 47.")
    base: str = Field("/", description="Префикс пути языка, например /de/.")
    label_language: str = Field("default", description="Язык каталога надписей.")

    @field_validator("base")
    def _wrap_slashes(cls, v: str) -> str:
        v = "/" + v.strip("/")
        return v if v == "/" else v + "/"


class SiteConfig(BaseModel):
    """Сайт: базовый URL, языки и маршруты страниц."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    identifier: str = Field(..., min_length=1)
    base_url: str = Field(..., description="Абсолютный URL сайта.")
    languages: List[LanguageConfig] = Field(..., min_length=1)
    pages: Dict[int, str] = Field(default_factory=dict, description="id страницы → путь.")

    @field_validator("base_url")
    def _check_base_url(cls, v: str) -> str:
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"base_url должен быть абсолютным http(s) URL, получено {v!r}")
        return v.rstrip("/")


class HandlerConfig(BaseModel):
    """Настройки обработчика одного кода ошибки."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    error_page: str = Field(..., min_length=1, description="Ссылка: t3://page?uid=N, N или http(s) URL.")
    label_prefix: Optional[str] = Field(None, description="Префикс ключей надписей запасной страницы.")


class SierrhaConfig(BaseModel):
    """Конфигурация расширения целиком."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    debug_mode: bool = Field(False, description="Подробный вывод внутренних ошибок.")
    dev_ip_mask: str = Field("127.0.0.1,::1", description="Маска адресов разработчиков.")
    cache_identifier: str = Field("pages", min_length=1, description="Раздел кэша.")
    cache_namespace: str = Field("sierrha", min_length=1, description="Префикс ключей кэша.")
    cache_lifetime: Optional[int] = Field(None, ge=0, description="Время жизни записей (секунд), None — бессрочно.")
    request_timeout: Optional[float] = Field(None, gt=0, description="Таймаут запроса страницы (секунд).")
    labels_file: Optional[Path] = Field(None, description="YAML-каталог надписей.")
    handlers: Dict[int, HandlerConfig] = Field(default_factory=dict)
    sites: List[SiteConfig] = Field(default_factory=list)

    @field_validator("handlers")
    def _check_status_codes(cls, v: Dict[int, HandlerConfig]) -> Dict[int, HandlerConfig]:
        invalid = [code for code in v if not 400 <= code <= 599]
        if invalid:
            raise ValueError(f"Коды ошибок должны быть в диапазоне 400–599: {invalid}")
        return v

    @model_validator(mode="after")
    def _check_labels_file(self) -> SierrhaConfig:
        if self.labels_file is not None and not self.labels_file.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(self.labels_file))
        return self


_DEFAULT_CFG = Path("configs/sierrha.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> SierrhaConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект SierrhaConfig.
    При отсутствии файла конфига бросает FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(_DEFAULT_CFG))
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    labels_file = data.get("labels_file")
    if isinstance(labels_file, str) and not Path(labels_file).is_absolute():
        data["labels_file"] = str(path_obj.parent / labels_file)

    return SierrhaConfig(**data)


def read_extension_config(path: Union[str, Path, None]) -> SierrhaConfig:
    """Как load_config, но любая ошибка превращается в ConfigurationUnavailable."""
    try:
        return load_config(path)
    except (OSError, ValueError, TypeError, ValidationError) as exc:
        raise ConfigurationUnavailable(f"Конфигурация недоступна: {exc}") from exc


def load_extension_config(path: Union[str, Path, None]) -> SierrhaConfig:
    """
    Best-effort загрузка: при ошибке пишет предупреждение и возвращает
    конфигурацию по умолчанию (debug_mode выключен).
    """
    try:
        return read_extension_config(path)
    except ConfigurationUnavailable as exc:
        logger.warning("%s; using defaults", exc)
        return SierrhaConfig()


__all__ = [
    "LanguageConfig",
    "SiteConfig",
    "HandlerConfig",
    "SierrhaConfig",
    "load_config",
    "read_extension_config",
    "load_extension_config",
]
