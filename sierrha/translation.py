# File: sierrha/translation.py
"""sierrha.translation: Каталог надписей запасных страниц и языковой сервис для одного запроса."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence, Union

import yaml

from sierrha.logger import logger

__all__: Sequence[str] = ("DEFAULT_LABELS_FILE", "DEFAULT_LANGUAGE", "LabelCatalog", "LanguageService")

DEFAULT_LABELS_FILE = Path(__file__).parent / "resources" / "labels.yaml"
DEFAULT_LANGUAGE = "default"


class LabelCatalog:
    """Надписи по языкам: ``{язык: {ключ: текст}}``."""

    def __init__(self, labels: Mapping[str, Mapping[str, str]]) -> None:
        self._labels: Dict[str, Dict[str, str]] = {
            str(lang): {str(k): str(v) for k, v in entries.items()} for lang, entries in labels.items()
        }

    @classmethod
    def from_file(cls, path: Union[str, Path, None] = None) -> LabelCatalog:
        """Читает YAML-каталог; без пути берётся встроенный labels.yaml."""
        p = Path(path) if path is not None else DEFAULT_LABELS_FILE
        try:
            data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Неправильный YAML в {p}: {exc}") from exc
        if not isinstance(data, dict) or not all(isinstance(v, dict) for v in data.values()):
            raise TypeError(f"Каталог надписей {p} должен быть mapping язык → mapping")
        logger.debug("Loaded labels for %d languages from %s", len(data), p)
        return cls(data)

    @property
    def languages(self) -> list[str]:
        return sorted(self._labels)

    def lookup(self, language: str, key: str) -> Optional[str]:
        return self._labels.get(language, {}).get(key)

    def for_language(self, language: str = DEFAULT_LANGUAGE) -> LanguageService:
        return LanguageService(self, language)


class LanguageService:
    """Переводчик для одного языка; создаётся на каждый запрос."""

    def __init__(self, catalog: LabelCatalog, language: str = DEFAULT_LANGUAGE) -> None:
        self.catalog = catalog
        self.language = language

    def translate(self, key: str) -> str:
        """Текст для *key*: сначала язык запроса, затем default, затем сам ключ."""
        for language in (self.language, DEFAULT_LANGUAGE):
            text = self.catalog.lookup(language, key)
            if text is not None:
                return text
        logger.warning("Missing label %r for language %s", key, self.language)
        return key
