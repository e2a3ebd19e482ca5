# File: sierrha/sites.py
"""
Sites and their page routes: the routing collaborator of the URL resolver.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from sierrha.config import LanguageConfig, SiteConfig
from sierrha.exceptions import RouteNotFound, SiteNotFound
from sierrha.logger import logger


@dataclass(frozen=True, slots=True)
class SiteLanguage:
    locale: str
    hreflang: str
    base: str = "/"
    label_language: str = "default"


@dataclass(frozen=True, slots=True)
class Site:
    """A site with its languages and the path of each page."""

    identifier: str
    base_url: str
    languages: Tuple[SiteLanguage, ...]
    pages: Dict[int, str] = field(default_factory=dict)

    @classmethod
    def from_config(cls, cfg: SiteConfig) -> Site:
        return cls(
            identifier=cfg.identifier,
            base_url=cfg.base_url,
            languages=tuple(_language(lang) for lang in cfg.languages),
            pages=dict(cfg.pages),
        )

    @property
    def default_language(self) -> SiteLanguage:
        return self.languages[0]

    def has_page(self, page_id: int) -> bool:
        return page_id in self.pages

    def get_language(self, locale: Optional[str]) -> SiteLanguage:
        """Language matching *locale*, or the site's first language."""
        for language in self.languages:
            if language.locale == locale:
                return language
        return self.default_language

    def generate_uri(self, page_id: int, locale: Optional[str] = None) -> str:
        """Absolute, language-qualified URL of *page_id*."""
        if page_id not in self.pages:
            raise RouteNotFound(f"Page {page_id} is not part of site {self.identifier!r}")
        language = self.get_language(locale)
        path = self.pages[page_id].strip("/")
        uri = f"{self.base_url}{language.base}{path}"
        logger.debug("Generated URI for page %d (%s): %s", page_id, language.locale, uri)
        return uri


def _language(cfg: LanguageConfig) -> SiteLanguage:
    return SiteLanguage(
        locale=cfg.locale,
        hreflang=cfg.hreflang,
        base=cfg.base,
        label_language=cfg.label_language,
    )


class SiteDirectory:
    """Finds the site a page belongs to."""

    def __init__(self, sites: Iterable[Site] = ()) -> None:
        self._sites: List[Site] = list(sites)

    @classmethod
    def from_config(cls, sites: Iterable[SiteConfig]) -> SiteDirectory:
        return cls(Site.from_config(cfg) for cfg in sites)

    def __len__(self) -> int:
        return len(self._sites)

    def get_site(self, identifier: str) -> Site:
        for site in self._sites:
            if site.identifier == identifier:
                return site
        raise SiteNotFound(f"No site with identifier {identifier!r}")

    def get_site_by_page_id(self, page_id: int) -> Site:
        for site in self._sites:
            if site.has_page(page_id):
                return site
        raise SiteNotFound(f"No site contains page {page_id}")


__all__ = ["SiteLanguage", "Site", "SiteDirectory"]
