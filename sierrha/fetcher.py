# File: sierrha/fetcher.py
"""
Fetcher module: cache-aside retrieval of error page content with a
localized fallback page.

A cache hit is returned as-is. On a miss the URL is fetched once; only a
usable body (status 200, text left after stripping markup) is cached.
"""
from __future__ import annotations

import hashlib
from typing import FrozenSet, Mapping, Optional, Protocol

from bs4 import BeautifulSoup
from bs4.element import Comment, Declaration, Doctype, ProcessingInstruction

from sierrha.cache import TaggedCache
from sierrha.logger import logger
from sierrha.models import Body, Fallback, FetchResult
from sierrha.renderer import ErrorPageRenderer
from sierrha.transport import Transport

#: marks internal requests so the target system can recognize them and avoid loops
MARKER_HEADER: Mapping[str, str] = {"X-Sierrha": "1"}
CACHE_TAG = "sierrha"

_NON_TEXT_STRINGS = (Comment, Declaration, Doctype, ProcessingInstruction)
_ASCII_WHITESPACE = " \t\n\r\0\x0b"


class Translator(Protocol):
    def translate(self, key: str) -> str: ...


def strip_markup(content: str) -> str:
    """
    Text of *content* with tags, comments and declarations removed.

    Script and style text counts as text. Only ASCII whitespace is trimmed,
    so a lone ``&nbsp;`` still counts as content.
    """
    soup = BeautifulSoup(content, "html.parser")
    text = "".join(
        s for s in soup.find_all(string=True) if not isinstance(s, _NON_TEXT_STRINGS)
    )
    return text.strip(_ASCII_WHITESPACE)


def is_usable_content(content: str) -> bool:
    # an empty-looking page cannot be told apart from an error
    return strip_markup(content) != ""


class CacheAsideFetcher:
    """Fetch error page content through a tagged cache."""

    def __init__(
        self,
        cache: TaggedCache,
        transport: Transport,
        renderer: ErrorPageRenderer,
        namespace: str = CACHE_TAG,
        lifetime: Optional[int] = None,
    ) -> None:
        self.cache = cache
        self.transport = transport
        self.renderer = renderer
        self.namespace = namespace
        self.lifetime = lifetime

    def cache_key(self, url: str) -> str:
        return f"{self.namespace}:{hashlib.md5(url.encode('utf-8')).hexdigest()}"

    @staticmethod
    def cache_tags(page_id: int) -> FrozenSet[str]:
        tags = {CACHE_TAG}
        if page_id > 0:
            # purged together with the page whenever its content changes
            tags.add(f"pageId_{page_id}")
        return frozenset(tags)

    def get_content(self, url: str) -> str:
        """
        Download *url*; returns "" for any failure.

        Failures are logged, never raised.
        """
        try:
            response = self.transport.get(url, headers=MARKER_HEADER)
        except Exception as exc:
            logger.warning("Fetching error page %s failed: %s", url, exc)
            return ""
        if response.status != 200:
            logger.warning("Error page %s answered with status %d", url, response.status)
            return ""
        if not is_usable_content(response.text):
            logger.warning("Error page %s has no usable content", url)
            return ""
        return response.text

    def _cached(self, key: str) -> Optional[str]:
        """Cached text under *key*; an undecodable entry counts as a miss."""
        cached = self.cache.get(key)
        if not cached:
            return None
        if isinstance(cached, bytes):
            try:
                return cached.decode("utf-8")
            except UnicodeDecodeError:
                logger.warning("Cache entry %s is not valid UTF-8, fetching again", key)
                return None
        return cached

    def fetch_content(
        self,
        url: str,
        page_id: int = 0,
        *,
        translator: Translator,
        label_prefix: str = "",
        locale: str = "en",
    ) -> FetchResult:
        """Cached or live content of *url*, or the fallback page in *locale*."""
        key = self.cache_key(url)
        cached = self._cached(key)
        if cached is not None:
            logger.debug("Cache hit for %s (%s)", url, key)
            return Body(cached)

        content = self.get_content(url)
        if content:
            self.cache.set(key, content, self.cache_tags(page_id), self.lifetime)
            logger.debug("Cached %s as %s", url, key)
            return Body(content)

        return Fallback(self.render_fallback(translator, label_prefix, locale))

    def render_fallback(self, translator: Translator, label_prefix: str = "", locale: str = "en") -> str:
        return self.renderer.render(
            translator.translate(f"{label_prefix}Title"),
            translator.translate(f"{label_prefix}Details"),
            lang=locale,
        )


__all__ = [
    "MARKER_HEADER",
    "CACHE_TAG",
    "Translator",
    "strip_markup",
    "is_usable_content",
    "CacheAsideFetcher",
]
