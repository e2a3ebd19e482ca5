# File: sierrha/models.py
"""
Data models shared by the resolver, the fetcher and the handlers.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Mapping, Optional, Union

if TYPE_CHECKING:
    from sierrha.sites import Site


@dataclass(frozen=True, slots=True)
class PageReference:
    """Internal page, addressed by its id."""

    page_id: int

    def __post_init__(self) -> None:
        if self.page_id <= 0:
            raise ValueError(f"page_id must be positive, got {self.page_id}")


@dataclass(frozen=True, slots=True)
class UrlReference:
    """External URL, may contain language markers."""

    template: str


ContentReference = Union[PageReference, UrlReference]


@dataclass(frozen=True, slots=True)
class RequestContext:
    """Per-request language and site information (read-only)."""

    locale: str = "en"
    language_tag: str = "en-US"
    site: Optional["Site"] = None
    language: str = "default"
    remote_addr: str = ""


@dataclass(frozen=True, slots=True)
class ResolvedUrl:
    url: str
    page_id: int = 0
    language: str = "default"


@dataclass(frozen=True, slots=True)
class Body:
    """Live or cached content of the configured error page."""

    content: str


@dataclass(frozen=True, slots=True)
class Fallback:
    """Locally rendered generic error page."""

    content: str


FetchResult = Union[Body, Fallback]


@dataclass(frozen=True, slots=True)
class ErrorResponse:
    """What a handler hands back to the host's error pipeline."""

    status_code: int
    body: str
    headers: Mapping[str, str] = field(
        default_factory=lambda: {"Content-Type": "text/html; charset=utf-8"}
    )


__all__ = [
    "PageReference",
    "UrlReference",
    "ContentReference",
    "RequestContext",
    "ResolvedUrl",
    "Body",
    "Fallback",
    "FetchResult",
    "ErrorResponse",
]
