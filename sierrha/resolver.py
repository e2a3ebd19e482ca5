# File: sierrha/resolver.py
"""
Resolver: turns a content reference into a concrete, fetchable URL.
"""
from __future__ import annotations

from typing import Optional, Protocol

from sierrha.exceptions import InvalidReferenceKind
from sierrha.logger import logger
from sierrha.models import ContentReference, PageReference, RequestContext, ResolvedUrl, UrlReference

ISO_639_1_MARKER = "###ISO_639-1###"
IETF_BCP47_MARKER = "###IETF_BCP47###"


class Router(Protocol):
    def generate_uri(self, page_id: int, locale: Optional[str] = None) -> str: ...


class SiteLookup(Protocol):
    def get_site_by_page_id(self, page_id: int) -> Router: ...


def replace_language_markers(template: str, context: RequestContext) -> str:
    """Literal substitution of the two language markers, nothing else."""
    return template.replace(ISO_639_1_MARKER, context.locale).replace(
        IETF_BCP47_MARKER, context.language_tag
    )


class UrlResolver:
    """Resolve page references via the site router, URL references via markers."""

    def __init__(self, site_directory: Optional[SiteLookup] = None) -> None:
        self.site_directory = site_directory

    def resolve(self, reference: ContentReference, context: RequestContext) -> ResolvedUrl:
        """
        Return the concrete URL for *reference*.

        Raises InvalidReferenceKind for anything but page or URL references.
        """
        if isinstance(reference, UrlReference):
            url = replace_language_markers(reference.template, context)
            logger.debug("Resolved external URL %s -> %s", reference.template, url)
            return ResolvedUrl(url=url, page_id=0, language=context.language)

        if isinstance(reference, PageReference):
            router = context.site
            if router is None:
                if self.site_directory is None:
                    raise LookupError(
                        f"No site in request context and no site directory for page {reference.page_id}"
                    )
                router = self.site_directory.get_site_by_page_id(reference.page_id)
            url = str(router.generate_uri(reference.page_id, context.locale))
            logger.debug("Resolved page %d -> %s", reference.page_id, url)
            return ResolvedUrl(url=url, page_id=reference.page_id, language=context.language)

        raise InvalidReferenceKind(
            'The error handler accepts only references of type "page" or "url", '
            f"got {type(reference).__name__}"
        )


__all__ = ["ISO_639_1_MARKER", "IETF_BCP47_MARKER", "Router", "SiteLookup", "UrlResolver", "replace_language_markers"]
