# File: sierrha/links.py
"""sierrha.links: Разбор ссылок из конфигурации обработчиков в ContentReference."""

from __future__ import annotations

from typing import Sequence
from urllib.parse import parse_qs, urlparse

from sierrha.exceptions import InvalidReferenceKind
from sierrha.logger import logger
from sierrha.models import ContentReference, PageReference, UrlReference

__all__: Sequence[str] = ("parse_link", "link_type")

_URL_SCHEMES = ("http", "https")


def link_type(link: str) -> str:
    """Возвращает тип ссылки: ``page``, ``url`` или имя неизвестного типа."""
    value = link.strip()
    if value.isdigit():
        return "page"
    parsed = urlparse(value)
    if parsed.scheme in _URL_SCHEMES:
        return "url"
    if parsed.scheme == "t3":
        return parsed.netloc or "unknown"
    return parsed.scheme or "unknown"


def _page_id(link: str) -> int:
    value = link.strip()
    if value.isdigit():
        uid = value
    else:
        uid = (parse_qs(urlparse(value).query).get("uid") or [""])[0]
    if not uid.isdigit() or int(uid) <= 0:
        raise InvalidReferenceKind(f'Page link "{link}" has no valid uid')
    return int(uid)


def parse_link(link: str) -> ContentReference:
    """Превращает строку ссылки в PageReference или UrlReference.

    ``t3://page?uid=42`` и ``42`` дают страницу, ``http(s)://…`` даёт внешний URL.
    Остальные типы (file, email, …) отклоняются.
    """
    kind = link_type(link)
    logger.debug("Link %r has type %s", link, kind)
    if kind == "url":
        return UrlReference(template=link.strip())
    if kind == "page":
        return PageReference(page_id=_page_id(link))
    raise InvalidReferenceKind(
        'The error handler accepts only links of type "page" or "url", '
        f'got "{kind}"'
    )
