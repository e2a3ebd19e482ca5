# File: sierrha/exceptions.py
"""
Exception types raised and handled by the Sierrha error handlers.

Only ``InvalidReferenceKind`` and ``SiteNotFound`` leave the resolver;
transport and configuration failures are recovered where they happen.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from sierrha.models import ErrorResponse


class SierrhaError(Exception):
    """Base class for all Sierrha failures.

    ``code`` is a stable numeric identifier shown in debug output.
    """

    code: int = 0

    def __init__(self, message: str = "", code: Optional[int] = None) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code


class InvalidReferenceKind(SierrhaError, ValueError):
    """The configured link is neither a page nor an external URL."""

    code = 1547651754


class SiteNotFound(SierrhaError, LookupError):
    """No configured site contains the requested page."""

    code = 1521716622


class RouteNotFound(SierrhaError, LookupError):
    """The site has no route for the requested page."""


class TransportFailure(SierrhaError):
    """HTTP/transport failure while fetching an error page."""


class ConfigurationUnavailable(SierrhaError):
    """Extension configuration could not be read or validated."""


class ImmediateAbort(SierrhaError):
    """Stop the error pipeline and deliver :attr:`response` as-is."""

    def __init__(self, response: "ErrorResponse") -> None:
        super().__init__(f"Immediate response with status {response.status_code}")
        self.response = response


__all__ = [
    "SierrhaError",
    "InvalidReferenceKind",
    "SiteNotFound",
    "RouteNotFound",
    "TransportFailure",
    "ConfigurationUnavailable",
    "ImmediateAbort",
]
