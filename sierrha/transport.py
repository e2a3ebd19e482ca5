# File: sierrha/transport.py
"""
Transport module: a blocking GET built on aiohttp.

Error handlers run synchronously, so each request gets its own event loop
and session, like Engine.start_scan did for whole scans.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Protocol

from aiohttp import ClientError, ClientSession, ClientTimeout

from sierrha.exceptions import TransportFailure


@dataclass(frozen=True, slots=True)
class TransportResponse:
    status: int
    text: str
    headers: Mapping[str, str] = field(default_factory=dict)


class Transport(Protocol):
    def get(self, url: str, headers: Optional[Mapping[str, str]] = None) -> TransportResponse: ...


class AiohttpTransport:
    """Fetch a URL and read the whole body as text.

    ``timeout=None`` leaves aiohttp's own default in place.
    """

    def __init__(self, timeout: Optional[float] = None) -> None:
        self.timeout = timeout

    def get(self, url: str, headers: Optional[Mapping[str, str]] = None) -> TransportResponse:
        """
        Raises TransportFailure on connection errors, timeouts and undecodable
        bodies, and when called from inside a running event loop.
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            pass
        else:
            raise TransportFailure(
                f"Cannot fetch {url}: AiohttpTransport blocks and must not be called "
                "from a running event loop"
            )
        try:
            return asyncio.run(self._get(url, {k: str(v) for k, v in (headers or {}).items()}))
        except asyncio.TimeoutError as exc:
            raise TransportFailure(f"Timeout while fetching {url}") from exc
        except (ClientError, UnicodeDecodeError) as exc:
            raise TransportFailure(f"Failed to fetch {url}: {exc}") from exc

    async def _get(self, url: str, headers: Dict[str, str]) -> TransportResponse:
        session_kwargs = {}
        if self.timeout is not None:
            session_kwargs["timeout"] = ClientTimeout(total=self.timeout)
        async with ClientSession(**session_kwargs) as session:
            async with session.get(url, headers=headers) as resp:
                text = await resp.text()
                return TransportResponse(status=resp.status, text=text, headers=dict(resp.headers))


__all__ = ["TransportResponse", "Transport", "AiohttpTransport"]
