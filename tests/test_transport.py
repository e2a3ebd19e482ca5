# File: tests/test_transport.py
"""AiohttpTransport against a real aiohttp server running in a background thread."""
from __future__ import annotations

import asyncio
import socket
import threading
from collections.abc import Iterator

import pytest
from aiohttp import web

from sierrha.exceptions import TransportFailure
from sierrha.fetcher import MARKER_HEADER
from sierrha.transport import AiohttpTransport


def free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


class ServerThread(threading.Thread):
    """Runs *app* on its own event loop so the blocking transport can call it."""

    def __init__(self, app: web.Application) -> None:
        super().__init__(daemon=True)
        self.app = app
        self.port = free_port()
        self.loop = asyncio.new_event_loop()
        self.ready = threading.Event()

    @property
    def base_url(self) -> str:
        return f"http://127.0.0.1:{self.port}"

    def run(self) -> None:
        asyncio.set_event_loop(self.loop)
        runner = web.AppRunner(self.app)
        self.loop.run_until_complete(runner.setup())
        site = web.TCPSite(runner, "127.0.0.1", self.port)
        self.loop.run_until_complete(site.start())
        self.ready.set()
        self.loop.run_forever()
        self.loop.run_until_complete(runner.cleanup())
        self.loop.close()

    def stop(self) -> None:
        self.loop.call_soon_threadsafe(self.loop.stop)
        self.join(timeout=5)


@pytest.fixture()
def server() -> Iterator[str]:
    app = web.Application()

    async def handle_page(_):
        return web.Response(text="<h1>CUSTOM ERROR PAGE TEXT</h1>", content_type="text/html")

    async def handle_echo(request):
        return web.Response(text=request.headers.get("X-Sierrha", ""), content_type="text/plain")

    async def handle_missing(_):
        return web.Response(text="nope", status=404)

    async def handle_binary(_):
        return web.Response(body=b"\xff\xfe\xfa", content_type="text/html", charset="utf-8")

    async def handle_slow(_):
        await asyncio.sleep(2)
        return web.Response(text="late")

    app.router.add_get("/page", handle_page)
    app.router.add_get("/echo", handle_echo)
    app.router.add_get("/missing", handle_missing)
    app.router.add_get("/binary", handle_binary)
    app.router.add_get("/slow", handle_slow)

    thread = ServerThread(app)
    thread.start()
    assert thread.ready.wait(timeout=5)
    try:
        yield thread.base_url
    finally:
        thread.stop()


def test_get_returns_status_and_body(server):
    response = AiohttpTransport().get(f"{server}/page")
    assert response.status == 200
    assert response.text == "<h1>CUSTOM ERROR PAGE TEXT</h1>"


def test_marker_header_is_sent(server):
    response = AiohttpTransport().get(f"{server}/echo", headers=MARKER_HEADER)
    assert response.text == "1"


def test_non_200_is_returned_not_raised(server):
    assert AiohttpTransport().get(f"{server}/missing").status == 404


def test_undecodable_body_is_a_transport_failure(server):
    with pytest.raises(TransportFailure):
        AiohttpTransport().get(f"{server}/binary")


def test_timeout_is_a_transport_failure(server):
    with pytest.raises(TransportFailure):
        AiohttpTransport(timeout=0.2).get(f"{server}/slow")


def test_connection_error_is_a_transport_failure():
    with pytest.raises(TransportFailure):
        AiohttpTransport(timeout=2).get(f"http://127.0.0.1:{free_port()}/")


def test_refuses_to_block_a_running_loop():
    async def fetch_inside_loop():
        AiohttpTransport(timeout=2).get(f"http://127.0.0.1:{free_port()}/")

    with pytest.raises(TransportFailure, match="running event loop"):
        asyncio.run(fetch_inside_loop())
