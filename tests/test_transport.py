from __future__ import annotations

import asyncio
from typing import Any

import aiohttp
import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from quotesync._transport import HttpTransport
from quotesync.config import SyncConfig
from quotesync.exceptions import QuoteTransportError
from quotesync.models.quote import Quote
from quotesync.remote import RemoteClient


def _app(received: list[dict[str, Any]]) -> web.Application:
    async def list_posts(_request: web.Request) -> web.Response:
        return web.json_response([{"id": 1, "title": "Hello", "body": "x", "userId": 4}])

    async def create_post(request: web.Request) -> web.Response:
        body = await request.json()
        received.append(body)
        return web.json_response({**body, "id": 101}, status=201)

    async def broken(_request: web.Request) -> web.Response:
        return web.Response(status=500, text="internal error")

    async def garbage(_request: web.Request) -> web.Response:
        return web.Response(text="<html>not json</html>")

    async def slow(_request: web.Request) -> web.Response:
        await asyncio.sleep(1.0)
        return web.json_response([])

    app = web.Application()
    app.router.add_get("/posts", list_posts)
    app.router.add_post("/posts", create_post)
    app.router.add_get("/broken", broken)
    app.router.add_get("/garbage", garbage)
    app.router.add_get("/slow", slow)
    return app


def _config(server: TestServer, **overrides: Any) -> SyncConfig:
    return SyncConfig(base_url=f"http://{server.host}:{server.port}", periodic_enabled=False, **overrides)


@pytest.mark.asyncio
async def test_get_and_post_round_trip_through_remote_client() -> None:
    received: list[dict[str, Any]] = []
    async with TestServer(_app(received)) as server, aiohttp.ClientSession() as http:
        config = _config(server)
        remote = RemoteClient(config, HttpTransport(config, http))

        fetched = await remote.fetch_all()
        pushed = await remote.push(Quote(text="New one", category="mine"))

    assert fetched == [Quote(id=1, text="Hello", category="ServerCategory-4")]
    assert pushed.id == 101
    assert received == [{"title": "New one", "body": "mine", "userId": 1}]


@pytest.mark.asyncio
async def test_non_success_status_raises_with_status_code() -> None:
    async with TestServer(_app([])) as server, aiohttp.ClientSession() as http:
        transport = HttpTransport(_config(server), http)

        with pytest.raises(QuoteTransportError) as exc_info:
            await transport.get_json("/broken")

    assert exc_info.value.status_code == 500
    assert exc_info.value.endpoint == "/broken"


@pytest.mark.asyncio
async def test_invalid_json_raises_transport_error() -> None:
    async with TestServer(_app([])) as server, aiohttp.ClientSession() as http:
        transport = HttpTransport(_config(server), http)

        with pytest.raises(QuoteTransportError, match="Invalid JSON"):
            await transport.get_json("/garbage")


@pytest.mark.asyncio
async def test_timeout_raises_transport_error() -> None:
    async with TestServer(_app([])) as server, aiohttp.ClientSession() as http:
        transport = HttpTransport(_config(server, request_timeout=0.05), http)

        with pytest.raises(QuoteTransportError):
            await transport.get_json("/slow")


@pytest.mark.asyncio
async def test_unreachable_remote_degrades_to_empty_fetch() -> None:
    async with TestServer(_app([])) as server:
        config = _config(server)
    # server is closed now; nothing listens on that port
    async with aiohttp.ClientSession() as http:
        remote = RemoteClient(config, HttpTransport(config, http))
        quotes = await remote.fetch_all()

    assert quotes == []
    assert remote.last_error is not None
