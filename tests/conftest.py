"""Test configuration and utilities."""

import os
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer


@dataclass
class RecordedRequest:
    """A request received by the fake API."""

    method: str
    path: str
    query: Dict[str, str]
    headers: Dict[str, str]
    body: Optional[str]


class FakeAPI:
    """
    Local stand-in for the Botlist.me API.

    Records every request and answers the endpoints the client uses, plus a
    few fixed routes for response-handling tests.
    """

    def __init__(self) -> None:
        self.requests: List[RecordedRequest] = []
        self.votes: Dict[str, Any] = {}
        self.stats_status = 200
        self.base_url = ""

        self.app = web.Application()
        router = self.app.router
        router.add_post("/api/v1/bots/{id}/stats", self.post_stats)
        router.add_get("/api/v1/bots/{id}/voted", self.get_voted)
        router.add_get("/api/v1/bots/{id}", self.get_bot)
        router.add_get("/api/v1/users/{id}", self.get_user)
        router.add_get("/api/v1/json", self.json_ok)
        router.add_get("/api/v1/text", self.text_ok)
        router.add_get("/api/v1/broken-json", self.broken_json)
        router.add_get("/api/v1/tagged", self.tagged)
        router.add_get("/api/v1/echo", self.echo)
        router.add_post("/api/v1/echo", self.echo)

    async def _record(self, request: web.Request) -> RecordedRequest:
        body = await request.text() if request.can_read_body else None
        recorded = RecordedRequest(
            method=request.method,
            path=request.path,
            query=dict(request.query),
            headers=dict(request.headers),
            body=body,
        )
        self.requests.append(recorded)
        return recorded

    async def post_stats(self, request: web.Request) -> web.Response:
        await self._record(request)
        if self.stats_status != 200:
            return web.json_response({"error": "nope"}, status=self.stats_status)
        return web.json_response({"received": await request.json()})

    async def get_voted(self, request: web.Request) -> web.Response:
        await self._record(request)
        user_id = request.query.get("userId")
        if user_id in self.votes:
            return web.json_response({"voted": self.votes[user_id]})
        return web.json_response({})

    async def get_bot(self, request: web.Request) -> web.Response:
        await self._record(request)
        bot_id = request.match_info["id"]
        if bot_id == "404":
            return web.Response(status=404, text="Bot not found")
        return web.json_response({"id": bot_id, "name": "Test Bot"})

    async def get_user(self, request: web.Request) -> web.Response:
        await self._record(request)
        return web.json_response({"id": request.match_info["id"], "username": "tester"})

    async def json_ok(self, request: web.Request) -> web.Response:
        await self._record(request)
        return web.Response(text='{"ok":1}', content_type="application/json")

    async def text_ok(self, request: web.Request) -> web.Response:
        await self._record(request)
        return web.Response(text="ok", content_type="text/plain")

    async def broken_json(self, request: web.Request) -> web.Response:
        await self._record(request)
        return web.Response(status=502, text="Bad Gateway", content_type="application/json")

    async def tagged(self, request: web.Request) -> web.Response:
        await self._record(request)
        return web.json_response({}, headers=[("X-Tag", "a"), ("X-Tag", "b")])

    async def echo(self, request: web.Request) -> web.Response:
        recorded = await self._record(request)
        return web.json_response({"query": recorded.query, "body": recorded.body})


class FakeHost:
    """HostClient implementation with fixed values."""

    def __init__(self, guilds: int = 5, bot_id: Optional[str] = "4242", shards: Optional[int] = None) -> None:
        self.guilds = guilds
        self._bot_id = bot_id
        self.shards = shards
        self.ready_callbacks: List[Callable[[], Awaitable[None]]] = []

    def guild_count(self) -> int:
        return self.guilds

    def bot_id(self) -> Optional[str]:
        return self._bot_id

    def shard_count(self) -> Optional[int]:
        return self.shards

    def on_ready(self, callback: Callable[[], Awaitable[None]]) -> None:
        self.ready_callbacks.append(callback)

    async def fire_ready(self) -> None:
        for callback in self.ready_callbacks:
            await callback()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep BOTLISTME_* variables from the environment out of the tests."""
    for key in list(os.environ):
        if key.startswith("BOTLISTME_") or key.startswith("LOG_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
async def fake_api():
    """Run the fake API on a local port."""
    api = FakeAPI()
    server = TestServer(api.app)
    await server.start_server()
    api.base_url = str(server.make_url("/api/v1"))
    yield api
    await server.close()


@pytest.fixture
def fake_host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def client_options(fake_api) -> Dict[str, Any]:
    """Options pointing the client at the fake API."""
    return {"api_base_url": fake_api.base_url}
