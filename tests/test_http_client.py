"""Tests for the HTTP request wrapper."""

import json

import aiohttp
import pytest
from aiohttp.test_utils import unused_port
from structlog.testing import capture_logs

from botlistme.http.client import HTTPClient
from botlistme.http.models import Response
from botlistme.utils.exceptions import BotlistMeAPIError, BotlistMeError


class TestResponseHandling:
    """Response parsing and success/failure policy."""

    async def test_json_body_is_parsed(self, fake_api) -> None:
        http = HTTPClient("token", fake_api.base_url)

        response = await http.request("get", "json")

        assert response.body == {"ok": 1}
        assert response.raw == '{"ok":1}'
        assert response.status == 200
        assert response.status_text == "OK"
        assert response.ok is True

    async def test_text_body_is_kept_raw(self, fake_api) -> None:
        http = HTTPClient("token", fake_api.base_url)

        response = await http.request("get", "text")

        assert response.body == "ok"
        assert "text/plain" in response.headers["Content-Type"]

    async def test_non_2xx_raises_with_envelope(self, fake_api) -> None:
        http = HTTPClient("token", fake_api.base_url)

        with pytest.raises(BotlistMeAPIError) as exc_info:
            await http.request("get", "bots/404")

        error = exc_info.value
        assert error.message == "404 Not Found"
        assert str(error) == "404 Not Found"
        assert error.status == 404
        assert error.status_text == "Not Found"
        assert error.ok is False
        assert error.raw == "Bot not found"
        assert error.body == "Bot not found"
        assert error.response.status == 404

    async def test_unparsable_json_error_keeps_raw_text(self, fake_api) -> None:
        http = HTTPClient("token", fake_api.base_url)

        with pytest.raises(BotlistMeAPIError) as exc_info:
            await http.request("get", "broken-json")

        error = exc_info.value
        assert error.status == 502
        assert error.raw == "Bad Gateway"
        assert error.body == "Bad Gateway"

    async def test_repeated_headers_are_joined(self, fake_api) -> None:
        http = HTTPClient("token", fake_api.base_url)

        response = await http.request("get", "tagged")

        assert response.headers["X-Tag"] == "a, b"
        assert "x-tag" not in response.headers

    async def test_unknown_route_is_remote_error(self, fake_api) -> None:
        http = HTTPClient("token", fake_api.base_url)

        with pytest.raises(BotlistMeAPIError) as exc_info:
            await http.request("get", "does/not/exist")

        assert exc_info.value.status == 404

    async def test_transport_error_propagates_unchanged(self) -> None:
        http = HTTPClient("token", f"http://127.0.0.1:{unused_port()}/api/v1")

        with pytest.raises(aiohttp.ClientError) as exc_info:
            await http.request("get", "bots/1")

        assert not isinstance(exc_info.value, BotlistMeError)

    async def test_unsupported_method(self, fake_api) -> None:
        http = HTTPClient("token", fake_api.base_url)

        with pytest.raises(ValueError):
            await http.request("delete", "bots/1")

        assert fake_api.requests == []


class TestRequestBuilding:
    """How requests are put on the wire."""

    async def test_url_is_prefixed_with_base(self, fake_api) -> None:
        http = HTTPClient("token", fake_api.base_url + "/")

        await http.request("get", "/bots/77")

        assert fake_api.requests[0].path == "/api/v1/bots/77"
        assert fake_api.requests[0].method == "GET"

    async def test_get_data_becomes_query_string(self, fake_api) -> None:
        http = HTTPClient("token", fake_api.base_url)

        response = await http.request("get", "echo", {"userId": "55", "page": 2})

        assert response.body["query"] == {"userId": "55", "page": "2"}
        assert fake_api.requests[0].body is None

    async def test_post_data_becomes_json_body(self, fake_api) -> None:
        http = HTTPClient("token", fake_api.base_url)

        await http.request("post", "echo", {"server_count": 10})

        recorded = fake_api.requests[0]
        assert recorded.method == "POST"
        assert "application/json" in recorded.headers["Content-Type"]
        assert json.loads(recorded.body) == {"server_count": 10}

    async def test_method_is_case_insensitive(self, fake_api) -> None:
        http = HTTPClient("token", fake_api.base_url)

        await http.request("POST", "echo", {"a": 1})

        assert fake_api.requests[0].method == "POST"

    async def test_authorization_header_is_the_raw_token(self, fake_api) -> None:
        http = HTTPClient("secret-token", fake_api.base_url)

        await http.request("get", "json")

        assert fake_api.requests[0].headers["Authorization"] == "secret-token"

    async def test_missing_token_warns_and_still_sends(self, fake_api) -> None:
        http = HTTPClient(None, fake_api.base_url)

        with capture_logs() as logs:
            response = await http.request("get", "json")

        assert response.ok
        assert "Authorization" not in fake_api.requests[0].headers
        assert any(
            entry["log_level"] == "warning" and "token" in entry["event"]
            for entry in logs
        )


def test_response_ok_follows_status() -> None:
    assert Response(status=200).ok is True
    assert Response(status=299).ok is True
    assert Response(status=300).ok is False
    assert Response(status=199).ok is False
    # ok cannot be forced against the status
    assert Response(status=500, ok=True).ok is False
