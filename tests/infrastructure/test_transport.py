"""Tests for the httpx transport."""

from __future__ import annotations

from urllib.parse import parse_qs

import httpx
import pytest

from formkit.config.settings import FormSettings
from formkit.domain.errors import TransportError
from formkit.infrastructure.transport import HttpxTransport, encode_payload


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://test")


class TestEncodePayload:
    def test_groups_repeated_names(self) -> None:
        encoded = encode_payload([("email", "a@b.c"), ("tags[]", "x"), ("tags[]", "y")])
        assert encoded == {"email": "a@b.c", "tags[]": ["x", "y"]}

    def test_preserves_order(self) -> None:
        encoded = encode_payload([("b", "1"), ("a", "2")])
        assert list(encoded) == ["b", "a"]


class TestHttpxTransport:
    @pytest.mark.asyncio
    async def test_sends_form_and_parses_reply(self) -> None:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"status": "ok", "id": 7})

        async with _client(handler) as client:
            transport = HttpxTransport(FormSettings(), client=client)
            reply = await transport.send(
                "post", "/signup", [("email", "a@b.c"), ("tags[]", "x"), ("tags[]", "y")]
            )

        assert reply.ok
        assert reply.model_extra == {"id": 7}
        request = requests[0]
        assert request.method == "POST"
        assert request.url.path == "/signup"
        assert request.headers["X-Requested-With"] == "XMLHttpRequest"
        body = parse_qs(request.content.decode())
        assert body == {"email": ["a@b.c"], "tags[]": ["x", "y"]}

    @pytest.mark.asyncio
    async def test_custom_header_value(self) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.headers["X-Requested-With"])
            return httpx.Response(200, json={"status": "ok"})

        async with _client(handler) as client:
            transport = HttpxTransport(FormSettings(requested_with="formkit"), client=client)
            await transport.send("post", "/x", [])

        assert seen == ["formkit"]

    @pytest.mark.asyncio
    async def test_failure_reply_is_returned(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"status": "fail", "fields": {"email": "taken"}})

        async with _client(handler) as client:
            reply = await HttpxTransport(client=client).send("post", "/x", [])

        assert not reply.ok
        assert reply.fields == {"email": "taken"}

    @pytest.mark.asyncio
    async def test_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(TransportError, match="failed") as exc_info:
                await HttpxTransport(client=client).send("post", "/x", [])

        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_non_json_reply(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="<html>oops</html>")

        async with _client(handler) as client:
            with pytest.raises(TransportError, match="Malformed"):
                await HttpxTransport(client=client).send("post", "/x", [])

    @pytest.mark.asyncio
    async def test_reply_without_status(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"fields": {}})

        async with _client(handler) as client:
            with pytest.raises(TransportError, match="Malformed"):
                await HttpxTransport(client=client).send("post", "/x", [])
