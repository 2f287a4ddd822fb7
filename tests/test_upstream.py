"""Tests for the upstream client and the relay service."""

import json

import httpx
import pytest

from bridge.configs import Settings
from bridge.errors import UpstreamError
from bridge.services import extract_caller_key, relay_message
from bridge.upstream import UpstreamClient

from .conftest import CHAT_RESPONSE


def _upstream(handler, settings=None) -> UpstreamClient:
    settings = settings or Settings(api_key="sk-test", log_file=None)
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return UpstreamClient(settings, client)


def test_build_headers():
    upstream = UpstreamClient(Settings(api_key="sk-test"), client=None)
    body = b'{"model": "m1"}'
    assert upstream.build_headers(body) == {
        "Content-Type": "application/json",
        "Content-Length": str(len(body)),
        "Authorization": "Bearer sk-test",
        "HTTP-Referer": "https://claude-code.local",
        "X-Title": "Claude Code Smart Router",
    }


@pytest.mark.asyncio
async def test_chat_completion_posts_payload():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=CHAT_RESPONSE)

    upstream = _upstream(handler)
    payload = {"model": "m1", "messages": [], "max_tokens": 4096, "temperature": 1, "stream": False}
    result = await upstream.chat_completion(payload)

    assert result == CHAT_RESPONSE
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "https://openrouter.ai/api/v1/chat/completions"
    assert json.loads(request.content) == payload
    assert request.headers["content-length"] == str(len(request.content))
    assert request.headers["authorization"] == "Bearer sk-test"
    await upstream.client.aclose()


@pytest.mark.asyncio
async def test_chat_completion_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    upstream = _upstream(handler)
    with pytest.raises(UpstreamError, match="Connection refused") as exc_info:
        await upstream.chat_completion({"model": "m1", "messages": []})
    assert exc_info.value.status_code == 500
    assert exc_info.value.error_type == "api_error"
    await upstream.client.aclose()


@pytest.mark.asyncio
async def test_chat_completion_unparseable_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="<html>Bad gateway</html>")

    upstream = _upstream(handler)
    with pytest.raises(UpstreamError):
        await upstream.chat_completion({"model": "m1", "messages": []})
    await upstream.client.aclose()


@pytest.mark.asyncio
async def test_chat_completion_error_status_with_json_body_is_returned():
    error_body = {"error": {"message": "No auth credentials found", "code": 401}}

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json=error_body)

    upstream = _upstream(handler)
    assert await upstream.chat_completion({"model": "m1", "messages": []}) == error_body
    await upstream.client.aclose()


@pytest.mark.asyncio
async def test_relay_message_round_trip():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={**CHAT_RESPONSE, "model": "upstream/other"})

    upstream = _upstream(handler)
    body = {"model": "m1", "system": "sys", "messages": [{"role": "user", "content": "hi"}]}
    result = await relay_message(upstream, body, caller_key="caller")

    assert seen[0]["messages"][0] == {"role": "system", "content": "sys"}
    assert result["model"] == "m1"
    assert result["content"] == [{"type": "text", "text": "hello"}]
    assert result["usage"] == {"input_tokens": 5, "output_tokens": 2}
    await upstream.client.aclose()


@pytest.mark.asyncio
async def test_relay_message_warns_on_empty_choices(log_messages):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"id": "x", "choices": []})

    upstream = _upstream(handler)
    result = await relay_message(upstream, {"model": "m1", "messages": []})

    assert result["stop_reason"] == "error"
    assert any("No choices in response" in m for m in log_messages)
    await upstream.client.aclose()


@pytest.mark.parametrize(
    "headers, expected",
    [
        ({"x-api-key": "k1"}, "k1"),
        ({"authorization": "Bearer k2"}, "k2"),
        ({"authorization": "bearer k3"}, "k3"),
        ({"x-api-key": "k1", "authorization": "Bearer k2"}, "k1"),
        ({"authorization": "k4"}, "k4"),
        ({}, None),
    ],
)
def test_extract_caller_key(headers, expected):
    assert extract_caller_key(headers) == expected
