import httpx
import pytest

from integrations.webhook import WebhookClient
from models.results import Failure, Success


def _client(handler):
    return WebhookClient(base_url="http://hook.test/webhook/", timeout=5, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_missing_language_is_filled_from_request():
    reply = {"success": True, "response": {"text": "Akwaaba", "confidence": 0.5}}
    client = _client(lambda request: httpx.Response(200, json=reply))

    result = await client.post_chat("hello", "conv_1", "twi", "user_1")

    assert isinstance(result, Success)
    assert result.value.language_detected == "twi"
    assert result.value.citations == []


@pytest.mark.asyncio
async def test_malformed_chat_reply_is_a_failure():
    reply = {"success": True, "response": {"confidence": 3}}
    client = _client(lambda request: httpx.Response(200, json=reply))

    result = await client.post_chat("hello", None, "en", None)

    assert isinstance(result, Failure)
    assert "Malformed" in result.reason


@pytest.mark.asyncio
async def test_http_error_status_is_reported():
    client = _client(lambda request: httpx.Response(404))

    result = await client.fetch_stats()

    assert isinstance(result, Failure)
    assert result.reason == "GET http://hook.test/webhook/stats returned HTTP 404"


@pytest.mark.asyncio
async def test_timeout_is_a_failure():
    def handler(request):
        raise httpx.ReadTimeout("too slow", request=request)

    result = await _client(handler).post_chat("hello", None, "en", None)

    assert isinstance(result, Failure)
    assert "ReadTimeout" in result.reason


@pytest.mark.asyncio
async def test_malformed_stats_reply_is_a_failure():
    client = _client(lambda request: httpx.Response(200, json={"top_questions": "lots"}))

    result = await client.fetch_stats()

    assert isinstance(result, Failure)
