import json

import httpx
import pytest

from social_publisher.infrastructure.ayrshare_client import AyrshareClient, AyrsharePublishError
from social_publisher.models.platform import Platform


def _client(handler, api_key="test-key"):
    return AyrshareClient(api_key=api_key, base_url="https://ayrshare.test/api", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_publish_sends_payload_and_returns_id():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"status": "success", "id": "ayr-789"})

    result = await _client(handler).publish("hi", [Platform.facebook, "x"], ["https://cdn/a.png"])

    assert result.external_id == "ayr-789"
    assert seen == {
        "url": "https://ayrshare.test/api/post",
        "auth": "Bearer test-key",
        "body": {"post": "hi", "platforms": ["facebook", "x"], "mediaUrls": ["https://cdn/a.png"]},
    }


@pytest.mark.asyncio
async def test_media_urls_are_omitted_when_empty():
    bodies = []

    def handler(request):
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"id": 42})

    result = await _client(handler).publish("hi", ["linkedin"], [])

    assert bodies == [{"post": "hi", "platforms": ["linkedin"]}]
    assert result.external_id == "42"


@pytest.mark.asyncio
async def test_error_response_message_is_raised():
    client = _client(lambda request: httpx.Response(400, json={"status": "error", "message": "Not linked: tiktok"}))

    with pytest.raises(AyrsharePublishError) as exc_info:
        await client.publish("hi", ["tiktok"])

    assert exc_info.value.message == "Not linked: tiktok"
    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_non_string_error_message_is_serialized():
    client = _client(lambda request: httpx.Response(400, json={"status": "error", "message": {"code": 137, "text": "dup"}}))

    with pytest.raises(AyrsharePublishError) as exc_info:
        await client.publish("hi", ["x"])

    assert exc_info.value.message == '{"code": 137, "text": "dup"}'
    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_error_response_without_message_uses_default():
    client = _client(lambda request: httpx.Response(500, json={}))

    with pytest.raises(AyrsharePublishError, match="Failed to post"):
        await client.publish("hi", ["x"])


@pytest.mark.asyncio
async def test_non_json_response_is_a_publish_error():
    client = _client(lambda request: httpx.Response(502, text="<html>bad gateway</html>"))

    with pytest.raises(AyrsharePublishError, match=r"HTTP 502"):
        await client.publish("hi", ["x"])


@pytest.mark.asyncio
async def test_missing_api_key_fails_without_calling_out():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={"id": "x"})

    client = _client(handler, api_key=None)
    client.api_key = None

    with pytest.raises(AyrsharePublishError, match="AYRSHARE_API_KEY is not configured"):
        await client.publish("hi", ["x"])
    assert calls == []


@pytest.mark.asyncio
async def test_transport_errors_propagate():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(httpx.ConnectError):
        await _client(handler).publish("hi", ["x"])
