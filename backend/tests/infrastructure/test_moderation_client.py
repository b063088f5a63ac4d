"""Moderation Client — request shape and failure mapping over httpx.MockTransport."""

import json

import httpx
import pytest

from studyfront.core.errors import UpstreamServiceError
from studyfront.infrastructure.moderation_client import ModerationClient


def _client(handler) -> ModerationClient:
    return ModerationClient(
        api_key="sk-test", base_url="https://moderation.test/v1",
        transport=httpx.MockTransport(handler),
    )


async def test_posts_input_with_bearer_key_and_returns_true_categories():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"results": [{
            "flagged": True,
            "categories": {"harassment": True, "violence": False, "hate": True},
        }]})

    client = _client(handler)
    flagged, categories = await client.classify("some text")
    await client.aclose()

    assert seen == {
        "url": "https://moderation.test/v1/moderations",
        "auth": "Bearer sk-test",
        "body": {"input": "some text"},
    }
    assert flagged is True
    assert categories == ["harassment", "hate"]


async def test_unflagged_result():
    client = _client(lambda r: httpx.Response(200, json={"results": [{"flagged": False, "categories": {}}]}))
    assert await client.classify("hello") == (False, [])


@pytest.mark.parametrize("response, error_type", [
    (httpx.Response(500, text="boom"), "status_error"),
    (httpx.Response(200, text="<html>"), "bad_response"),
    (httpx.Response(200, json={"results": []}), "bad_response"),
    (httpx.Response(200, json={"unexpected": True}), "bad_response"),
])
async def test_bad_responses_raise_upstream_error(response, error_type):
    client = _client(lambda r: response)
    with pytest.raises(UpstreamServiceError) as info:
        await client.classify("text")
    assert info.value.error_type == error_type


async def test_network_failure_raises_upstream_error():
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    with pytest.raises(UpstreamServiceError) as info:
        await _client(handler).classify("text")
    assert info.value.error_type == "connection_error"


async def test_timeout_raises_upstream_error():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(UpstreamServiceError) as info:
        await _client(handler).classify("text")
    assert info.value.error_type == "timeout"
