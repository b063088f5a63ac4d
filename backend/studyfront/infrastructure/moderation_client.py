"""Moderation Client — remote content classifier over an OpenAI-compatible /moderations endpoint.

Invariants:
    - classify() returns (flagged, [category, ...]) or raises UpstreamServiceError
    - Network errors, timeouts, non-2xx statuses and unexpected JSON shapes all
      raise UpstreamServiceError; nothing else escapes
    - Categories are returned in the order the service lists them, true ones only

Design Decisions:
    - httpx.AsyncClient created lazily and reused; close via aclose()
    - Response validated with pydantic before use
"""

import logging

import httpx
from pydantic import BaseModel, ValidationError

from studyfront.core.errors import UpstreamServiceError

logger = logging.getLogger(__name__)

SERVICE_NAME = "Moderation API"


class _ModerationResult(BaseModel):
    flagged: bool
    categories: dict[str, bool | None] = {}


class _ModerationResponse(BaseModel):
    results: list[_ModerationResult]


class ModerationClient:
    """Async client for a hosted moderation classifier."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = httpx.Timeout(timeout_seconds)
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                headers={"Authorization": f"Bearer {self._api_key}"},
                transport=self._transport,
            )
        return self._client

    async def classify(self, text: str) -> tuple[bool, list[str]]:
        client = self._ensure_client()
        try:
            response = await client.post("/moderations", json={"input": text})
            response.raise_for_status()
            payload = _ModerationResponse.model_validate(response.json())
        except httpx.TimeoutException as e:
            raise UpstreamServiceError(str(e) or "timeout", SERVICE_NAME, "timeout")
        except httpx.HTTPStatusError as e:
            raise UpstreamServiceError(
                f"HTTP {e.response.status_code}", SERVICE_NAME, "status_error",
            )
        except httpx.HTTPError as e:
            raise UpstreamServiceError(str(e), SERVICE_NAME, "connection_error")
        except (ValueError, ValidationError) as e:
            raise UpstreamServiceError(
                f"Unexpected response shape: {e}", SERVICE_NAME, "bad_response",
            )

        if not payload.results:
            raise UpstreamServiceError(
                "Empty results list", SERVICE_NAME, "bad_response",
            )
        result = payload.results[0]
        categories = [name for name, hit in result.categories.items() if hit]
        return result.flagged, categories

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
