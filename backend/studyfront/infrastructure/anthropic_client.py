"""Resilient Anthropic Client — Messages API calls for quiz completion, with retry and error mapping.

Invariants:
    - Rate limits (429): retried, waiting Retry-After when the server sends it
    - Transient failures (5xx, 529 overloaded, connection drop): retried with
      exponential backoff, at most RetryPolicy.max_retries times
    - Timeouts and other client errors (4xx): raised on the first occurrence
    - Every failure leaves as CompletionServiceError with an error_type of
      rate_limit, connection_error, timeout or client_error
"""

import asyncio
import logging
import random
from dataclasses import dataclass

import anthropic
from anthropic import (
    APIConnectionError,
    APIError,
    APIStatusError,
    APITimeoutError,
    InternalServerError,
    RateLimitError,
)

from studyfront.core.errors import CompletionServiceError, ErrorContext

logger = logging.getLogger(__name__)

_OVERLOADED_STATUS = 529


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int = 3
    base_delay_ms: int = 1000
    max_delay_ms: int = 30_000

    def backoff_ms(self, attempt: int) -> int:
        """Exponential delay for `attempt` (0-based), capped, with ±25% jitter."""
        delay = min(self.max_delay_ms, (2 ** attempt) * self.base_delay_ms)
        return int(delay * random.uniform(0.75, 1.25))  # nosec B311


def classify_api_error(e: APIError) -> str:
    """Failure kind: rate_limit, timeout, transient or client_error."""
    if isinstance(e, RateLimitError):
        return "rate_limit"
    # APITimeoutError subclasses APIConnectionError
    if isinstance(e, APITimeoutError):
        return "timeout"
    if isinstance(e, (APIConnectionError, InternalServerError)):
        return "transient"
    if isinstance(e, APIStatusError) and e.status_code == _OVERLOADED_STATUS:
        return "transient"
    return "client_error"


def retry_after_ms(e: APIError) -> int | None:
    """Retry-After header of `e` in milliseconds, if present and numeric."""
    response = getattr(e, "response", None)
    if response is None:
        return None
    value = response.headers.get("retry-after")
    if not value:
        return None
    try:
        return int(float(value) * 1000)
    except ValueError:
        return None


class ResilientAnthropicClient:
    def __init__(
        self,
        api_key: str,
        max_retries: int = 3,
        base_delay_ms: int = 1000,
        max_delay_ms: int = 30_000,
        timeout_seconds: int = 60,
    ):
        self.client = anthropic.AsyncAnthropic(
            api_key=api_key,
            timeout=timeout_seconds,
        )
        self.policy = RetryPolicy(max_retries, base_delay_ms, max_delay_ms)

    async def create_message(
        self,
        *,
        model: str,
        max_tokens: int,
        system: str,
        messages: list,
        temperature: float | None = None,
        context: ErrorContext | None = None,
    ):
        kwargs: dict = {
            "model": model,
            "max_tokens": max_tokens,
            "system": system,
            "messages": messages,
        }
        if temperature is not None:
            kwargs["temperature"] = temperature

        attempt = 0
        while True:
            try:
                response = await self.client.messages.create(**kwargs)
            except APIError as e:
                delay_ms = self._retry_delay(e, attempt, context)
                logger.warning(
                    f"Completion API failed, retry in {delay_ms}ms: {e}",
                    extra={"attempt": attempt + 1, "service": "Completion API"},
                )
                await asyncio.sleep(delay_ms / 1000)
                attempt += 1
                continue

            logger.info(
                "Completion API success",
                extra={
                    "attempt": attempt + 1,
                    "input_tokens": response.usage.input_tokens,
                    "output_tokens": response.usage.output_tokens,
                },
            )
            return response

    def _retry_delay(
        self, e: APIError, attempt: int, context: ErrorContext | None,
    ) -> int:
        """Milliseconds to wait before the next attempt, or raise."""
        kind = classify_api_error(e)
        if kind == "timeout":
            raise CompletionServiceError("API timeout", "timeout", context=context)
        if kind == "client_error":
            raise CompletionServiceError(str(e), "client_error", context=context)

        server_hint = retry_after_ms(e) if kind == "rate_limit" else None
        if attempt >= self.policy.max_retries:
            if kind == "rate_limit":
                raise CompletionServiceError(
                    "Rate limit exceeded after retries",
                    "rate_limit",
                    retry_after_ms=server_hint,
                    context=context,
                )
            raise CompletionServiceError(
                f"Transient failure after {self.policy.max_retries} retries: {e}",
                "connection_error",
                context=context,
            )
        return server_hint or self.policy.backoff_ms(attempt)

    async def aclose(self) -> None:
        await self.client.close()
