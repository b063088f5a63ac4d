"""Request Dependencies — identity, moderation gate and quiz generator.

Invariants:
    - Identity is the trusted header set by the upstream identity provider
      (settings.identity_header); an empty header means "no identity"
    - require_user(action) raises UnauthorizedError before the handler runs
    - Remote clients are built once per process and only when their key is set;
      close_remote_clients() closes them on shutdown

Design Decisions:
    - lru_cache'd factories: tests replace them via app.dependency_overrides
"""

from functools import lru_cache

from fastapi import Depends, Request

from studyfront.config import get_settings
from studyfront.core.domain_types import UserId
from studyfront.core.errors import UnauthorizedError
from studyfront.infrastructure.anthropic_client import ResilientAnthropicClient
from studyfront.infrastructure.moderation_client import ModerationClient
from studyfront.services.moderation_gate import ModerationGate
from studyfront.services.quiz_generator import AnthropicQuizCompleter, QuizGenerator


def get_identity(request: Request) -> UserId | None:
    value = request.headers.get(get_settings().identity_header, "").strip()
    return UserId(value) if value else None


def require_user(action: str):
    """Dependency factory: the caller's identity, or 401 naming `action`."""

    def dependency(user_id: UserId | None = Depends(get_identity)) -> UserId:
        if user_id is None:
            raise UnauthorizedError(action)
        return user_id

    return dependency


@lru_cache
def get_moderation_client() -> ModerationClient | None:
    settings = get_settings()
    if not settings.moderation_api_key:
        return None
    return ModerationClient(
        api_key=settings.moderation_api_key,
        base_url=settings.moderation_base_url,
        timeout_seconds=settings.moderation_timeout_seconds,
    )


@lru_cache
def get_anthropic_client() -> ResilientAnthropicClient | None:
    settings = get_settings()
    if not settings.anthropic_api_key:
        return None
    return ResilientAnthropicClient(
        api_key=settings.anthropic_api_key,
        max_retries=settings.anthropic_max_retries,
        base_delay_ms=settings.anthropic_base_delay_ms,
        max_delay_ms=settings.anthropic_max_delay_ms,
        timeout_seconds=settings.anthropic_timeout_seconds,
    )


@lru_cache
def get_moderation_gate() -> ModerationGate:
    return ModerationGate(get_moderation_client())


@lru_cache
def get_quiz_generator() -> QuizGenerator:
    client = get_anthropic_client()
    if client is None:
        return QuizGenerator()
    settings = get_settings()
    return QuizGenerator(AnthropicQuizCompleter(
        client,
        model=settings.quiz_model,
        max_tokens=settings.quiz_max_tokens,
        temperature=settings.quiz_temperature,
    ))


async def close_remote_clients() -> None:
    """Close the clients built so far and forget them; later calls rebuild."""
    for factory in (get_moderation_client, get_anthropic_client):
        if factory.cache_info().currsize:
            client = factory()
            if client is not None:
                await client.aclose()
        factory.cache_clear()
    get_moderation_gate.cache_clear()
    get_quiz_generator.cache_clear()
