"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - Missing ANTHROPIC_API_KEY selects the heuristic quiz generator
    - Missing MODERATION_API_KEY selects the local keyword check

Design Decisions:
    - Provider keys are Optional: None switches the remote path off
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://studyfront:studyfront@db:5432/studyfront"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Completion service (quiz generation)
    anthropic_api_key: str | None = None
    anthropic_max_retries: int = 3
    anthropic_timeout_seconds: int = 60
    anthropic_base_delay_ms: int = 1000
    anthropic_max_delay_ms: int = 30_000
    quiz_model: str = "claude-3-5-haiku-latest"
    quiz_max_tokens: int = 2000
    quiz_temperature: float = 0.7

    # Content classifier (moderation)
    moderation_api_key: str | None = None
    moderation_base_url: str = "https://api.openai.com/v1"
    moderation_timeout_seconds: float = 10.0

    # Identity: header set by the upstream identity provider
    identity_header: str = "X-User-Id"

    # Local draft store (unauthenticated clients)
    local_store_path: str = ".studyfront/drafts.json"

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
