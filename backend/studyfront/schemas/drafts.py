"""Draft Schemas — shapes of artifacts held in the client-local draft store.

Invariants:
    - Drafts are lenient about content rules (lengths, enums): those are checked
      when a draft is replayed as an authenticated write, so a bad draft becomes
      one migration error instead of an unreadable store
    - Typed accessors read a collection that fails to parse as empty;
      LocalSnapshot keeps items raw so each one is validated on its own
    - price_cents is a non-negative integer
    - LocalQuiz.source_text is truncated to SOURCE_TEXT_MAX_CHARS
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import Field, field_validator

from studyfront.schemas.quiz import CamelModel, QuizQuestion


SOURCE_TEXT_MAX_CHARS: int = 5000


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


class DraftPost(CamelModel):
    id: str = Field(default_factory=_new_id)
    course_id: str
    title: str
    body: str
    tags: list[str] = Field(default_factory=list)
    is_anon: bool = False
    created_at: datetime = Field(default_factory=_now)


class DraftAnswer(CamelModel):
    id: str = Field(default_factory=_new_id)
    post_id: str
    body: str
    created_at: datetime = Field(default_factory=_now)


class DraftListing(CamelModel):
    id: str = Field(default_factory=_new_id)
    title: str
    description: str
    category: str
    price_cents: int = Field(ge=0)
    condition: str
    pickup_area: str
    image_urls: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_now)


class LocalQuiz(CamelModel):
    """AI quiz generated while unauthenticated."""
    id: str = Field(default_factory=_new_id)
    course_id: str | None = None
    source_text: str
    questions: list[QuizQuestion]
    created_at: datetime = Field(default_factory=_now)

    @field_validator("source_text")
    @classmethod
    def truncate_source(cls, v: str) -> str:
        return v[:SOURCE_TEXT_MAX_CHARS]


class UsageCounter(CamelModel):
    day: str
    count: int = Field(default=0, ge=0)


class LocalSnapshot(CamelModel):
    """Every migratable collection of the local store, read once.

    Items stay unvalidated: one malformed draft must not hide the others.
    `unreadable` names categories whose stored value could not be read as a
    list at all.
    """
    selected_course_ids: list[Any] = Field(default_factory=list)
    draft_posts: list[Any] = Field(default_factory=list)
    draft_answers: list[Any] = Field(default_factory=list)
    draft_listings: list[Any] = Field(default_factory=list)
    ai_quizzes: list[Any] = Field(default_factory=list)
    unreadable: list[str] = Field(default_factory=list, exclude=True)
