"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, tests pass plain fakes
    - KeyValueMedium is synchronous: local media are in-process (dict, small file)
    - UsageCounterRepository is a RELAXED counter: increment() reads then writes,
      so two concurrent increments for the same (user, day) can lose one update.
      Enforcement is "approximately N per day", not exact under concurrent abuse.
"""

from typing import Protocol

from studyfront.core.domain_types import QuotaKind, UserId, UtcDay
from studyfront.schemas.drafts import (
    DraftAnswer, DraftListing, DraftPost, LocalQuiz,
)


class KeyValueMedium(Protocol):
    """Durable string key-value medium backing the local draft store.

    get() returns None for a missing key. set()/remove() may raise OSError
    (medium unavailable or full); get() may raise OSError or ValueError
    (unreadable or corrupt medium).
    """
    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def remove(self, key: str) -> None: ...


class UsageCounterRepository(Protocol):
    """Per-(identity, kind, day) counters — implemented by shell."""
    async def get_count(self, user_id: UserId, kind: QuotaKind, day: UtcDay) -> int: ...
    async def increment(self, user_id: UserId, kind: QuotaKind, day: UtcDay) -> None: ...


class ContentClassifier(Protocol):
    """Remote moderation classifier. Raises UpstreamServiceError on any failure."""
    async def classify(self, text: str) -> tuple[bool, list[str]]: ...


class QuizCompleter(Protocol):
    """Completion service returning raw model text. Raises UpstreamServiceError."""
    async def complete_quiz(self, notes: str) -> str: ...


class DraftWriter(Protocol):
    """Authoritative writes used by the migration engine — implemented by shell.

    Each method raises (StudyFrontError or pydantic ValidationError) when the
    item is rejected; returning normally means the write is committed.
    """
    async def write_memberships(self, user_id: UserId, course_ids: list[str]) -> int: ...
    async def write_post(self, user_id: UserId, draft: DraftPost) -> None: ...
    async def write_answer(self, user_id: UserId, draft: DraftAnswer) -> None: ...
    async def write_listing(self, user_id: UserId, draft: DraftListing) -> None: ...
    async def write_quiz(self, user_id: UserId, draft: LocalQuiz) -> None: ...
