"""Local Draft Store — namespaced, best-effort cache of unauthenticated-mode artifacts.

Invariants:
    - Every key lives under the "sf:" namespace (StorageKey)
    - get() never raises: missing key, corrupt JSON, schema mismatch and an
      unavailable medium all return the caller's default
    - set() never raises: the outcome is returned as a WriteStatus and
      failures are logged
    - add_* accessors read the whole collection, append one item and write
      the whole collection back (single writer assumed)
    - Artifact accessors (post, answer, listing, quiz) set hasMeaningfulAction
      once, only when it is not already set
    - ai_usage(day) reads a counter stored for another day as count 0
    - snapshot() keeps collection items raw; a stored value that is not a
      readable list is named in snapshot.unreadable, never read as empty

Design Decisions:
    - Medium injected (KeyValueMedium): InMemoryMedium, or JsonFileMedium via
      open_local_store(); medium=None models "no storage available"
    - Values validated through pydantic TypeAdapters on read
"""

import json
import logging
from enum import Enum
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError
from pydantic_core import to_jsonable_python

from studyfront.config import get_settings
from studyfront.core.domain_types import UtcDay, WriteStatus
from studyfront.core.enforce_quota import utc_day
from studyfront.core.repository_protocols import KeyValueMedium
from studyfront.infrastructure.local_medium import JsonFileMedium
from studyfront.schemas.drafts import (
    DraftAnswer,
    DraftListing,
    DraftPost,
    LocalQuiz,
    LocalSnapshot,
    UsageCounter,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StorageKey(str, Enum):
    SELECTED_SCHOOL_ID = "sf:selectedSchoolId"
    SELECTED_COURSE_IDS = "sf:selectedCourseIds"
    DRAFT_POSTS = "sf:draftPosts"
    DRAFT_ANSWERS = "sf:draftAnswers"
    DRAFT_LISTINGS = "sf:draftListings"
    AI_QUIZZES = "sf:aiQuizzes"
    AI_USAGE = "sf:aiUsage"
    HAS_MEANINGFUL_ACTION = "sf:hasMeaningfulAction"
    DISMISSED_SIGNUP_PROMPT = "sf:dismissedSignupPrompt"


_IDS = TypeAdapter(list[str])
_OPTIONAL_ID = TypeAdapter(str | None)
_FLAG = TypeAdapter(bool)
_POSTS = TypeAdapter(list[DraftPost])
_ANSWERS = TypeAdapter(list[DraftAnswer])
_LISTINGS = TypeAdapter(list[DraftListing])
_QUIZZES = TypeAdapter(list[LocalQuiz])
_USAGE = TypeAdapter(UsageCounter)
_RAW_LIST = TypeAdapter(list[Any])


# (migration category, LocalSnapshot field, key)
_SNAPSHOT_FIELDS: tuple[tuple[str, str, StorageKey], ...] = (
    ("memberships", "selected_course_ids", StorageKey.SELECTED_COURSE_IDS),
    ("posts", "draft_posts", StorageKey.DRAFT_POSTS),
    ("answers", "draft_answers", StorageKey.DRAFT_ANSWERS),
    ("listings", "draft_listings", StorageKey.DRAFT_LISTINGS),
    ("quizzes", "ai_quizzes", StorageKey.AI_QUIZZES),
)


class LocalDraftStore:
    """Client-local store for drafts, selections and the local AI usage counter."""

    def __init__(self, medium: KeyValueMedium | None):
        self._medium = medium

    @property
    def available(self) -> bool:
        return self._medium is not None

    # ─── Generic access ──────────────────────────────────────────

    def get(
        self, key: str, default: T, adapter: TypeAdapter | None = None,
    ) -> T:
        """Read and decode `key`; `default` on any failure."""
        if self._medium is None:
            return default
        try:
            raw = self._medium.get(key)
        except (OSError, ValueError) as e:
            logger.warning(f"Local store read failed for {key}: {e}")
            return default
        if raw is None:
            return default
        try:
            if adapter is not None:
                return adapter.validate_json(raw)
            return json.loads(raw)
        except (ValueError, ValidationError) as e:
            logger.warning(f"Discarding unreadable local value for {key}: {e}")
            return default

    def set(self, key: str, value: Any) -> WriteStatus:
        """Encode and write `value`. Failures are reported, not raised."""
        if self._medium is None:
            logger.warning(f"Local store unavailable, dropped write to {key}")
            return WriteStatus.UNAVAILABLE
        try:
            encoded = json.dumps(to_jsonable_python(value, by_alias=True))
            self._medium.set(key, encoded)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to save {key} to local store: {e}")
            return WriteStatus.FAILED
        return WriteStatus.OK

    def remove(self, key: str) -> WriteStatus:
        if self._medium is None:
            return WriteStatus.UNAVAILABLE
        try:
            self._medium.remove(key)
        except OSError as e:
            logger.error(f"Failed to remove {key} from local store: {e}")
            return WriteStatus.FAILED
        return WriteStatus.OK

    def clear(self) -> WriteStatus:
        """Remove every namespaced key. Reports the worst outcome."""
        outcome = WriteStatus.OK
        for key in StorageKey:
            status = self.remove(key.value)
            if status is not WriteStatus.OK:
                outcome = status
        return outcome

    # ─── Selections ──────────────────────────────────────────────

    def selected_school_id(self) -> str | None:
        return self.get(StorageKey.SELECTED_SCHOOL_ID.value, None, _OPTIONAL_ID)

    def set_selected_school_id(self, school_id: str) -> WriteStatus:
        return self.set(StorageKey.SELECTED_SCHOOL_ID.value, school_id)

    def selected_course_ids(self) -> list[str]:
        return self.get(StorageKey.SELECTED_COURSE_IDS.value, [], _IDS)

    def set_selected_course_ids(self, course_ids: list[str]) -> WriteStatus:
        return self.set(StorageKey.SELECTED_COURSE_IDS.value, course_ids)

    # ─── Drafts ──────────────────────────────────────────────────

    def draft_posts(self) -> list[DraftPost]:
        return self.get(StorageKey.DRAFT_POSTS.value, [], _POSTS)

    def add_draft_post(self, post: DraftPost) -> WriteStatus:
        return self._append_artifact(StorageKey.DRAFT_POSTS, self.draft_posts(), post)

    def draft_answers(self) -> list[DraftAnswer]:
        return self.get(StorageKey.DRAFT_ANSWERS.value, [], _ANSWERS)

    def add_draft_answer(self, answer: DraftAnswer) -> WriteStatus:
        return self._append_artifact(
            StorageKey.DRAFT_ANSWERS, self.draft_answers(), answer,
        )

    def draft_listings(self) -> list[DraftListing]:
        return self.get(StorageKey.DRAFT_LISTINGS.value, [], _LISTINGS)

    def add_draft_listing(self, listing: DraftListing) -> WriteStatus:
        return self._append_artifact(
            StorageKey.DRAFT_LISTINGS, self.draft_listings(), listing,
        )

    def ai_quizzes(self) -> list[LocalQuiz]:
        return self.get(StorageKey.AI_QUIZZES.value, [], _QUIZZES)

    def add_ai_quiz(self, quiz: LocalQuiz) -> WriteStatus:
        return self._append_artifact(StorageKey.AI_QUIZZES, self.ai_quizzes(), quiz)

    def _append_artifact(
        self, key: StorageKey, items: list, item: Any,
    ) -> WriteStatus:
        items.append(item)
        status = self.set(key.value, items)
        if status is WriteStatus.OK:
            self.mark_meaningful_action()
        return status

    # ─── AI usage ────────────────────────────────────────────────

    def ai_usage(self, day: UtcDay | None = None) -> UsageCounter:
        """Today's local counter; a counter from another day reads as 0."""
        today = day or utc_day()
        usage = self.get(StorageKey.AI_USAGE.value, None, _USAGE)
        if usage is None or usage.day != today:
            return UsageCounter(day=today, count=0)
        return usage

    def increment_ai_usage(
        self, day: UtcDay | None = None,
    ) -> tuple[UsageCounter, WriteStatus]:
        """Add one generation to today's counter, overwriting a stale day."""
        usage = self.ai_usage(day)
        updated = UsageCounter(day=usage.day, count=usage.count + 1)
        return updated, self.set(StorageKey.AI_USAGE.value, updated)

    # ─── Sign-up nudge flags ─────────────────────────────────────

    def has_meaningful_action(self) -> bool:
        return self.get(StorageKey.HAS_MEANINGFUL_ACTION.value, False, _FLAG)

    def mark_meaningful_action(self) -> WriteStatus:
        if self.has_meaningful_action():
            return WriteStatus.OK
        return self.set(StorageKey.HAS_MEANINGFUL_ACTION.value, True)

    def has_dismissed_signup_prompt(self) -> bool:
        return self.get(StorageKey.DISMISSED_SIGNUP_PROMPT.value, False, _FLAG)

    def dismiss_signup_prompt(self) -> WriteStatus:
        return self.set(StorageKey.DISMISSED_SIGNUP_PROMPT.value, True)

    # ─── Whole-store views ───────────────────────────────────────

    def snapshot(self) -> LocalSnapshot:
        """Every migratable collection, read once, items left unvalidated."""
        collections: dict[str, list] = {}
        unreadable: list[str] = []
        for category, field, key in _SNAPSHOT_FIELDS:
            items = self._raw_collection(key)
            if items is None:
                unreadable.append(category)
                items = []
            collections[field] = items
        return LocalSnapshot(**collections, unreadable=unreadable)

    def restore(self, snapshot: LocalSnapshot) -> WriteStatus:
        """Write every collection of `snapshot`. Reports the worst outcome."""
        outcome = WriteStatus.OK
        for _, field, key in _SNAPSHOT_FIELDS:
            status = self.set(key.value, getattr(snapshot, field))
            if status is not WriteStatus.OK:
                outcome = status
        return outcome

    def _raw_collection(self, key: StorageKey) -> list | None:
        """Stored list as plain JSON values; None when present but unreadable."""
        if self._medium is None:
            return []
        try:
            raw = self._medium.get(key.value)
        except (OSError, ValueError) as e:
            logger.warning(f"Local store read failed for {key.value}: {e}")
            return None
        if raw is None:
            return []
        try:
            return _RAW_LIST.validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Unreadable local collection {key.value}: {e}")
            return None


def open_local_store(path: str | None = None) -> LocalDraftStore:
    """Store persisted at `path`, defaulting to settings.local_store_path."""
    return LocalDraftStore(JsonFileMedium(path or get_settings().local_store_path))
