"""Migration Engine — one-shot replay of the local draft store into the authoritative store.

Invariants:
    - The local store is read exactly once (snapshot) before the first write
    - Categories run in MIGRATION_CATEGORIES order: memberships, posts,
      answers, listings, quizzes
    - Memberships are one batch: success counts every requested id, failure
      records one aggregate error
    - Every other item is validated and written on its own; a malformed or
      rejected item becomes one message in result.errors and processing
      continues with the next item
    - A stored collection that cannot be read at all is one error for its
      category, so the local store is kept
    - Counters grow only on a confirmed write
    - Local store cleared iff no errors AND at least one item migrated
    - No retries, no idempotency key: re-running after a partial failure may
      write an item twice

Design Decisions:
    - Writes go through DraftWriter; SqlDraftWriter reuses the HTTP handlers
      and their checks
"""

import logging
from typing import Any, Awaitable, Callable

from pydantic import BaseModel, TypeAdapter, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from studyfront.core.domain_types import UserId, WriteStatus
from studyfront.core.errors import StudyFrontError
from studyfront.core.migration_outcome import (
    MIGRATION_CATEGORIES,
    MigrationResult,
    describe_item_failure,
    describe_unreadable,
)
from studyfront.core.repository_protocols import DraftWriter
from studyfront.infrastructure.database import translate_db_error
from studyfront.schemas.content import AnswerCreate, ListingCreate, PostCreate
from studyfront.schemas.drafts import (
    DraftAnswer, DraftListing, DraftPost, LocalQuiz, LocalSnapshot,
)
from studyfront.services.course_memberships import join_courses
from studyfront.services.draft_store import LocalDraftStore
from studyfront.services.handle_marketplace import MarketplaceHandlers
from studyfront.services.handle_qa import QAHandlers
from studyfront.services.handle_quiz import QuizHandlers
from studyfront.services.moderation_gate import ModerationGate

logger = logging.getLogger(__name__)

# Errors that reject one item without aborting the migration
ITEM_ERRORS = (StudyFrontError, ValidationError)

_COURSE_IDS = TypeAdapter(list[str])


class MigrationEngine:
    def __init__(self, store: LocalDraftStore, writer: DraftWriter):
        self.store = store
        self.writer = writer

    async def migrate(self, user_id: UserId) -> MigrationResult:
        snapshot = self.store.snapshot()
        result = MigrationResult()
        items = self._item_plans(snapshot)

        for category in MIGRATION_CATEGORIES:
            if category in snapshot.unreadable:
                result.errors.append(describe_unreadable(category))
            elif category == "memberships":
                await self._migrate_memberships(
                    result, user_id, snapshot.selected_course_ids,
                )
            else:
                label, model, drafts, write = items[category]
                confirmed = await self._replay(
                    result, user_id, label, model, drafts, write,
                )
                setattr(result.migrated, category, confirmed)

        if result.should_clear_local():
            result.local_cleared = self.store.clear() is WriteStatus.OK

        logger.info(
            "Local drafts migrated",
            extra={
                "user_id": user_id,
                "migrated": result.migrated.total,
                "error_count": len(result.errors),
            },
        )
        return result

    def _item_plans(self, snapshot: LocalSnapshot) -> dict[str, tuple]:
        """category → (item label, draft model, raw items, writer method)."""
        return {
            "posts": ("post", DraftPost, snapshot.draft_posts, self.writer.write_post),
            "answers": (
                "answer", DraftAnswer, snapshot.draft_answers, self.writer.write_answer,
            ),
            "listings": (
                "listing", DraftListing, snapshot.draft_listings,
                self.writer.write_listing,
            ),
            "quizzes": ("quiz", LocalQuiz, snapshot.ai_quizzes, self.writer.write_quiz),
        }

    async def _migrate_memberships(
        self, result: MigrationResult, user_id: UserId, raw_ids: list[Any],
    ) -> None:
        if not raw_ids:
            return
        try:
            course_ids = _COURSE_IDS.validate_python(raw_ids)
            result.migrated.memberships = await self.writer.write_memberships(
                user_id, course_ids,
            )
        except ITEM_ERRORS as e:
            result.errors.append(describe_item_failure("memberships", e))

    async def _replay(
        self,
        result: MigrationResult,
        user_id: UserId,
        label: str,
        model: type[BaseModel],
        items: list[Any],
        write: Callable[[UserId, Any], Awaitable[None]],
    ) -> int:
        """Validate and write items one by one; returns how many were confirmed."""
        confirmed = 0
        for raw in items:
            try:
                await write(user_id, model.model_validate(raw))
            except ITEM_ERRORS as e:
                result.errors.append(describe_item_failure(label, e, _title_of(raw)))
                continue
            confirmed += 1
        return confirmed


def _title_of(raw: Any) -> str | None:
    title = raw.get("title") if isinstance(raw, dict) else None
    return title if isinstance(title, str) else None


class SqlDraftWriter:
    """DraftWriter over the content handlers and one AsyncSession."""

    def __init__(self, db: AsyncSession, gate: ModerationGate):
        self.db = db
        self.qa = QAHandlers(db, gate)
        self.marketplace = MarketplaceHandlers(db, gate)
        self.quizzes = QuizHandlers(db, gate)

    async def write_memberships(self, user_id: UserId, course_ids: list[str]) -> int:
        async def write():
            count = await join_courses(self.db, user_id, course_ids)
            await self.db.commit()
            return count
        return await self._guarded("memberships", write)

    async def write_post(self, user_id: UserId, draft: DraftPost) -> None:
        async def write():
            body = PostCreate(
                course_id=draft.course_id,
                title=draft.title,
                body=draft.body,
                tags=draft.tags,
                is_anon=draft.is_anon,
            )
            await self.qa.create_post(user_id, body)
        await self._guarded("post", write)

    async def write_answer(self, user_id: UserId, draft: DraftAnswer) -> None:
        async def write():
            body = AnswerCreate(post_id=draft.post_id, body=draft.body)
            await self.qa.create_answer(user_id, body)
        await self._guarded("answer", write)

    async def write_listing(self, user_id: UserId, draft: DraftListing) -> None:
        async def write():
            body = ListingCreate(
                title=draft.title,
                description=draft.description,
                category=draft.category,
                price_cents=draft.price_cents,
                condition=draft.condition,
                pickup_area=draft.pickup_area,
                image_paths=draft.image_urls,
            )
            await self.marketplace.create_listing(user_id, body)
        await self._guarded("listing", write)

    async def write_quiz(self, user_id: UserId, draft: LocalQuiz) -> None:
        async def write():
            await self.quizzes.store_quiz(user_id, draft)
        await self._guarded("quiz", write)

    async def _guarded(self, operation: str, write: Callable[[], Awaitable]):
        """Run one write; roll back the session on any rejection."""
        try:
            return await write()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Migration write failed: {e}", extra={"operation": operation})
            raise translate_db_error(e, f"migrate {operation}")
        except ITEM_ERRORS:
            await self.db.rollback()
            raise
