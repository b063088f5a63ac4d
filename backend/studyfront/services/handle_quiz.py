"""Quiz Handlers — generate_quiz for the HTTP endpoint, store_quiz for migrated drafts.

Invariants:
    - generate_quiz order: course check → (identity only) moderation → tier →
      quota check → generate → (identity only) consume one use + store the
      quiz, one commit
    - Without an identity the server quota is pass-through, notes are not
      moderated and nothing is stored
    - Response remaining = max(0, remaining_before - 1)
    - Stored source_text is truncated to SOURCE_TEXT_MAX_CHARS
    - store_quiz never consumes quota: no generation happens on migration

Design Decisions:
    - Quota consumed after generation: a failed generation costs nothing.
      Two concurrent requests may both pass the check (relaxed counter)
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from studyfront.core.domain_types import PlanTier, QuotaKind, UserId
from studyfront.core.errors import ContentValidationError, QuotaExceededError
from studyfront.models.ai_quiz import AIQuiz
from studyfront.schemas.drafts import SOURCE_TEXT_MAX_CHARS, LocalQuiz
from studyfront.schemas.quiz import (
    GenerateQuizRequest, GenerateQuizResponse, QuizQuestion,
)
from studyfront.services.course_memberships import get_course_or_404
from studyfront.services.moderation_gate import ModerationGate
from studyfront.services.quiz_generator import QuizGenerator
from studyfront.services.quota_ledger import QuotaLedger
from studyfront.services.subscriptions import get_plan_tier
from studyfront.services.usage_counter_repository import SqlUsageCounterRepository

logger = logging.getLogger(__name__)

QUIZ_LIMIT_MESSAGE = "Daily quiz generation limit reached"


class QuizHandlers:
    def __init__(
        self,
        db: AsyncSession,
        gate: ModerationGate,
        generator: QuizGenerator | None = None,
    ):
        self.db = db
        self.gate = gate
        self.generator = generator or QuizGenerator()
        self.ledger = QuotaLedger(SqlUsageCounterRepository(db))

    async def generate_quiz(
        self, user_id: UserId | None, body: GenerateQuizRequest,
    ) -> GenerateQuizResponse:
        if body.course_id is not None:
            await get_course_or_404(self.db, body.course_id)
        if user_id is not None:
            await self.gate.enforce(body.notes)

        tier = await get_plan_tier(self.db, user_id)
        status = await self.ledger.check(user_id, QuotaKind.AI_QUIZ, tier)
        if not status.allowed:
            raise QuotaExceededError(
                QUIZ_LIMIT_MESSAGE, status.limit,
                upgrade=tier is PlanTier.STANDARD,
            )

        questions = await self.generator.generate(body.notes)

        if user_id is not None:
            await self.ledger.consume(user_id, QuotaKind.AI_QUIZ)
            self._add_quiz(user_id, body.course_id, body.notes, questions)
            await self.db.commit()
            logger.info("Quiz generated", extra={"user_id": user_id})

        return GenerateQuizResponse(
            questions=questions,
            remaining=max(0, status.remaining - 1),
            limit=status.limit,
            is_pro=tier is PlanTier.ELEVATED,
        )

    async def store_quiz(self, user_id: UserId, draft: LocalQuiz) -> AIQuiz:
        """Persist a quiz generated while unauthenticated."""
        course_id = _parse_course_id(draft.course_id)
        if course_id is not None:
            await get_course_or_404(self.db, course_id)
        await self.gate.enforce(draft.source_text)
        quiz = self._add_quiz(user_id, course_id, draft.source_text, draft.questions)
        await self.db.commit()
        return quiz

    def _add_quiz(
        self,
        user_id: UserId,
        course_id: UUID | None,
        source_text: str,
        questions: list[QuizQuestion],
    ) -> AIQuiz:
        quiz = AIQuiz(
            user_id=user_id,
            course_id=course_id,
            source_text=source_text[:SOURCE_TEXT_MAX_CHARS],
            questions=[q.model_dump() for q in questions],
        )
        self.db.add(quiz)
        return quiz


def _parse_course_id(raw: str | None) -> UUID | None:
    if not raw:
        return None
    try:
        return UUID(raw)
    except ValueError:
        raise ContentValidationError(f"Invalid course id '{raw}'", "courseId")
