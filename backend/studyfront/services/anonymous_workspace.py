"""Anonymous Workspace — what an unauthenticated visitor can do before signing up.

Invariants:
    - Every rate-limited action checks the local ledger first; a rejected
      action writes nothing
    - Accepted artifacts go to the LocalDraftStore only; nothing here touches
      the authoritative store
    - should_prompt_signup() is True once a meaningful action happened and the
      visitor has not dismissed the prompt
"""

import logging

from studyfront.core.domain_types import QuotaKind, WriteStatus
from studyfront.core.enforce_quota import QuotaStatus
from studyfront.core.errors import QuotaExceededError
from studyfront.schemas.drafts import DraftAnswer, DraftListing, DraftPost, LocalQuiz
from studyfront.schemas.quiz import GenerateQuizRequest
from studyfront.services.draft_store import LocalDraftStore
from studyfront.services.handle_qa import ANON_POST_LIMIT_MESSAGE
from studyfront.services.handle_quiz import QUIZ_LIMIT_MESSAGE
from studyfront.services.quiz_generator import QuizGenerator
from studyfront.services.quota_ledger import LocalQuotaLedger

logger = logging.getLogger(__name__)


class AnonymousWorkspace:
    def __init__(self, store: LocalDraftStore, generator: QuizGenerator | None = None):
        self.store = store
        self.ledger = LocalQuotaLedger(store)
        self.generator = generator or QuizGenerator()

    async def generate_quiz(
        self, notes: str, course_id: str | None = None,
    ) -> tuple[LocalQuiz, QuotaStatus]:
        """Generate and keep a quiz locally. Returns the quiz and the quota after it."""
        request = GenerateQuizRequest(notes=notes, course_id=course_id)
        status = self.ledger.check(QuotaKind.AI_QUIZ)
        if not status.allowed:
            raise QuotaExceededError(QUIZ_LIMIT_MESSAGE, status.limit)

        questions = await self.generator.generate(request.notes)
        if self.ledger.consume(QuotaKind.AI_QUIZ) is not WriteStatus.OK:
            logger.warning("Local AI usage counter not saved")

        quiz = LocalQuiz(
            course_id=str(request.course_id) if request.course_id else None,
            source_text=request.notes,
            questions=questions,
        )
        self.store.add_ai_quiz(quiz)
        after = QuotaStatus(
            allowed=status.remaining - 1 > 0,
            remaining=max(0, status.remaining - 1),
            limit=status.limit,
        )
        return quiz, after

    def save_post(self, draft: DraftPost) -> WriteStatus:
        if draft.is_anon:
            status = self.ledger.check(QuotaKind.ANON_POST)
            if not status.allowed:
                raise QuotaExceededError(ANON_POST_LIMIT_MESSAGE, status.limit)
        return self.store.add_draft_post(draft)

    def save_answer(self, draft: DraftAnswer) -> WriteStatus:
        return self.store.add_draft_answer(draft)

    def save_listing(self, draft: DraftListing) -> WriteStatus:
        return self.store.add_draft_listing(draft)

    def select_courses(self, course_ids: list[str]) -> WriteStatus:
        return self.store.set_selected_course_ids(list(dict.fromkeys(course_ids)))

    def should_prompt_signup(self) -> bool:
        return (
            self.store.has_meaningful_action()
            and not self.store.has_dismissed_signup_prompt()
        )
