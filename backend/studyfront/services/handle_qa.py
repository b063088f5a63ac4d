"""Q&A Handlers — create_post, create_answer, accept_answer.

Invariants:
    - Checks run before any write: existence → anonymous quota → moderation
    - Posting or answering joins the author to the course (insert-or-ignore)
    - Only the post author can accept an answer, and only one of that post's
    - One commit per successful call; a raised error leaves nothing behind

Design Decisions:
    - Anonymous posts still record author_id; the one-per-day budget is
      counted from those rows (see SqlUsageCounterRepository)
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from studyfront.core.domain_types import QuotaKind, UserId
from studyfront.core.errors import (
    ForbiddenError, QuotaExceededError, ResourceNotFoundError,
)
from studyfront.models.post import Answer, Post, PostAccept
from studyfront.schemas.content import AcceptAnswerRequest, AnswerCreate, PostCreate
from studyfront.services.course_memberships import get_course_or_404, join_course
from studyfront.services.moderation_gate import ModerationGate
from studyfront.services.quota_ledger import QuotaLedger
from studyfront.services.usage_counter_repository import SqlUsageCounterRepository

logger = logging.getLogger(__name__)

ANON_POST_LIMIT_MESSAGE = "You can only post 1 anonymous question per day"


class QAHandlers:
    """Course question and answer writes."""

    def __init__(self, db: AsyncSession, gate: ModerationGate):
        self.db = db
        self.gate = gate
        self.ledger = QuotaLedger(SqlUsageCounterRepository(db))

    async def create_post(self, user_id: UserId, body: PostCreate) -> Post:
        """Create a question in a course. Quota-checked when anonymous."""
        course = await get_course_or_404(self.db, body.course_id)
        if body.is_anon:
            status = await self.ledger.check(user_id, QuotaKind.ANON_POST)
            if not status.allowed:
                raise QuotaExceededError(ANON_POST_LIMIT_MESSAGE, status.limit)
        await self.gate.enforce(body.title, body.body)

        await join_course(self.db, user_id, course.id)
        post = Post(
            course_id=course.id,
            author_id=user_id,
            title=body.title,
            body=body.body,
            tags=list(body.tags),
            is_anon=body.is_anon,
        )
        self.db.add(post)
        await self.db.commit()
        logger.info("Post created", extra={"user_id": user_id})
        return post

    async def create_answer(self, user_id: UserId, body: AnswerCreate) -> Answer:
        post = await self.db.get(Post, body.post_id)
        if post is None:
            raise ResourceNotFoundError("Post", str(body.post_id))
        await self.gate.enforce(body.body)

        await join_course(self.db, user_id, post.course_id)
        answer = Answer(post_id=post.id, author_id=user_id, body=body.body)
        self.db.add(answer)
        await self.db.commit()
        return answer

    async def accept_answer(self, user_id: UserId, body: AcceptAnswerRequest) -> None:
        """Mark one answer as accepted, replacing any earlier choice."""
        post = await self.db.get(Post, body.post_id)
        if post is None:
            raise ResourceNotFoundError("Post", str(body.post_id))
        if post.author_id != user_id:
            raise ForbiddenError("Only the post author can accept answers")
        answer = await self.db.get(Answer, body.answer_id)
        if answer is None or answer.post_id != post.id:
            raise ResourceNotFoundError("Answer", str(body.answer_id))

        accept = await self.db.get(PostAccept, post.id)
        if accept is None:
            self.db.add(PostAccept(
                post_id=post.id, accepted_answer_id=answer.id, accepted_by=user_id,
            ))
        else:
            accept.accepted_answer_id = answer.id
            accept.accepted_by = user_id
        await self.db.commit()
