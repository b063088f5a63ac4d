"""Answer Routes."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from studyfront.api.deps import get_moderation_gate, require_user
from studyfront.core.domain_types import UserId
from studyfront.infrastructure.database import get_db
from studyfront.schemas.content import AnswerCreate, AnswerOut
from studyfront.services.handle_qa import QAHandlers
from studyfront.services.moderation_gate import ModerationGate

router = APIRouter(prefix="/api/v1/answers", tags=["answers"])


@router.post("", response_model=AnswerOut, status_code=status.HTTP_201_CREATED)
async def create_answer(
    body: AnswerCreate,
    user_id: UserId = Depends(require_user("answer")),
    db: AsyncSession = Depends(get_db),
    gate: ModerationGate = Depends(get_moderation_gate),
):
    answer = await QAHandlers(db, gate).create_answer(user_id, body)
    return AnswerOut.model_validate(answer)
