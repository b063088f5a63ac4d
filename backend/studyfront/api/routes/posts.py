"""Post Routes — create questions and accept answers."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from studyfront.api.deps import get_moderation_gate, require_user
from studyfront.core.domain_types import UserId
from studyfront.infrastructure.database import get_db
from studyfront.schemas.content import AcceptAnswerRequest, PostCreate, PostOut
from studyfront.services.handle_qa import QAHandlers
from studyfront.services.moderation_gate import ModerationGate

router = APIRouter(prefix="/api/v1/posts", tags=["posts"])


@router.post("", response_model=PostOut, status_code=status.HTTP_201_CREATED)
async def create_post(
    body: PostCreate,
    user_id: UserId = Depends(require_user("create posts")),
    db: AsyncSession = Depends(get_db),
    gate: ModerationGate = Depends(get_moderation_gate),
):
    post = await QAHandlers(db, gate).create_post(user_id, body)
    return PostOut.model_validate(post)


@router.post("/accept")
async def accept_answer(
    body: AcceptAnswerRequest,
    user_id: UserId = Depends(require_user("accept answers")),
    db: AsyncSession = Depends(get_db),
    gate: ModerationGate = Depends(get_moderation_gate),
):
    await QAHandlers(db, gate).accept_answer(user_id, body)
    return {"success": True}
