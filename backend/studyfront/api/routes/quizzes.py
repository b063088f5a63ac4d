"""Quiz Routes — AI quiz generation with daily quota."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from studyfront.api.deps import get_identity, get_moderation_gate, get_quiz_generator
from studyfront.core.domain_types import UserId
from studyfront.infrastructure.database import get_db
from studyfront.schemas.quiz import GenerateQuizRequest, GenerateQuizResponse
from studyfront.services.handle_quiz import QuizHandlers
from studyfront.services.moderation_gate import ModerationGate
from studyfront.services.quiz_generator import QuizGenerator

router = APIRouter(prefix="/api/v1/ai", tags=["ai"])


@router.post("/generate-quiz", response_model=GenerateQuizResponse)
async def generate_quiz(
    body: GenerateQuizRequest,
    user_id: UserId | None = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
    gate: ModerationGate = Depends(get_moderation_gate),
    generator: QuizGenerator = Depends(get_quiz_generator),
):
    """Generate a 5-question quiz from notes. Identity optional."""
    return await QuizHandlers(db, gate, generator).generate_quiz(user_id, body)
