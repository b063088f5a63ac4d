"""Report Routes."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from studyfront.api.deps import require_user
from studyfront.core.domain_types import UserId
from studyfront.infrastructure.database import get_db
from studyfront.schemas.content import ReportCreate, ReportOut
from studyfront.services.handle_reports import ReportHandlers

router = APIRouter(prefix="/api/v1/reports", tags=["reports"])


@router.post("", response_model=ReportOut, status_code=status.HTTP_201_CREATED)
async def create_report(
    body: ReportCreate,
    user_id: UserId = Depends(require_user("report")),
    db: AsyncSession = Depends(get_db),
):
    report = await ReportHandlers(db).create_report(user_id, body)
    return ReportOut.model_validate(report)
