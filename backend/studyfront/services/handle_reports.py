"""Report Handlers — create_report.

Invariants:
    - One report per (reporter, target_type, target_id); a repeat is rejected
    - Report reasons are not moderated: they routinely quote the offending text
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from studyfront.core.domain_types import UserId
from studyfront.core.errors import DuplicateReportError
from studyfront.models.report import Report
from studyfront.schemas.content import ReportCreate


class ReportHandlers:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_report(self, user_id: UserId, body: ReportCreate) -> Report:
        existing = await self.db.execute(
            select(Report.id).where(
                Report.reporter_id == user_id,
                Report.target_type == body.target_type.value,
                Report.target_id == body.target_id,
            ),
        )
        if existing.scalar_one_or_none() is not None:
            raise DuplicateReportError()

        report = Report(
            reporter_id=user_id,
            target_type=body.target_type.value,
            target_id=body.target_id,
            reason=body.reason,
        )
        self.db.add(report)
        await self.db.commit()
        return report
