"""이슈/긴급 신고 레포지토리.

Issue and emergency report repositories.
"""

from typing import Sequence

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.issue import EmergencyReport, Issue
from app.repositories.base import BaseRepository
from app.utils.triage import HIGH_SEVERITIES


class IssueRepository(BaseRepository[Issue]):

    def __init__(self) -> None:
        super().__init__(Issue)

    async def get_filtered(
        self,
        db: AsyncSession,
        severity: str | None = None,
        status: str | None = None,
        high_only: bool = False,
    ) -> Sequence[Issue]:
        query: Select = self._apply_filters(select(Issue), {"severity": severity, "status": status})
        if high_only:
            query = query.where(Issue.severity.in_(sorted(HIGH_SEVERITIES)))
        result = await db.execute(query.order_by(Issue.reported_at.desc()))
        return result.scalars().all()


class EmergencyReportRepository(BaseRepository[EmergencyReport]):

    def __init__(self) -> None:
        super().__init__(EmergencyReport)

    async def get_filtered(
        self,
        db: AsyncSession,
        report_type: str | None = None,
        source: str | None = None,
    ) -> Sequence[EmergencyReport]:
        return await self.get_all(
            db,
            filters={"type": report_type, "source": source},
            order_by=EmergencyReport.reported_at.desc(),
        )


issue_repository: IssueRepository = IssueRepository()
emergency_report_repository: EmergencyReportRepository = EmergencyReportRepository()
