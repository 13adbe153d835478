"""대시보드 서비스 — 대시보드 집계 비즈니스 로직.

Dashboard Service — Aggregation logic for the admin dashboard home.
Combines task completion/SLA rates, active emergencies, facility counts
and the shift coverage board into one summary, and exports tasks to Excel.
"""

from datetime import datetime, timezone
from io import BytesIO
from typing import Sequence

from openpyxl import Workbook
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.task import Task
from app.services.facility_service import facility_service
from app.services.issue_service import issue_service
from app.services.shift_service import shift_service
from app.services.task_service import task_service
from app.utils.sla_clock import as_utc
from app.utils.spreadsheet import set_widths, style_headers


def _excel_time(value: datetime | None) -> str:
    # openpyxl은 tz-aware datetime을 쓸 수 없음 — write ISO text instead
    return as_utc(value).strftime("%Y-%m-%d %H:%M:%S") if value else ""


class DashboardService:
    """대시보드 서비스.

    Dashboard aggregation service for admin dashboard views.
    """

    async def get_summary(self, db: AsyncSession) -> dict:
        """대시보드 요약."""
        analytics: dict = await task_service.analytics(db)
        stats: dict = await facility_service.get_stats(db)
        board: dict = await shift_service.coverage_board(db)
        return {
            "tasks": analytics,
            "active_emergencies": await issue_service.emergency_count(db),
            "facilities": {
                "total": stats["total"],
                "by_type": {t: bucket["total"] for t, bucket in stats["by_type"].items()},
            },
            "coverage": board["levels"],
            "generated_at": datetime.now(timezone.utc),
        }

    async def export_tasks_excel(self, db: AsyncSession, status: str | None = None) -> bytes:
        """업무 목록을 Excel 파일로 내보내기."""
        tasks: Sequence[Task] = await task_service.list_tasks(db, status=status)
        rows: list[dict] = await task_service.build_responses(db, tasks)

        wb = Workbook()
        ws = wb.active
        ws.title = "Tasks"
        headers: list[str] = [
            "Title", "Status", "Priority", "Assignee Type", "Assignee",
            "SLA (min)", "Created", "Completed", "SLA Compliant",
        ]
        style_headers(ws, headers)

        for task, row in zip(tasks, rows):
            compliant = row["sla"].get("compliant")
            ws.append([
                task.title,
                task.status,
                task.priority,
                task.assignee_kind,
                row["assigned_to"]["name"] or str(task.assignee_id),
                task.sla_minutes,
                _excel_time(task.created_at),
                _excel_time(task.completed_at),
                "" if compliant is None else ("Yes" if compliant else "No"),
            ])
        set_widths(ws, [30, 14, 10, 14, 22, 10, 20, 20, 14])

        buffer = BytesIO()
        wb.save(buffer)
        return buffer.getvalue()


dashboard_service: DashboardService = DashboardService()
