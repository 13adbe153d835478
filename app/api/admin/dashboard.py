"""관리자 대시보드 라우터 — 대시보드 집계 API.

Admin Dashboard Router — Summary and Excel export.
"""

from io import BytesIO
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.services.dashboard_service import dashboard_service

router: APIRouter = APIRouter()


@router.get("/summary")
async def get_summary(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """업무 완료율/SLA 준수율, 긴급 이슈, 시설 수, 커버리지 등급 요약."""
    return await dashboard_service.get_summary(db)


@router.get("/export")
async def export_tasks(
    db: Annotated[AsyncSession, Depends(get_db)],
    status: Annotated[str | None, Query()] = None,
) -> StreamingResponse:
    """업무 목록 Excel 다운로드."""
    excel_bytes: bytes = await dashboard_service.export_tasks_excel(db, status)
    return StreamingResponse(
        BytesIO(excel_bytes),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": "attachment; filename=tasks_report.xlsx"},
    )
