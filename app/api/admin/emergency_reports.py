"""관리자 긴급 신고 라우터 — 읽기 전용.

Admin Emergency Report Router — read-only listing of emergency reports.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.services.emergency_service import emergency_service

router: APIRouter = APIRouter()


@router.get("")
async def list_emergency_reports(
    db: Annotated[AsyncSession, Depends(get_db)],
    type: Annotated[str | None, Query()] = None,
    source: Annotated[str | None, Query()] = None,
) -> list[dict]:
    reports = await emergency_service.list_reports(db, type, source)
    return [emergency_service.build_response(r) for r in reports]


@router.get("/{report_id}")
async def get_emergency_report(
    report_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    report = await emergency_service.get_report(db, report_id)
    return emergency_service.build_response(report)
