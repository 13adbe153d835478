"""앱 긴급 신고 라우터 — 공개 긴급 신고 접수 API.

App Emergency Intake Router. The location may be free text or a
structured ``{lat, lng, address}`` object.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.issue import EmergencyReportCreate
from app.services.change_feed import change_feed
from app.services.emergency_service import emergency_service

router: APIRouter = APIRouter()


@router.post("", status_code=201)
async def report_emergency(
    data: EmergencyReportCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    report = await emergency_service.create_report(db, data)
    await db.commit()
    await change_feed.publish(db, "emergency-reports")
    return emergency_service.build_response(report)
