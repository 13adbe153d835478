"""관리자 알림 센터 라우터.

Admin Notification Center Router — log of notifications sent to staff.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.communication import NotificationCreate
from app.services.change_feed import change_feed
from app.services.notification_service import notification_service

router: APIRouter = APIRouter()


@router.get("")
async def list_notifications(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[dict]:
    """알림 기록 — 최신순."""
    notifications = await notification_service.list_notifications(db)
    return [notification_service.build_response(n) for n in notifications]


@router.post("", status_code=201)
async def create_notification(
    data: NotificationCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    notification = await notification_service.create_notification(db, data)
    await db.commit()
    await change_feed.publish(db, "notifications")
    return notification_service.build_response(notification)
