"""알림 센터 서비스.

Notification center service — append-only log of messages sent to staff.
Delivery (SMS/push) happens outside this service; entries only record
who was notified and what was said.
"""

from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.communication import Notification
from app.repositories.notification_repository import notification_repository
from app.schemas.communication import NotificationCreate
from app.services.change_feed import change_feed
from app.utils.validation import require_text


class NotificationService:

    def build_response(self, notification: Notification) -> dict:
        return {
            "id": str(notification.id),
            "name": notification.name,
            "number": notification.number,
            "message": notification.message,
            "sent_at": notification.sent_at,
        }

    async def list_notifications(self, db: AsyncSession) -> Sequence[Notification]:
        return await notification_repository.get_recent(db)

    async def record(self, db: AsyncSession, name: str, number: str, message: str) -> Notification:
        """알림 기록을 남깁니다 (name/number/message 필수)."""
        return await notification_repository.create(
            db,
            {
                "name": require_text(name, "name"),
                "number": require_text(number, "number"),
                "message": require_text(message, "message"),
            },
        )

    async def create_notification(self, db: AsyncSession, data: NotificationCreate) -> Notification:
        return await self.record(db, data.name, data.number, data.message)

    async def snapshot_items(self, db: AsyncSession) -> list[dict]:
        return [self.build_response(n) for n in await self.list_notifications(db)]


notification_service: NotificationService = NotificationService()
change_feed.register("notifications", notification_service.snapshot_items)
