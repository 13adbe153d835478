"""알림 센터/광고 레포지토리.

Notification center and ad repositories.
"""

from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.communication import Ad, Notification
from app.repositories.base import BaseRepository


class NotificationRepository(BaseRepository[Notification]):

    def __init__(self) -> None:
        super().__init__(Notification)

    async def get_recent(self, db: AsyncSession) -> Sequence[Notification]:
        """최신순 알림 기록 (Newest first)."""
        return await self.get_all(db, order_by=Notification.sent_at.desc())


class AdRepository(BaseRepository[Ad]):

    def __init__(self) -> None:
        super().__init__(Ad)

    async def get_filtered(
        self,
        db: AsyncSession,
        status: str | None = None,
        ad_type: str | None = None,
    ) -> Sequence[Ad]:
        return await self.get_all(
            db,
            filters={"status": status, "type": ad_type},
            order_by=Ad.created_at.desc(),
        )


notification_repository: NotificationRepository = NotificationRepository()
ad_repository: AdRepository = AdRepository()
