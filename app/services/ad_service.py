"""광고/공지 서비스.

Ad service — Ads and announcements shown to visitors. New ads start
unpublished; publish/unpublish only flip the status.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.communication import Ad
from app.repositories.notification_repository import ad_repository
from app.schemas.communication import AdCreate
from app.services.change_feed import change_feed
from app.utils.constants import AdStatus
from app.utils.exceptions import NotFoundError, ValidationError
from app.utils.sla_clock import as_utc
from app.utils.validation import require_text


class AdService:

    def build_response(self, ad: Ad) -> dict:
        return {
            "id": str(ad.id),
            "title": ad.title,
            "description": ad.description,
            "type": ad.type,
            "valid_from": ad.valid_from,
            "valid_to": ad.valid_to,
            "contact": ad.contact,
            "status": ad.status,
            "created_at": ad.created_at,
        }

    async def list_ads(
        self,
        db: AsyncSession,
        status: str | None = None,
        ad_type: str | None = None,
    ) -> Sequence[Ad]:
        return await ad_repository.get_filtered(db, status, ad_type)

    async def get_ad(self, db: AsyncSession, ad_id: UUID) -> Ad:
        ad: Ad | None = await ad_repository.get_by_id(db, ad_id)
        if ad is None:
            raise NotFoundError("광고를 찾을 수 없습니다 (Ad not found)")
        return ad

    async def create_ad(self, db: AsyncSession, data: AdCreate) -> Ad:
        """광고 생성 — 게시 기간 역전은 ValidationError."""
        if as_utc(data.valid_to) < as_utc(data.valid_from):
            raise ValidationError("valid_to must not be earlier than valid_from")
        return await ad_repository.create(
            db,
            {
                "title": require_text(data.title, "title"),
                "description": require_text(data.description, "description"),
                "type": data.type.value,
                "valid_from": as_utc(data.valid_from),
                "valid_to": as_utc(data.valid_to),
                "contact": data.contact,
                "status": AdStatus.UNPUBLISHED.value,
            },
        )

    async def set_status(self, db: AsyncSession, ad_id: UUID, status: AdStatus) -> Ad:
        await self.get_ad(db, ad_id)
        return await ad_repository.update(db, ad_id, {"status": status.value})

    async def delete_ad(self, db: AsyncSession, ad_id: UUID) -> None:
        await self.get_ad(db, ad_id)
        await ad_repository.delete(db, ad_id)

    async def snapshot_items(self, db: AsyncSession) -> list[dict]:
        return [self.build_response(a) for a in await self.list_ads(db)]


ad_service: AdService = AdService()
change_feed.register("ads", ad_service.snapshot_items)
