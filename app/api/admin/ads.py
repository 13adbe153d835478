"""관리자 광고/공지 라우터.

Admin Ad Router — Ads and announcements with publish/unpublish.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.common import MessageResponse
from app.schemas.communication import AdCreate
from app.services.ad_service import ad_service
from app.services.change_feed import change_feed
from app.utils.constants import AdStatus

router: APIRouter = APIRouter()


@router.get("")
async def list_ads(
    db: Annotated[AsyncSession, Depends(get_db)],
    status: Annotated[str | None, Query()] = None,
    type: Annotated[str | None, Query()] = None,
) -> list[dict]:
    ads = await ad_service.list_ads(db, status, type)
    return [ad_service.build_response(a) for a in ads]


@router.post("", status_code=201)
async def create_ad(
    data: AdCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """광고 생성 — 미게시 상태로 시작."""
    ad = await ad_service.create_ad(db, data)
    await db.commit()
    await change_feed.publish(db, "ads")
    return ad_service.build_response(ad)


@router.post("/{ad_id}/publish")
async def publish_ad(
    ad_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    ad = await ad_service.set_status(db, ad_id, AdStatus.PUBLISHED)
    await db.commit()
    await change_feed.publish(db, "ads")
    return ad_service.build_response(ad)


@router.post("/{ad_id}/unpublish")
async def unpublish_ad(
    ad_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    ad = await ad_service.set_status(db, ad_id, AdStatus.UNPUBLISHED)
    await db.commit()
    await change_feed.publish(db, "ads")
    return ad_service.build_response(ad)


@router.delete("/{ad_id}", response_model=MessageResponse)
async def delete_ad(
    ad_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    await ad_service.delete_ad(db, ad_id)
    await db.commit()
    await change_feed.publish(db, "ads")
    return {"message": "광고가 삭제되었습니다 (Ad deleted)"}
