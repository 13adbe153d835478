"""관리자 구역 라우터 — 구역 관리 API.

Admin Zone Router — Zone CRUD, headcount updates and CSV/JSON import.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.common import BatchResult, MessageResponse
from app.schemas.zone import HeadcountUpdate, ZoneCreate, ZoneUpdate
from app.services.change_feed import change_feed
from app.services.zone_service import zone_service
from app.utils.exceptions import BadRequestError

router: APIRouter = APIRouter()


@router.get("")
async def list_zones(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[dict]:
    """구역 목록 (이름순)."""
    zones = await zone_service.list_zones(db)
    return [zone_service.build_response(z) for z in zones]


@router.post("/import", response_model=BatchResult)
async def import_zones(
    db: Annotated[AsyncSession, Depends(get_db)],
    file: UploadFile = File(...),
) -> BatchResult:
    """CSV(name,description,lat,lng) 또는 JSON 파일에서 구역을 가져옵니다.

    Rows are committed one by one; the response tallies successes, skips
    and failures.
    """
    filename: str = (file.filename or "").lower()
    if not filename.endswith((".csv", ".json")):
        raise BadRequestError("Only .csv or .json files are supported")

    content: bytes = await file.read()
    try:
        result = await zone_service.import_zones(db, filename, content)
    except ValueError as e:
        raise BadRequestError(str(e))
    await change_feed.publish(db, "zones")
    return result


@router.get("/{zone_id}")
async def get_zone(
    zone_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    zone = await zone_service.get_zone(db, zone_id)
    return zone_service.build_response(zone)


@router.post("", status_code=201)
async def create_zone(
    data: ZoneCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """구역 생성 — name 필수, lat/lng는 둘 다 입력하거나 생략."""
    zone = await zone_service.create_zone(db, data)
    await db.commit()
    await change_feed.publish(db, "zones")
    return zone_service.build_response(zone)


@router.put("/{zone_id}")
async def update_zone(
    zone_id: UUID,
    data: ZoneUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    zone = await zone_service.update_zone(db, zone_id, data)
    await db.commit()
    await change_feed.publish(db, "zones")
    return zone_service.build_response(zone)


@router.put("/{zone_id}/headcount")
async def set_headcount(
    zone_id: UUID,
    data: HeadcountUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """인원 추정치 갱신 — 커버리지(shifts)도 함께 바뀜."""
    zone = await zone_service.set_headcount(db, zone_id, data.headcount)
    await db.commit()
    await change_feed.publish(db, "zones")
    await change_feed.publish(db, "shifts")
    return zone_service.build_response(zone)


@router.delete("/{zone_id}", response_model=MessageResponse)
async def delete_zone(
    zone_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """구역 삭제 — 근무조/시설/업무가 참조 중이면 409."""
    await zone_service.delete_zone(db, zone_id)
    await db.commit()
    await change_feed.publish(db, "zones")
    return {"message": "구역이 삭제되었습니다 (Zone deleted)"}
