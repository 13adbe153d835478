"""관리자 근무조 라우터 — 구역별 근무조 배정과 커버리지 API.

Admin Shift Router — Shift rosters per zone and the coverage board.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.common import MessageResponse
from app.schemas.zone import ShiftCreate, ShiftStaffAssign, ShiftUpdate
from app.services.change_feed import change_feed
from app.services.shift_service import shift_service

router: APIRouter = APIRouter()


@router.get("")
async def list_shifts(
    db: Annotated[AsyncSession, Depends(get_db)],
    zone_id: Annotated[UUID | None, Query()] = None,
    shift_type: Annotated[str | None, Query()] = None,
) -> list[dict]:
    """근무조 목록 — 각 근무조의 커버리지 포함."""
    return await shift_service.list_shifts(db, zone_id, shift_type)


@router.get("/coverage")
async def coverage_board(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """구역 x 근무조 유형 커버리지 보드 (미생성 근무조 포함)."""
    return await shift_service.coverage_board(db)


@router.post("/defaults")
async def create_default_shifts(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """모든 구역에 누락된 근무조를 기본 시간으로 생성합니다."""
    created: int = await shift_service.create_defaults(db)
    await db.commit()
    await change_feed.publish(db, "shifts")
    return {"created": created}


@router.get("/{shift_id}")
async def get_shift(
    shift_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    return await shift_service.get_detail(db, shift_id)


@router.post("", status_code=201)
async def create_shift(
    data: ShiftCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    shift = await shift_service.create_shift(db, data)
    await db.commit()
    await change_feed.publish(db, "shifts")
    return await shift_service.get_detail(db, shift.id)


@router.put("/{shift_id}")
async def update_shift(
    shift_id: UUID,
    data: ShiftUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    await shift_service.update_times(db, shift_id, data)
    await db.commit()
    await change_feed.publish(db, "shifts")
    return await shift_service.get_detail(db, shift_id)


@router.post("/{shift_id}/staff")
async def assign_staff(
    shift_id: UUID,
    data: ShiftStaffAssign,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """스태프 배정 — 이미 배정된 스태프면 409."""
    await shift_service.assign_staff(db, shift_id, data.staff_id)
    await db.commit()
    await change_feed.publish(db, "shifts")
    return await shift_service.get_detail(db, shift_id)


@router.delete("/{shift_id}/staff/{staff_id}")
async def remove_staff(
    shift_id: UUID,
    staff_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    await shift_service.remove_staff(db, shift_id, staff_id)
    await db.commit()
    await change_feed.publish(db, "shifts")
    return await shift_service.get_detail(db, shift_id)


@router.delete("/{shift_id}", response_model=MessageResponse)
async def delete_shift(
    shift_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    await shift_service.delete_shift(db, shift_id)
    await db.commit()
    await change_feed.publish(db, "shifts")
    return {"message": "근무조가 삭제되었습니다 (Shift deleted)"}
