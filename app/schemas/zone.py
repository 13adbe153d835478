"""구역/근무조 Pydantic 스키마.

Zone and shift assignment request schemas.
"""

from pydantic import BaseModel, Field


class ZoneCreate(BaseModel):
    name: str
    description: str | None = None
    lat: float | None = None  # lat/lng는 둘 다 입력하거나 둘 다 생략 (both or neither)
    lng: float | None = None
    headcount: int = Field(default=0, ge=0)


class ZoneUpdate(BaseModel):
    name: str | None = None
    description: str | None = None
    lat: float | None = None
    lng: float | None = None


class HeadcountUpdate(BaseModel):
    headcount: int  # 음수는 서비스에서 ValidationError (negative rejected by the service)


class ShiftCreate(BaseModel):
    zone_id: str
    shift_type: str  # red, orange, green
    start_time: str | None = None  # "HH:MM", 기본값 DEFAULT_SHIFT_START
    end_time: str | None = None  # "HH:MM", 기본값 DEFAULT_SHIFT_END


class ShiftUpdate(BaseModel):
    start_time: str | None = None
    end_time: str | None = None


class ShiftStaffAssign(BaseModel):
    staff_id: str
