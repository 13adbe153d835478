"""시설 Pydantic 스키마.

Facility request schemas. Status vocabulary per facility type is enforced
by the facility service, not here.
"""

from pydantic import BaseModel

from app.utils.constants import FacilityType


class FacilityCreate(BaseModel):
    code: str
    type: FacilityType
    zone_id: str
    lat: float
    lng: float
    status: str | None = None  # 생략 시 유형별 첫 상태 (defaults to the type's first status)


class FacilityStatusUpdate(BaseModel):
    status: str


class FacilityTaskAssign(BaseModel):
    task: str  # 자유 텍스트 작업 메모 (Free-text task note)
