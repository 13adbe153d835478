"""스태프/팀 Pydantic 스키마.

Staff and team request schemas.
"""

from pydantic import BaseModel

from app.utils.constants import StaffRole, StaffStatus, TeamShift


class StaffCreate(BaseModel):
    name: str
    email: str
    phone: str
    department: str
    role: StaffRole = StaffRole.STAFF
    zone: str = "General"
    status: StaffStatus = StaffStatus.ACTIVE


class StaffUpdate(BaseModel):
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    department: str | None = None
    role: StaffRole | None = None
    zone: str | None = None
    status: StaffStatus | None = None


class NotifyRequest(BaseModel):
    message: str


class TeamCreate(BaseModel):
    name: str
    leader_id: str
    description: str | None = None
    member_ids: list[str] = []
    zone_ids: list[str] = []
    default_shift: TeamShift = TeamShift.MORNING


class TeamUpdate(BaseModel):
    name: str | None = None
    leader_id: str | None = None
    description: str | None = None
    zone_ids: list[str] | None = None
    default_shift: TeamShift | None = None


class TeamMembersUpdate(BaseModel):
    member_ids: list[str]  # 새 멤버 전체 목록 (Full replacement member list)
