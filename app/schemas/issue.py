"""이슈/긴급 신고 Pydantic 스키마.

Issue and emergency report request schemas.
"""

from pydantic import BaseModel

from app.utils.triage import IssueSeverity


class IssueCreate(BaseModel):
    description: str
    category: str = "general"
    severity: IssueSeverity = IssueSeverity.MEDIUM
    facility_ref: str | None = None
    zone_ref: str | None = None
    reported_by: str = "anonymous"


class IssueAssign(BaseModel):
    assignee_name: str


class EmergencyLocation(BaseModel):
    address: str | None = None
    lat: float | None = None
    lng: float | None = None


class EmergencyReportCreate(BaseModel):
    contact: str
    description: str = ""
    location: str | EmergencyLocation | None = None  # 자유 텍스트 또는 {address, lat, lng}
    source: str = "app"
    type: str = "general"
