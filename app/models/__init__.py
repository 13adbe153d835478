"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for Alembic migrations.

Modules:
    zone: 구역, 근무조 배정 (Zone, ShiftAssignment)
    staff: 스태프, 팀 (Staff, Team)
    facility: 시설 (Facility)
    task: 업무 (Task)
    issue: 이슈, 긴급 신고 (Issue, EmergencyReport)
    communication: 알림 센터, 광고/공지 (Notification, Ad)
"""

from app.models.zone import Zone, ShiftAssignment
from app.models.staff import Staff, Team
from app.models.facility import Facility
from app.models.task import Task
from app.models.issue import Issue, EmergencyReport
from app.models.communication import Notification, Ad

__all__ = [
    "Zone", "ShiftAssignment",
    "Staff", "Team",
    "Facility",
    "Task",
    "Issue", "EmergencyReport",
    "Notification", "Ad",
]
