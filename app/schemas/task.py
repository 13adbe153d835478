"""업무 Pydantic 스키마.

Task request schemas.
"""

from pydantic import BaseModel

from app.schemas.common import AssigneeRef
from app.utils.task_lifecycle import TaskPriority


class TaskCreate(BaseModel):
    title: str
    description: str = ""
    assigned_to: AssigneeRef
    priority: TaskPriority = TaskPriority.MEDIUM
    sla_minutes: int | None = None  # 생략 시 DEFAULT_TASK_SLA_MINUTES
    facility_id: str | None = None
    zone_id: str | None = None


class TaskUpdate(BaseModel):
    """편집 가능 필드만 — 상태는 라이프사이클 액션으로만 변경 (status changes only via actions)."""

    title: str | None = None
    description: str | None = None
    assigned_to: AssigneeRef | None = None
    priority: TaskPriority | None = None
    sla_minutes: int | None = None
    facility_id: str | None = None
    zone_id: str | None = None


class TaskEvidence(BaseModel):
    photos: list[str]  # 스토리지 로케이터 목록 (Storage locators, e.g. "tasks/{id}/after/...")
