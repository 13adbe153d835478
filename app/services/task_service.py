"""업무 서비스 — 업무 CRUD, 라이프사이클 전이, 사진 증빙, 분석.

Task Service — Field task management.
Status only changes through lifecycle actions (start / mark_done /
verify / reject); the editable-field update never touches it. The SLA
countdown in each response is a snapshot: clients tick it locally from
``sla.deadline`` without re-fetching.
"""

from collections.abc import Sequence as SequenceABC
from datetime import datetime, timezone
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.task import Task
from app.repositories.facility_repository import facility_repository
from app.repositories.staff_repository import staff_repository, team_repository
from app.repositories.task_repository import task_repository
from app.repositories.zone_repository import zone_repository
from app.schemas.common import AssigneeRef
from app.schemas.task import TaskCreate, TaskUpdate
from app.services.change_feed import change_feed
from app.services.storage_service import storage_service
from app.utils.constants import AssigneeKind
from app.utils.exceptions import InvalidTransitionError, NotFoundError, ValidationError
from app.utils.sla_clock import is_sla_compliant, sla_compliance_percent, task_countdown
from app.utils.task_lifecycle import (
    BEFORE_PHOTO_STATUSES,
    TaskAction,
    TaskStatus,
    clean_evidence,
    completion_percent,
    plan_transition,
    status_counts,
)
from app.utils.validation import require_text, to_uuid


class TaskService:

    async def _assignee_names(self, db: AsyncSession, tasks: SequenceABC[Task]) -> dict[tuple[str, UUID], str]:
        staff_ids: list[UUID] = [t.assignee_id for t in tasks if t.assignee_kind == AssigneeKind.STAFF.value]
        team_ids: list[UUID] = [t.assignee_id for t in tasks if t.assignee_kind == AssigneeKind.TEAM.value]
        names: dict[tuple[str, UUID], str] = {}
        for s in await staff_repository.get_many(db, staff_ids):
            names[(AssigneeKind.STAFF.value, s.id)] = s.name
        for t in await team_repository.get_many(db, team_ids):
            names[(AssigneeKind.TEAM.value, t.id)] = t.name
        return names

    def build_response(
        self,
        task: Task,
        assignee_name: str | None = None,
        now: datetime | None = None,
    ) -> dict:
        """업무 응답 딕셔너리 — 담당 참조와 SLA 카운트다운 포함."""
        countdown = task_countdown(task.created_at, task.sla_minutes, now)
        sla: dict[str, Any] = countdown.as_dict()
        if task.completed_at is not None:
            sla["compliant"] = is_sla_compliant(task.created_at, task.completed_at, task.sla_minutes)
        return {
            "id": str(task.id),
            "title": task.title,
            "description": task.description,
            "facility_id": str(task.facility_id) if task.facility_id else None,
            "zone_id": str(task.zone_id) if task.zone_id else None,
            "assigned_to": {
                "type": task.assignee_kind,
                "id": str(task.assignee_id),
                "name": assignee_name,
            },
            "priority": task.priority,
            "sla_minutes": task.sla_minutes,
            "status": task.status,
            "created_at": task.created_at,
            "started_at": task.started_at,
            "completed_at": task.completed_at,
            "photos_before": list(task.photos_before or []),
            "photos_after": list(task.photos_after or []),
            "sla": sla,
        }

    async def build_responses(self, db: AsyncSession, tasks: SequenceABC[Task]) -> list[dict]:
        names = await self._assignee_names(db, tasks)
        now: datetime = datetime.now(timezone.utc)
        return [
            self.build_response(t, names.get((t.assignee_kind, t.assignee_id)), now) for t in tasks
        ]

    async def _resolve_assignee(self, db: AsyncSession, ref: AssigneeRef) -> tuple[str, UUID]:
        """태그 참조 검증 — 스태프/팀이 존재해야 함."""
        target_id: UUID = to_uuid(ref.id, "assigned_to.id")
        if ref.type is AssigneeKind.STAFF:
            found = await staff_repository.get_by_id(db, target_id)
        else:
            found = await team_repository.get_by_id(db, target_id)
        if found is None:
            raise NotFoundError(f"담당자를 찾을 수 없습니다 (Assignee {ref.type.value} not found)")
        return ref.type.value, target_id

    async def _check_refs(self, db: AsyncSession, values: dict[str, Any]) -> None:
        if values.get("facility_id") is not None:
            values["facility_id"] = to_uuid(values["facility_id"], "facility_id")
            if await facility_repository.get_by_id(db, values["facility_id"]) is None:
                raise NotFoundError("시설을 찾을 수 없습니다 (Facility not found)")
        if values.get("zone_id") is not None:
            values["zone_id"] = to_uuid(values["zone_id"], "zone_id")
            if await zone_repository.get_by_id(db, values["zone_id"]) is None:
                raise NotFoundError("구역을 찾을 수 없습니다 (Zone not found)")

    @staticmethod
    def _check_sla(sla_minutes: int) -> int:
        if sla_minutes <= 0:
            raise ValidationError("sla_minutes must be positive")
        return sla_minutes

    # --- CRUD ---

    async def list_tasks(
        self,
        db: AsyncSession,
        status: str | None = None,
        priority: str | None = None,
        zone_id: UUID | None = None,
        assignee_kind: str | None = None,
        assignee_id: UUID | None = None,
    ) -> Sequence[Task]:
        return await task_repository.get_filtered(db, status, priority, zone_id, assignee_kind, assignee_id)

    async def get_task(self, db: AsyncSession, task_id: UUID) -> Task:
        task: Task | None = await task_repository.get_by_id(db, task_id)
        if task is None:
            raise NotFoundError("업무를 찾을 수 없습니다 (Task not found)")
        return task

    async def get_detail(self, db: AsyncSession, task_id: UUID) -> dict:
        task: Task = await self.get_task(db, task_id)
        return (await self.build_responses(db, [task]))[0]

    async def create_task(self, db: AsyncSession, data: TaskCreate) -> Task:
        """업무를 생성합니다 — 상태 Pending, 증빙 비어있음.

        Raises:
            ValidationError: 제목 누락 또는 sla_minutes <= 0
            NotFoundError: 담당/시설/구역 참조 대상이 없을 때
        """
        title: str = require_text(data.title, "title")
        kind, assignee_id = await self._resolve_assignee(db, data.assigned_to)
        sla_minutes: int = self._check_sla(
            data.sla_minutes if data.sla_minutes is not None else settings.DEFAULT_TASK_SLA_MINUTES
        )
        values: dict[str, Any] = {
            "title": title,
            "description": data.description or "",
            "facility_id": data.facility_id,
            "zone_id": data.zone_id,
            "assignee_kind": kind,
            "assignee_id": assignee_id,
            "priority": data.priority.value,
            "sla_minutes": sla_minutes,
            "status": TaskStatus.PENDING.value,
            "photos_before": [],
            "photos_after": [],
        }
        await self._check_refs(db, values)
        return await task_repository.create(db, values)

    async def update_task(self, db: AsyncSession, task_id: UUID, data: TaskUpdate) -> Task:
        await self.get_task(db, task_id)
        update_data: dict[str, Any] = data.model_dump(exclude_unset=True, exclude={"assigned_to"}, mode="json")

        if "title" in update_data:
            update_data["title"] = require_text(update_data["title"], "title")
        if "description" in update_data:
            update_data["description"] = update_data["description"] or ""
        if update_data.get("priority") is None:
            update_data.pop("priority", None)
        if "sla_minutes" in update_data:
            if update_data["sla_minutes"] is None:
                raise ValidationError("sla_minutes must be positive")
            self._check_sla(update_data["sla_minutes"])
        if data.assigned_to is not None:
            update_data["assignee_kind"], update_data["assignee_id"] = await self._resolve_assignee(db, data.assigned_to)
        await self._check_refs(db, update_data)

        return await task_repository.update(db, task_id, update_data)

    async def delete_task(self, db: AsyncSession, task_id: UUID) -> None:
        await self.get_task(db, task_id)
        await task_repository.delete(db, task_id)

    # --- Lifecycle ---

    async def apply_action(
        self,
        db: AsyncSession,
        task_id: UUID,
        action: TaskAction,
        evidence: list[str] | None = None,
    ) -> Task:
        """라이프사이클 액션을 적용합니다.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            task_id: 업무 UUID (Task UUID)
            action: 전이 액션 (Lifecycle action)
            evidence: mark_done 사후 사진 로케이터 (After-photo locators for mark_done)

        Returns:
            Task: 전이 후 업무 (Updated task)

        Raises:
            NotFoundError: 업무 없음 (Task missing)
            InvalidTransitionError: 현재 상태에서 불가한 액션 (Action not allowed now)
            ValidationError: mark_done 증빙 누락/공백 (Empty or blank evidence)
        """
        task: Task = await self.get_task(db, task_id)
        update: dict[str, Any] = plan_transition(task.status, action, evidence)
        if "photos_after" in update:
            # temp 업로드를 최종 위치로 이동 — finalize temp uploads
            update["photos_after"] = storage_service.finalize_uploads(update["photos_after"])
        return await task_repository.update(db, task_id, update)

    async def attach_before_photos(self, db: AsyncSession, task_id: UUID, photos: list[str]) -> Task:
        """사전 사진 첨부 — Pending/In Progress 상태에서만 허용."""
        task: Task = await self.get_task(db, task_id)
        if task.status not in {s.value for s in BEFORE_PHOTO_STATUSES}:
            raise InvalidTransitionError(
                f"Cannot attach before-photos to a task in status '{task.status}'"
            )
        merged: list[str] = list(task.photos_before or [])
        for final in storage_service.finalize_uploads(clean_evidence(photos)):
            if final not in merged:
                merged.append(final)
        return await task_repository.update(db, task_id, {"photos_before": merged})

    # --- Views ---

    async def board(self, db: AsyncSession, **filters: Any) -> dict[str, list[dict]]:
        """칸반 보드 — 상태별 컬럼 (every status present, newest first)."""
        tasks: Sequence[Task] = await self.list_tasks(db, **filters)
        columns: dict[str, list[dict]] = {s.value: [] for s in TaskStatus}
        for item in await self.build_responses(db, tasks):
            columns.setdefault(item["status"], []).append(item)
        return columns

    async def analytics(self, db: AsyncSession) -> dict:
        """완료율, SLA 준수율, 상태별 건수."""
        tasks: Sequence[Task] = await self.list_tasks(db)
        return {
            "total": len(tasks),
            "completion_percent": completion_percent(tasks),
            "sla_compliance_percent": sla_compliance_percent(tasks, TaskStatus.VERIFIED.value),
            "status_counts": status_counts(tasks),
        }

    async def snapshot_items(self, db: AsyncSession) -> list[dict]:
        return await self.build_responses(db, await self.list_tasks(db))


task_service: TaskService = TaskService()
change_feed.register("tasks", task_service.snapshot_items)
