"""관리자 업무 라우터 — 업무 관리 및 라이프사이클 API.

Admin Task Router — Task CRUD, lifecycle actions, photo evidence,
kanban board and analytics.

Lifecycle:
    POST /tasks/{id}/start   Pending -> In Progress
    POST /tasks/{id}/done    In Progress -> Done (after-photos required)
    POST /tasks/{id}/verify  Done -> Verified
    POST /tasks/{id}/reject  Done -> In Progress
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.common import MessageResponse
from app.schemas.task import TaskCreate, TaskEvidence, TaskUpdate
from app.services.change_feed import change_feed
from app.services.task_service import task_service
from app.utils.task_lifecycle import TaskAction

router: APIRouter = APIRouter()


async def _finish(db: AsyncSession, task_id: UUID) -> dict:
    await db.commit()
    await change_feed.publish(db, "tasks")
    return await task_service.get_detail(db, task_id)


@router.get("")
async def list_tasks(
    db: Annotated[AsyncSession, Depends(get_db)],
    status: Annotated[str | None, Query()] = None,
    priority: Annotated[str | None, Query()] = None,
    zone_id: Annotated[UUID | None, Query()] = None,
    assignee_type: Annotated[str | None, Query()] = None,
    assignee_id: Annotated[UUID | None, Query()] = None,
) -> list[dict]:
    """업무 목록 — 상태/우선순위/구역/담당 필터, 최신순."""
    tasks = await task_service.list_tasks(db, status, priority, zone_id, assignee_type, assignee_id)
    return await task_service.build_responses(db, tasks)


@router.get("/board")
async def task_board(
    db: Annotated[AsyncSession, Depends(get_db)],
    priority: Annotated[str | None, Query()] = None,
    zone_id: Annotated[UUID | None, Query()] = None,
) -> dict:
    """칸반 보드 — 상태별 컬럼."""
    return await task_service.board(db, priority=priority, zone_id=zone_id)


@router.get("/analytics")
async def task_analytics(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """완료율(Verified/전체), SLA 준수율, 상태별 건수."""
    return await task_service.analytics(db)


@router.get("/{task_id}")
async def get_task(
    task_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """업무 상세 — SLA 카운트다운 스냅샷 포함."""
    return await task_service.get_detail(db, task_id)


@router.post("", status_code=201)
async def create_task(
    data: TaskCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """업무 생성 — 담당(staff/team)은 존재해야 하며 상태는 Pending으로 시작."""
    task = await task_service.create_task(db, data)
    return await _finish(db, task.id)


@router.put("/{task_id}")
async def update_task(
    task_id: UUID,
    data: TaskUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    await task_service.update_task(db, task_id, data)
    return await _finish(db, task_id)


@router.delete("/{task_id}", response_model=MessageResponse)
async def delete_task(
    task_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    await task_service.delete_task(db, task_id)
    await db.commit()
    await change_feed.publish(db, "tasks")
    return {"message": "업무가 삭제되었습니다 (Task deleted)"}


@router.post("/{task_id}/start")
async def start_task(
    task_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    await task_service.apply_action(db, task_id, TaskAction.START)
    return await _finish(db, task_id)


@router.post("/{task_id}/done")
async def mark_task_done(
    task_id: UUID,
    data: TaskEvidence,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """완료 처리 — 사후 사진이 최소 1장 필요하며 기존 사후 사진을 대체."""
    await task_service.apply_action(db, task_id, TaskAction.MARK_DONE, data.photos)
    return await _finish(db, task_id)


@router.post("/{task_id}/verify")
async def verify_task(
    task_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    await task_service.apply_action(db, task_id, TaskAction.VERIFY)
    return await _finish(db, task_id)


@router.post("/{task_id}/reject")
async def reject_task(
    task_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """반려 — Done에서 In Progress로, 증빙과 시각은 유지."""
    await task_service.apply_action(db, task_id, TaskAction.REJECT)
    return await _finish(db, task_id)


@router.post("/{task_id}/photos-before")
async def attach_before_photos(
    task_id: UUID,
    data: TaskEvidence,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """사전 사진 첨부 — Pending/In Progress 상태에서만."""
    await task_service.attach_before_photos(db, task_id, data.photos)
    return await _finish(db, task_id)
