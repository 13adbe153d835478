"""관리자 이슈 라우터 — 이슈 트리아지 API.

Admin Issue Router — Issue listing and triage (assign / merge / close).
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.common import MessageResponse
from app.schemas.issue import IssueAssign
from app.services.change_feed import change_feed
from app.services.issue_service import issue_service

router: APIRouter = APIRouter()


async def _finish(db: AsyncSession, issue_id: UUID) -> dict:
    await db.commit()
    await change_feed.publish(db, "issues")
    issue = await issue_service.get_issue(db, issue_id)
    return issue_service.build_response(issue)


@router.get("")
async def list_issues(
    db: Annotated[AsyncSession, Depends(get_db)],
    severity: Annotated[str | None, Query()] = None,
    status: Annotated[str | None, Query()] = None,
    high_only: Annotated[bool, Query()] = False,
) -> list[dict]:
    """이슈 목록 — 각 행에 SLA 카운트다운과 긴급 여부 포함."""
    issues = await issue_service.list_issues(db, severity, status, high_only)
    return issue_service.build_responses(issues)


@router.get("/emergency-count")
async def emergency_count(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """긴급(미종료) 이슈 수."""
    return {"emergency_count": await issue_service.emergency_count(db)}


@router.get("/{issue_id}")
async def get_issue(
    issue_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    issue = await issue_service.get_issue(db, issue_id)
    return issue_service.build_response(issue)


@router.post("/{issue_id}/assign")
async def assign_issue(
    issue_id: UUID,
    data: IssueAssign,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    await issue_service.assign(db, issue_id, data.assignee_name)
    return await _finish(db, issue_id)


@router.post("/{issue_id}/merge")
async def merge_issue(
    issue_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    await issue_service.merge(db, issue_id)
    return await _finish(db, issue_id)


@router.post("/{issue_id}/close")
async def close_issue(
    issue_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """이슈 종료 — 종료된 이슈는 더 이상 변경할 수 없음."""
    await issue_service.close(db, issue_id)
    return await _finish(db, issue_id)


@router.delete("/{issue_id}", response_model=MessageResponse)
async def delete_issue(
    issue_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    await issue_service.delete_issue(db, issue_id)
    await db.commit()
    await change_feed.publish(db, "issues")
    return {"message": "이슈가 삭제되었습니다 (Issue deleted)"}
