"""관리자 팀 라우터 — 팀 관리 API.

Admin Team Router — Team CRUD, member sync and team notifications.
Membership and deletion return the tag-sync BatchResult alongside the team.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.common import BatchResult
from app.schemas.staff import NotifyRequest, TeamCreate, TeamMembersUpdate, TeamUpdate
from app.services.change_feed import change_feed
from app.services.notification_service import notification_service
from app.services.team_service import team_service

router: APIRouter = APIRouter()


async def _publish(db: AsyncSession) -> None:
    await change_feed.publish(db, "teams")
    await change_feed.publish(db, "staff")


@router.get("")
async def list_teams(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[dict]:
    teams = await team_service.list_teams(db)
    return [await team_service.build_response(db, t) for t in teams]


@router.get("/{team_id}")
async def get_team(
    team_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """팀 상세 — 리더/멤버 이름 포함."""
    team = await team_service.get_team(db, team_id)
    return await team_service.build_response(db, team)


@router.post("", status_code=201)
async def create_team(
    data: TeamCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """팀 생성 — name과 존재하는 리더 필수, 멤버 중복 제거."""
    team_id, sync = await team_service.create_team(db, data)
    await _publish(db)
    team = await team_service.get_team(db, team_id)
    return {"team": await team_service.build_response(db, team), "member_sync": sync}


@router.put("/{team_id}")
async def update_team(
    team_id: UUID,
    data: TeamUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    team_id, sync = await team_service.update_team(db, team_id, data)
    await _publish(db)
    team = await team_service.get_team(db, team_id)
    return {"team": await team_service.build_response(db, team), "member_sync": sync}


@router.put("/{team_id}/members")
async def update_members(
    team_id: UUID,
    data: TeamMembersUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """멤버 목록 교체 — 스태프 팀 태그를 레코드 단위로 동기화."""
    team_id, sync = await team_service.update_members(db, team_id, data)
    await _publish(db)
    team = await team_service.get_team(db, team_id)
    return {"team": await team_service.build_response(db, team), "member_sync": sync}


@router.delete("/{team_id}", response_model=BatchResult)
async def delete_team(
    team_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BatchResult:
    """팀 삭제 — 스태프는 유지, 팀 태그 정리 결과를 반환."""
    result = await team_service.delete_team(db, team_id)
    await _publish(db)
    return result


@router.post("/{team_id}/notify", status_code=201)
async def notify_team(
    team_id: UUID,
    data: NotifyRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[dict]:
    """리더와 멤버 각각에게 알림 기록을 남깁니다."""
    notifications = await team_service.notify(db, team_id, data.message)
    await db.commit()
    await change_feed.publish(db, "notifications")
    return [notification_service.build_response(n) for n in notifications]
