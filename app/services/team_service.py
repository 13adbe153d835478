"""팀 서비스 — 팀 관리와 스태프 팀 태그 동기화.

Team Service — Team management.
Team membership is mirrored onto each member's ``Staff.teams`` tag list.
Tag changes run as a batch with one commit per staff record, so a store
failure on one member leaves the others updated and is reported in the
returned BatchResult.
"""

from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.communication import Notification
from app.models.staff import Staff, Team
from app.repositories.staff_repository import staff_repository, team_repository
from app.repositories.zone_repository import zone_repository
from app.schemas.common import BatchResult
from app.schemas.staff import TeamCreate, TeamMembersUpdate, TeamUpdate
from app.services.batch import SkipRecord, commit_each
from app.services.change_feed import change_feed
from app.services.notification_service import notification_service
from app.utils.exceptions import NotFoundError
from app.utils.validation import require_text, to_uuid


def _unique_ids(values: list[str], field: str) -> list[UUID]:
    """순서를 유지하며 중복 제거 (De-duplicate, first-seen order)."""
    seen: list[UUID] = []
    for value in values:
        uid: UUID = to_uuid(value, field)
        if uid not in seen:
            seen.append(uid)
    return seen


class TeamService:

    async def build_response(self, db: AsyncSession, team: Team) -> dict:
        """팀 응답 — 리더/멤버 이름 포함 (with leader and member names)."""
        member_ids: list[UUID] = [UUID(m) for m in team.member_ids or []]
        people: dict[UUID, Staff] = {
            s.id: s for s in await staff_repository.get_many(db, member_ids + [team.leader_id])
        }
        leader: Staff | None = people.get(team.leader_id)
        return {
            "id": str(team.id),
            "name": team.name,
            "description": team.description,
            "leader_id": str(team.leader_id),
            "leader_name": leader.name if leader else None,
            "member_ids": list(team.member_ids or []),
            "members": [
                {"id": str(m), "name": people[m].name if m in people else None}
                for m in member_ids
            ],
            "zone_ids": list(team.zone_ids or []),
            "default_shift": team.default_shift,
            "created_at": team.created_at,
        }

    async def list_teams(self, db: AsyncSession) -> Sequence[Team]:
        return await team_repository.get_ordered(db)

    async def get_team(self, db: AsyncSession, team_id: UUID) -> Team:
        team: Team | None = await team_repository.get_by_id(db, team_id)
        if team is None:
            raise NotFoundError("팀을 찾을 수 없습니다 (Team not found)")
        return team

    async def _require_staff(self, db: AsyncSession, staff_ids: list[UUID]) -> None:
        found: set[UUID] = {s.id for s in await staff_repository.get_many(db, staff_ids)}
        missing: list[str] = [str(s) for s in staff_ids if s not in found]
        if missing:
            raise NotFoundError(f"스태프를 찾을 수 없습니다 (Staff not found: {', '.join(missing)})")

    async def _require_zones(self, db: AsyncSession, zone_ids: list[UUID]) -> list[str]:
        found: set[UUID] = {z.id for z in await zone_repository.get_many(db, zone_ids)}
        missing: list[str] = [str(z) for z in zone_ids if z not in found]
        if missing:
            raise NotFoundError(f"구역을 찾을 수 없습니다 (Zone not found: {', '.join(missing)})")
        return [str(z) for z in zone_ids]

    async def sync_tags(
        self,
        db: AsyncSession,
        staff_ids: list[UUID],
        add: str | None = None,
        remove: str | None = None,
    ) -> BatchResult:
        """스태프별 팀 태그 추가/제거 — 레코드 단위 커밋.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            staff_ids: 대상 스태프 ID (Plain ids, captured before the loop)
            add: 추가할 팀 이름 (Team name to add)
            remove: 제거할 팀 이름 (Team name to remove)

        Returns:
            BatchResult: 스태프별 결과 (Per-staff outcome)
        """
        result = BatchResult(total=len(staff_ids))
        for staff_id in staff_ids:

            async def write(staff_id: UUID = staff_id) -> None:
                staff: Staff | None = await staff_repository.get_by_id(db, staff_id)
                if staff is None:
                    raise SkipRecord("Staff not found")
                tags: list[str] = [t for t in staff.teams or [] if t != remove]
                if add and add not in tags:
                    tags.append(add)
                await staff_repository.update(db, staff_id, {"teams": tags})

            await commit_each(db, result, staff_id, write)
        return result

    async def create_team(self, db: AsyncSession, data: TeamCreate) -> tuple[UUID, BatchResult]:
        """팀 생성 후 멤버에게 팀 태그를 붙입니다.

        Raises:
            ValidationError: 이름이 비었을 때 (Blank name)
            NotFoundError: 리더, 멤버 또는 구역이 없을 때 (Leader, member or zone missing)
        """
        name: str = require_text(data.name, "name")
        leader_id: UUID = to_uuid(data.leader_id, "leader_id")
        member_ids: list[UUID] = _unique_ids(data.member_ids, "member_ids")
        await self._require_staff(db, [leader_id] + member_ids)
        zone_ids: list[str] = await self._require_zones(db, _unique_ids(data.zone_ids, "zone_ids"))

        team: Team = await team_repository.create(
            db,
            {
                "name": name,
                "description": data.description,
                "leader_id": leader_id,
                "member_ids": [str(m) for m in member_ids],
                "zone_ids": zone_ids,
                "default_shift": data.default_shift.value,
            },
        )
        team_id: UUID = team.id
        await db.commit()
        return team_id, await self.sync_tags(db, member_ids, add=name)

    async def update_team(self, db: AsyncSession, team_id: UUID, data: TeamUpdate) -> tuple[UUID, BatchResult | None]:
        """팀 정보 수정 — 이름이 바뀌면 멤버 태그도 일괄 변경."""
        team: Team = await self.get_team(db, team_id)
        old_name: str = team.name
        member_ids: list[UUID] = [UUID(m) for m in team.member_ids or []]
        update_data: dict[str, Any] = data.model_dump(exclude_unset=True, mode="json")

        if "name" in update_data:
            update_data["name"] = require_text(update_data["name"], "name")
        if "leader_id" in update_data:
            leader_id: UUID = to_uuid(update_data["leader_id"], "leader_id")
            await self._require_staff(db, [leader_id])
            update_data["leader_id"] = leader_id
        if "zone_ids" in update_data:
            update_data["zone_ids"] = await self._require_zones(
                db, _unique_ids(update_data["zone_ids"] or [], "zone_ids")
            )

        await team_repository.update(db, team_id, update_data)
        await db.commit()

        new_name: str | None = update_data.get("name")
        if new_name and new_name != old_name:
            return team_id, await self.sync_tags(db, member_ids, add=new_name, remove=old_name)
        return team_id, None

    async def update_members(self, db: AsyncSession, team_id: UUID, data: TeamMembersUpdate) -> tuple[UUID, BatchResult]:
        """멤버 목록 교체 후 추가/제거된 스태프의 태그를 동기화합니다."""
        team: Team = await self.get_team(db, team_id)
        name: str = team.name
        previous: list[UUID] = [UUID(m) for m in team.member_ids or []]
        members: list[UUID] = _unique_ids(data.member_ids, "member_ids")
        await self._require_staff(db, members)

        await team_repository.update(db, team_id, {"member_ids": [str(m) for m in members]})
        await db.commit()

        added: list[UUID] = [m for m in members if m not in previous]
        removed: list[UUID] = [m for m in previous if m not in members]
        result: BatchResult = await self.sync_tags(db, added, add=name)
        removal: BatchResult = await self.sync_tags(db, removed, remove=name)
        result.total += removal.total
        result.succeeded += removal.succeeded
        result.failed += removal.failed
        result.skipped += removal.skipped
        result.errors.extend(removal.errors)
        return team_id, result

    async def delete_team(self, db: AsyncSession, team_id: UUID) -> BatchResult:
        """팀 삭제 — 스태프는 유지하고 팀 태그만 정리합니다."""
        team: Team = await self.get_team(db, team_id)
        name: str = team.name
        member_ids: list[UUID] = [UUID(m) for m in team.member_ids or []]
        await team_repository.delete(db, team_id)
        await db.commit()
        return await self.sync_tags(db, member_ids, remove=name)

    async def notify(self, db: AsyncSession, team_id: UUID, message: str) -> list[Notification]:
        """리더와 멤버 각각에게 알림 기록 1건씩 (one entry per person)."""
        team: Team = await self.get_team(db, team_id)
        recipients: list[UUID] = _unique_ids([str(team.leader_id)] + list(team.member_ids or []), "member_ids")
        people: dict[UUID, Staff] = {s.id: s for s in await staff_repository.get_many(db, recipients)}
        require_text(message, "message")

        notifications: list[Notification] = []
        for staff_id in recipients:
            staff: Staff | None = people.get(staff_id)
            if staff is None:
                continue
            notifications.append(await notification_service.record(db, staff.name, staff.phone, message))
        return notifications

    async def snapshot_items(self, db: AsyncSession) -> list[dict]:
        return [await self.build_response(db, t) for t in await self.list_teams(db)]


team_service: TeamService = TeamService()
change_feed.register("teams", team_service.snapshot_items)
