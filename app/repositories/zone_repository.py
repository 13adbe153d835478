"""구역 레포지토리.

Zone repository — Handles zones DB queries, including the reference
counts used to guard zone deletion.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.facility import Facility
from app.models.task import Task
from app.models.staff import Team
from app.models.zone import ShiftAssignment, Zone
from app.repositories.base import BaseRepository


class ZoneRepository(BaseRepository[Zone]):

    def __init__(self) -> None:
        super().__init__(Zone)

    async def get_ordered(self, db: AsyncSession) -> Sequence[Zone]:
        return await self.get_all(db, order_by=Zone.name)

    async def get_by_name(self, db: AsyncSession, name: str) -> Zone | None:
        """이름으로 구역 조회 (대소문자 무시, 첫 번째 일치)."""
        query: Select = (
            select(Zone)
            .where(func.lower(Zone.name) == name.strip().lower())
            .order_by(Zone.created_at)
            .limit(1)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def count_references(self, db: AsyncSession, zone_id: UUID) -> dict[str, int]:
        """구역을 참조하는 근무조/시설/업무/팀 수 (References blocking deletion)."""
        counts: dict[str, int] = {}
        for label, model in (("shifts", ShiftAssignment), ("facilities", Facility), ("tasks", Task)):
            query: Select = select(func.count()).select_from(model).where(model.zone_id == zone_id)
            counts[label] = (await db.execute(query)).scalar() or 0
        # 팀은 zone_ids JSON 목록으로 참조 — teams hold zone ids in a JSON list
        team_zones = (await db.execute(select(Team.zone_ids))).scalars().all()
        counts["teams"] = sum(1 for ids in team_zones if str(zone_id) in (ids or []))
        return counts


zone_repository: ZoneRepository = ZoneRepository()
