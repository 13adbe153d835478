"""시설 레포지토리.

Facility repository — Handles facilities DB queries and aggregate counts.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.facility import Facility
from app.repositories.base import BaseRepository


class FacilityRepository(BaseRepository[Facility]):

    def __init__(self) -> None:
        super().__init__(Facility)

    async def get_filtered(
        self,
        db: AsyncSession,
        facility_type: str | None = None,
        zone_id: UUID | None = None,
        status: str | None = None,
    ) -> Sequence[Facility]:
        return await self.get_all(
            db,
            filters={"type": facility_type, "zone_id": zone_id, "status": status},
            order_by=Facility.code,
        )

    async def count_grouped(self, db: AsyncSession, *columns: str) -> list[tuple]:
        """컬럼 조합별 시설 수 — [(값..., count)]."""
        cols = [getattr(Facility, c) for c in columns]
        query: Select = select(*cols, func.count()).group_by(*cols).order_by(*cols)
        result = await db.execute(query)
        return [tuple(row) for row in result.all()]


facility_repository: FacilityRepository = FacilityRepository()
