"""근무조 배정 레포지토리.

Shift assignment repository — Handles shift_assignments DB queries.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.zone import ShiftAssignment
from app.repositories.base import BaseRepository


class ShiftRepository(BaseRepository[ShiftAssignment]):

    def __init__(self) -> None:
        super().__init__(ShiftAssignment)

    async def get_by_zone_and_type(
        self,
        db: AsyncSession,
        zone_id: UUID,
        shift_type: str,
    ) -> ShiftAssignment | None:
        query: Select = select(ShiftAssignment).where(
            ShiftAssignment.zone_id == zone_id,
            ShiftAssignment.shift_type == shift_type,
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_filtered(
        self,
        db: AsyncSession,
        zone_id: UUID | None = None,
        shift_type: str | None = None,
    ) -> Sequence[ShiftAssignment]:
        return await self.get_all(
            db,
            filters={"zone_id": zone_id, "shift_type": shift_type},
            order_by=ShiftAssignment.created_at,
        )


shift_repository: ShiftRepository = ShiftRepository()
