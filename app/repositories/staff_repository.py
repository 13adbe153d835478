"""스태프/팀 레포지토리.

Staff and team repositories — Handles staff and teams DB queries.
Staff search matches name, email or phone case-insensitively.
"""

from typing import Sequence

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.staff import Staff, Team
from app.repositories.base import BaseRepository


class StaffRepository(BaseRepository[Staff]):

    def __init__(self) -> None:
        super().__init__(Staff)

    def _filtered_query(
        self,
        role: str | None = None,
        zone: str | None = None,
        status: str | None = None,
        department: str | None = None,
        search: str | None = None,
    ) -> Select:
        query: Select = self._apply_filters(
            select(Staff),
            {"role": role, "zone": zone, "status": status, "department": department},
        )
        if search:
            pattern: str = f"%{search.strip().lower()}%"
            query = query.where(
                or_(
                    func.lower(Staff.name).like(pattern),
                    func.lower(Staff.email).like(pattern),
                    Staff.phone.like(pattern),
                )
            )
        return query.order_by(Staff.name)

    async def search(
        self,
        db: AsyncSession,
        role: str | None = None,
        zone: str | None = None,
        status: str | None = None,
        department: str | None = None,
        search: str | None = None,
        page: int = 1,
        per_page: int = 10,
    ) -> tuple[Sequence[Staff], int]:
        query: Select = self._filtered_query(role, zone, status, department, search)
        return await self.get_paginated(db, query, page, per_page)

    async def get_filtered(
        self,
        db: AsyncSession,
        role: str | None = None,
        zone: str | None = None,
        status: str | None = None,
        department: str | None = None,
        search: str | None = None,
    ) -> Sequence[Staff]:
        result = await db.execute(self._filtered_query(role, zone, status, department, search))
        return result.scalars().all()

    async def count_by(self, db: AsyncSession, column_name: str) -> dict[str, int]:
        """컬럼 값별 스태프 수 (Group counts by role or department)."""
        column = getattr(Staff, column_name)
        query: Select = select(column, func.count()).group_by(column).order_by(column)
        result = await db.execute(query)
        return {value: count for value, count in result.all()}


class TeamRepository(BaseRepository[Team]):

    def __init__(self) -> None:
        super().__init__(Team)

    async def get_ordered(self, db: AsyncSession) -> Sequence[Team]:
        return await self.get_all(db, order_by=Team.name)


staff_repository: StaffRepository = StaffRepository()
team_repository: TeamRepository = TeamRepository()
