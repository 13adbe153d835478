"""업무 레포지토리.

Task repository — Handles tasks DB queries.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.task import Task
from app.repositories.base import BaseRepository


class TaskRepository(BaseRepository[Task]):

    def __init__(self) -> None:
        super().__init__(Task)

    async def get_filtered(
        self,
        db: AsyncSession,
        status: str | None = None,
        priority: str | None = None,
        zone_id: UUID | None = None,
        assignee_kind: str | None = None,
        assignee_id: UUID | None = None,
    ) -> Sequence[Task]:
        return await self.get_all(
            db,
            filters={
                "status": status,
                "priority": priority,
                "zone_id": zone_id,
                "assignee_kind": assignee_kind,
                "assignee_id": assignee_id,
            },
            order_by=Task.created_at.desc(),
        )


task_repository: TaskRepository = TaskRepository()
