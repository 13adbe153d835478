"""기본 CRUD 레포지토리 — 모든 컬렉션 레포지토리의 부모 클래스.

Base CRUD Repository — Parent class for all collection repositories.
Every collection of the dashboard (zones, shifts, staff, ...) is reached
through a repository; services never build ad-hoc sessions. Writes only
flush; the router (or a batch loop) owns the commit.

Usage:
    class ZoneRepository(BaseRepository[Zone]):
        def __init__(self) -> None:
            super().__init__(Zone)
"""

from typing import Any, Generic, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import Base

# 컬렉션 모델 타입 — Collection model type
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """제네릭 CRUD 레포지토리.

    Attributes:
        model: 컬렉션 ORM 모델 (Collection ORM model)
    """

    def __init__(self, model: type[ModelType]) -> None:
        self.model: type[ModelType] = model

    def _apply_filters(self, query: Select, filters: dict[str, Any] | None) -> Select:
        # 값이 None인 필터는 건너뜀 — a None value means "any"
        for column_name, value in (filters or {}).items():
            if value is not None and hasattr(self.model, column_name):
                query = query.where(getattr(self.model, column_name) == value)
        return query

    async def get_by_id(self, db: AsyncSession, record_id: UUID) -> ModelType | None:
        """ID로 단일 레코드를 조회합니다. 없으면 None."""
        result = await db.execute(select(self.model).where(self.model.id == record_id))
        return result.scalar_one_or_none()

    async def get_many(self, db: AsyncSession, record_ids: list[UUID]) -> Sequence[ModelType]:
        """여러 ID로 한 번에 조회 — 담당자 이름 해석 등 (Bulk lookup, unordered)."""
        if not record_ids:
            return []
        result = await db.execute(select(self.model).where(self.model.id.in_(record_ids)))
        return result.scalars().all()

    async def get_all(
        self,
        db: AsyncSession,
        filters: dict[str, Any] | None = None,
        order_by: Any | None = None,
    ) -> Sequence[ModelType]:
        """동등 조건 필터로 컬렉션 전체를 조회합니다.

        Load a whole collection, optionally narrowed by equality filters.
        Snapshot loaders for the change feed go through here.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            filters: {'컬럼명': 값}, None 값은 무시 (None values are ignored)
            order_by: 정렬 기준 (Ordering clause)

        Returns:
            Sequence[ModelType]: 조회된 레코드 목록
        """
        query: Select = self._apply_filters(select(self.model), filters)
        if order_by is not None:
            query = query.order_by(order_by)
        result = await db.execute(query)
        return result.scalars().all()

    async def get_paginated(
        self,
        db: AsyncSession,
        query: Select,
        page: int = 1,
        per_page: int = 10,
    ) -> tuple[Sequence[ModelType], int]:
        """쿼리에 페이지를 적용합니다 (1부터 시작).

        Returns:
            tuple[Sequence[ModelType], int]: (해당 페이지 레코드, 전체 건수)
        """
        total: int = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar() or 0
        result = await db.execute(query.offset((page - 1) * per_page).limit(per_page))
        return result.scalars().all(), total

    async def create(self, db: AsyncSession, obj_data: dict[str, Any]) -> ModelType:
        """새 레코드를 추가하고 flush/refresh 합니다 (server defaults loaded)."""
        db_obj: ModelType = self.model(**obj_data)
        db.add(db_obj)
        await db.flush()
        await db.refresh(db_obj)
        return db_obj

    async def update(
        self,
        db: AsyncSession,
        record_id: UUID,
        update_data: dict[str, Any],
    ) -> ModelType | None:
        """부분 업데이트 — update_data에 있는 키만 변경, None 값은 컬럼을 비움.

        Returns:
            ModelType | None: 갱신된 레코드, 없으면 None
        """
        db_obj: ModelType | None = await self.get_by_id(db, record_id)
        if db_obj is None:
            return None
        for field, value in update_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)
        await db.flush()
        await db.refresh(db_obj)
        return db_obj

    async def delete(self, db: AsyncSession, record_id: UUID) -> bool:
        """레코드를 삭제합니다. 존재하지 않으면 False."""
        db_obj: ModelType | None = await self.get_by_id(db, record_id)
        if db_obj is None:
            return False
        await db.delete(db_obj)
        await db.flush()
        return True
