"""데이터베이스 엔진 및 세션 설정 모듈.

Async SQLAlchemy engine, session factory and ORM base. This is the
document store behind every dashboard collection; the change feed loads
its snapshots through the same sessions.
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from app.config import settings

# asyncpg 전용 — 트랜잭션 모드 풀러에서는 prepared statement 캐시를 끔
_connect_args: dict[str, Any] = (
    {"statement_cache_size": 0} if settings.DATABASE_URL.startswith("postgresql+asyncpg") else {}
)

engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_pre_ping=True,
    connect_args=_connect_args,
)

# 커밋 후 스냅샷 발행 시에도 속성 접근 가능 (attributes stay loaded after commit)
async_session: async_sessionmaker[AsyncSession] = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """모든 컬렉션 모델의 선언적 베이스 (Declarative base for collection models)."""


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """요청 단위 세션 — FastAPI dependency.

    Routers commit explicitly after a successful write; anything left
    uncommitted when the request ends is discarded on close.
    """
    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()
