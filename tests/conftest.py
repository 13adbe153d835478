"""테스트 인프라 — 인메모리 SQLite DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — In-memory SQLite engine, session and httpx client
fixtures. Each test gets a fresh database; the schema is created from the
ORM metadata, so the suite needs no running PostgreSQL.
"""

from collections.abc import AsyncGenerator
from io import BytesIO

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from openpyxl import Workbook
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.main import app
from app.models import *  # noqa: F401,F403 — register all models with metadata

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

ADMIN = "/api/v1/admin"
PUBLIC = "/api/v1/app"


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트마다 새 인메모리 DB — 단일 연결을 공유 (StaticPool)."""
    eng = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션을 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 데이터 생성 (API 경유)
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def zone(client: AsyncClient) -> dict:
    """인원 40명 구역 — 필요 인원 5명 (HEADCOUNT_PER_STAFF=8)."""
    res = await client.post(f"{ADMIN}/zones", json={
        "name": "North Gate", "lat": 25.43, "lng": 81.84, "headcount": 40,
    })
    assert res.status_code == 201
    return res.json()


async def make_staff(client: AsyncClient, name: str, **overrides) -> dict:
    payload = {
        "name": name,
        "email": f"{name.lower().replace(' ', '.')}@example.com",
        "phone": "+91-9000000000",
        "department": "Sanitation",
    }
    payload.update(overrides)
    res = await client.post(f"{ADMIN}/staff", json=payload)
    assert res.status_code == 201, res.text
    return res.json()


@pytest_asyncio.fixture
async def staff_member(client: AsyncClient) -> dict:
    return await make_staff(client, "Ravi Kumar")


def xlsx_bytes(rows: list[list]) -> bytes:
    """메모리에서 워크북을 만듭니다 — 첫 행은 헤더."""
    wb = Workbook()
    ws = wb.active
    for row in rows:
        ws.append(row)
    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


XLSX_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
