"""시설 SQLAlchemy ORM 모델 정의.

Facility SQLAlchemy ORM model definition.
Toilets, dustbins and water supply points share one table; the allowed
status values depend on ``type`` and are enforced by the facility service.

Tables:
    - facilities: 시설 (Physical facilities with location and status)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Facility(Base):
    """시설 모델.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        code: 시설 코드 (Facility code, e.g. "T-101")
        type: 시설 유형 (Toilet / Dustbin / Water Supply)
        zone_id: 구역 FK (Zone foreign key)
        lat: 위도 (Latitude, finite)
        lng: 경도 (Longitude, finite)
        status: 상태 (Status within the type's vocabulary)
        last_updated: 상태 갱신 일시 (Last status change)
        assigned_task: 배정 작업 메모 (Free-text task note)
    """

    __tablename__ = "facilities"

    # 시설 고유 식별자 — Facility unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    code: Mapped[str] = mapped_column(String(100), nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    # 구역 FK — 참조 중인 구역은 삭제 불가 (zone delete is guarded)
    zone_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("zones.id"), nullable=False)
    lat: Mapped[float] = mapped_column(Float, nullable=False)
    lng: Mapped[float] = mapped_column(Float, nullable=False)
    status: Mapped[str] = mapped_column(String(30), nullable=False)
    # 상태 갱신 일시 — Stamped on every status change
    last_updated: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    assigned_task: Mapped[str | None] = mapped_column(Text, nullable=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
