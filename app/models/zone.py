"""구역 및 근무조 배정 SQLAlchemy ORM 모델 정의.

Zone and shift assignment SQLAlchemy ORM model definitions.
A zone is a geographic area of the event site; each zone carries a live
headcount estimate that drives required staffing. Shift assignments are
per zone and per shift-type tag (red/orange/green).

Tables:
    - zones: 구역 (Event zones with optional coordinates and headcount)
    - shift_assignments: 근무조 배정 (Zone x shift-type staffing rosters)
"""

import uuid
from datetime import datetime, time, timezone

from sqlalchemy import JSON, DateTime, Float, ForeignKey, Integer, String, Text, Time, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Zone(Base):
    """구역 모델 — 행사장 내 지리적 구역.

    Zone model — Geographic area of the event site.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        name: 구역 이름 (Zone name, required)
        description: 설명 (Optional description)
        lat: 위도 (Latitude, optional, finite)
        lng: 경도 (Longitude, optional, finite)
        headcount: 현재 인원 추정치 (Live crowd estimate, >= 0)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)
    """

    __tablename__ = "zones"

    # 구역 고유 식별자 — Zone unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 구역 이름 — Zone display name
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # 설명 — Free-text description
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # 좌표 — lat/lng는 둘 다 있거나 둘 다 없음 (both-or-neither)
    lat: Mapped[float | None] = mapped_column(Float, nullable=True)
    lng: Mapped[float | None] = mapped_column(Float, nullable=True)
    # 인원 추정치 — Headcount estimate feeding coverage
    headcount: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))


class ShiftAssignment(Base):
    """근무조 배정 모델 — 구역별 근무조 유형의 스태프 명단.

    Shift assignment model — Staffing roster for one zone and shift type.
    assigned_staff_ids keeps insertion order and never holds duplicates.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        zone_id: 구역 FK (Zone foreign key)
        shift_type: 근무조 유형 (Shift-type tag: red/orange/green)
        start_time: 시작 시각 (Start time of day)
        end_time: 종료 시각 (End time of day)
        assigned_staff_ids: 배정 스태프 ID 목록 (Ordered staff id list)

    Constraints:
        uq_shift_zone_type: 구역 내 근무조 유형 고유 (One shift per zone and type)
    """

    __tablename__ = "shift_assignments"

    # 근무조 고유 식별자 — Shift unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 구역 FK — 참조 중인 구역은 삭제 불가 (zone delete is guarded)
    zone_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("zones.id"), nullable=False)
    # 근무조 유형 — Shift-type tag
    shift_type: Mapped[str] = mapped_column(String(20), nullable=False)
    # 근무 시간 — Time-of-day window
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    # 배정 스태프 — Ordered staff ids (문자열 UUID 목록)
    assigned_staff_ids: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("zone_id", "shift_type", name="uq_shift_zone_type"),
    )
