"""업무 SQLAlchemy ORM 모델 정의.

Task SQLAlchemy ORM model definition.
A task is assigned through a tagged reference (assignee_kind + assignee_id)
pointing at either a staff member or a team. Photo evidence is stored as
lists of storage locators.

Tables:
    - tasks: 업무 (Field tasks with lifecycle status and SLA budget)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Task(Base):
    """업무 모델.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        title: 제목 (Task title)
        description: 설명 (Task description)
        facility_id: 대상 시설 FK (Target facility, optional)
        zone_id: 대상 구역 FK (Target zone, optional)
        assignee_kind: 담당 종류 (staff / team)
        assignee_id: 담당 ID (Staff or team id)
        priority: 우선순위 (Low / Medium / High)
        sla_minutes: SLA 분 (SLA budget in minutes, > 0)
        status: 상태 (Pending / In Progress / Done / Verified)
        started_at: 시작 일시 (Set by start)
        completed_at: 완료 일시 (Set by mark_done)
        photos_before: 사전 사진 목록 (Before-photo locators)
        photos_after: 사후 사진 목록 (After-photo locators)
    """

    __tablename__ = "tasks"

    # 업무 고유 식별자 — Task unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    # 대상 시설 FK — 시설 삭제 시 NULL (SET NULL on facility delete)
    facility_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("facilities.id", ondelete="SET NULL"), nullable=True)
    # 대상 구역 FK — 참조 중인 구역은 삭제 불가
    zone_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("zones.id"), nullable=True)
    # 담당 참조 — Tagged reference: kind + id
    assignee_kind: Mapped[str] = mapped_column(String(10), nullable=False)
    assignee_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    priority: Mapped[str] = mapped_column(String(10), default="Medium", nullable=False)
    sla_minutes: Mapped[int] = mapped_column(Integer, default=60, nullable=False)
    # 상태 — Pending → In Progress → Done → Verified
    status: Mapped[str] = mapped_column(String(20), default="Pending", nullable=False)
    # 생성 일시 — SLA 기준 시각 (SLA clock starts here)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    photos_before: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    photos_after: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
