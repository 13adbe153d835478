"""스태프 및 팀 SQLAlchemy ORM 모델 정의.

Staff and team SQLAlchemy ORM model definitions.
Staff records are never hard-deleted; deactivation flips status to
``inactive``. Team membership is mirrored on each staff record as a list
of team names (``teams``) so the staff table can be filtered by team.

Tables:
    - staff: 스태프 (Field staff, managers and admins)
    - teams: 팀 (Named groups with a leader and members)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Staff(Base):
    """스태프 모델.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        name: 이름 (Full name)
        phone: 전화번호 (Phone number)
        email: 이메일 (Email address)
        role: 역할 (admin / manager / staff)
        zone: 담당 구역 이름 (Zone label, free text)
        department: 부서 (Department)
        status: 상태 (active / inactive / on-leave)
        teams: 소속 팀 이름 목록 (Team-name tags)
        join_date: 입사일 (Join timestamp)
        last_active: 최근 활동 일시 (Last activity timestamp)
    """

    __tablename__ = "staff"

    # 스태프 고유 식별자 — Staff unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    # 역할 — admin, manager, staff
    role: Mapped[str] = mapped_column(String(20), default="staff", nullable=False)
    zone: Mapped[str] = mapped_column(String(255), default="General", nullable=False)
    department: Mapped[str] = mapped_column(String(255), default="General", nullable=False)
    # 상태 — active, inactive, on-leave (비활성화는 소프트 삭제)
    status: Mapped[str] = mapped_column(String(20), default="active", nullable=False)
    # 소속 팀 태그 — Team names, kept in sync by the team service
    teams: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    join_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    last_active: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))


class Team(Base):
    """팀 모델 — 리더와 멤버로 구성된 스태프 그룹.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        name: 팀 이름 (Team name, mirrored onto member staff records)
        description: 설명 (Description)
        leader_id: 리더 스태프 FK (Leader staff foreign key)
        member_ids: 멤버 스태프 ID 목록 (Member staff ids, no duplicates)
        zone_ids: 담당 구역 ID 목록 (Covered zone ids)
        default_shift: 기본 근무조 (morning / afternoon / night)
    """

    __tablename__ = "teams"

    # 팀 고유 식별자 — Team unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # 리더 FK — 스태프는 하드 삭제되지 않음 (staff rows are never hard-deleted)
    leader_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("staff.id"), nullable=False)
    member_ids: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    zone_ids: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    default_shift: Mapped[str] = mapped_column(String(20), default="morning", nullable=False)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
