"""이슈 및 긴급 신고 SQLAlchemy ORM 모델 정의.

Issue and emergency report SQLAlchemy ORM model definitions.
Issues come from the public intake API or staff reports; facility and
zone references are kept as free text because reporters do not know ids.

Tables:
    - issues: 이슈 (Reported problems with severity and triage status)
    - emergency_reports: 긴급 신고 (Emergency calls with free-text or structured location)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Issue(Base):
    """이슈 모델.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        facility_ref: 시설 참조 (Facility code or id, optional)
        zone_ref: 구역 참조 (Zone name or id, optional)
        category: 분류 (Category, e.g. cleanliness)
        severity: 심각도 (low / medium / high / emergency)
        description: 내용 (Description)
        reported_by: 신고자 (Reporter)
        status: 상태 (open / assigned / merged / closed)
        assigned_to: 담당자 이름 (Assignee name)
        reported_at: 신고 일시 (SLA clock starts here)
    """

    __tablename__ = "issues"

    # 이슈 고유 식별자 — Issue unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    facility_ref: Mapped[str | None] = mapped_column(String(255), nullable=True)
    zone_ref: Mapped[str | None] = mapped_column(String(255), nullable=True)
    category: Mapped[str] = mapped_column(String(100), default="general", nullable=False)
    severity: Mapped[str] = mapped_column(String(20), default="medium", nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    reported_by: Mapped[str] = mapped_column(String(255), default="anonymous", nullable=False)
    # 상태 — closed는 종료 상태 (closed is terminal)
    status: Mapped[str] = mapped_column(String(20), default="open", nullable=False)
    assigned_to: Mapped[str | None] = mapped_column(String(255), nullable=True)
    reported_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))


class EmergencyReport(Base):
    """긴급 신고 모델 — 위치는 자유 텍스트 또는 주소/좌표.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        contact: 연락처 (Reporter contact)
        description: 내용 (Description)
        location_text: 자유 텍스트 위치 (Free-text location)
        address: 주소 (Structured address)
        lat: 위도 (Latitude)
        lng: 경도 (Longitude)
        source: 신고 경로 (Source, e.g. app / call)
        type: 긴급 유형 (Emergency type, e.g. medical)
        reported_at: 신고 일시 (Report timestamp)
    """

    __tablename__ = "emergency_reports"

    # 신고 고유 식별자 — Report unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    contact: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    location_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    lat: Mapped[float | None] = mapped_column(Float, nullable=True)
    lng: Mapped[float | None] = mapped_column(Float, nullable=True)
    source: Mapped[str] = mapped_column(String(50), default="app", nullable=False)
    type: Mapped[str] = mapped_column(String(50), default="general", nullable=False)
    reported_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
