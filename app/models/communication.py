"""커뮤니케이션 관련 SQLAlchemy ORM 모델 정의.

Communication-related SQLAlchemy ORM model definitions.
The notification center is an append-only log of messages sent to staff;
delivery itself happens outside this service. Ads/announcements are shown
to visitors while published and inside their validity window.

Tables:
    - notifications: 알림 센터 기록 (Notification center log)
    - ads: 광고/공지 (Ads and announcements)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Notification(Base):
    """알림 센터 기록 모델.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        name: 수신자 이름 (Recipient name)
        number: 수신자 번호 (Recipient phone number)
        message: 메시지 (Message body)
        sent_at: 발송 일시 (Sent timestamp, list order desc)
    """

    __tablename__ = "notifications"

    # 알림 고유 식별자 — Notification unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    number: Mapped[str] = mapped_column(String(50), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    sent_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))


class Ad(Base):
    """광고/공지 모델 — 생성 시 미게시 상태.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        title: 제목 (Title)
        description: 내용 (Body)
        type: 유형 (ad / announcement)
        valid_from: 게시 시작 (Validity start)
        valid_to: 게시 종료 (Validity end, >= valid_from)
        contact: 연락처 (Contact info)
        status: 게시 상태 (published / unpublished)
    """

    __tablename__ = "ads"

    # 광고 고유 식별자 — Ad unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(20), default="ad", nullable=False)
    valid_from: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    valid_to: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    contact: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # 게시 상태 — 생성 시 unpublished (new ads start unpublished)
    status: Mapped[str] = mapped_column(String(20), default="unpublished", nullable=False)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
