"""SLA 시계 유틸리티 모듈.

SLA clock — stateless deadline/countdown computation.

    deadline = reported_at + sla window
    diff     = deadline - now
    diff <= 0  -> "Expired"
    otherwise  -> "{h}h {m}m {s}s"

The clock owns no timer. Callers re-evaluate it from timestamps they
already hold (the dashboard ticks once per second locally), so a tick
never requires a store read.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from app.utils.exceptions import ValidationError

EXPIRED_LABEL: str = "Expired"


def as_utc(value: datetime) -> datetime:
    """naive datetime은 UTC로 간주합니다 (Treat naive datetimes as UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def percent(part: int, whole: int) -> int:
    """백분율을 가장 가까운 정수로 반올림합니다 (half-up). whole이 0이면 0."""
    if whole <= 0:
        return 0
    return (part * 200 + whole) // (whole * 2)


@dataclass(frozen=True)
class Countdown:
    """SLA 카운트다운 결과.

    Attributes:
        expired: 기한 초과 여부 (Whether the deadline has passed)
        remaining: 남은 시간, 만료 시 None (Remaining duration, None when expired)
        deadline: 기한 시각 UTC (Deadline, UTC)
    """

    expired: bool
    remaining: timedelta | None
    deadline: datetime

    @property
    def label(self) -> str:
        if self.expired or self.remaining is None:
            return EXPIRED_LABEL
        total: float = self.remaining.total_seconds()
        hours: int = math.floor(total / 3600)
        minutes: int = math.floor((total % 3600) / 60)
        seconds: int = math.floor(total % 60)
        return f"{hours}h {minutes}m {seconds}s"

    def as_dict(self) -> dict[str, Any]:
        return {
            "expired": self.expired,
            "remaining_seconds": int(self.remaining.total_seconds()) if self.remaining else None,
            "label": self.label,
            "deadline": self.deadline,
        }


def countdown(reported_at: datetime, sla_hours: float, now: datetime | None = None) -> Countdown:
    """보고 시각과 SLA 시간으로 남은 시간을 계산합니다.

    Compute the countdown against a fixed SLA window.

    Args:
        reported_at: 보고/생성 시각 (Report or creation timestamp)
        sla_hours: SLA 시간, 양수 (Positive SLA window in hours)
        now: 기준 시각, 기본값 현재 UTC (Reference time, defaults to now)

    Returns:
        Countdown: 만료 여부와 남은 시간 (Expiry flag and remaining duration)

    Raises:
        ValidationError: sla_hours가 0 이하일 때 (Non-positive SLA window)
    """
    if sla_hours <= 0:
        raise ValidationError("SLA window must be positive")
    return _countdown(reported_at, timedelta(hours=sla_hours), now)


def _countdown(start: datetime, window: timedelta, now: datetime | None) -> Countdown:
    current: datetime = as_utc(now) if now is not None else datetime.now(timezone.utc)
    deadline: datetime = as_utc(start) + window
    diff: timedelta = deadline - current
    if diff.total_seconds() <= 0:
        return Countdown(expired=True, remaining=None, deadline=deadline)
    return Countdown(expired=False, remaining=diff, deadline=deadline)


def task_countdown(created_at: datetime, sla_minutes: int, now: datetime | None = None) -> Countdown:
    """업무의 sla_minutes 기준 카운트다운 (Countdown for a task's own SLA budget)."""
    if sla_minutes <= 0:
        raise ValidationError("SLA budget must be positive")
    return _countdown(created_at, timedelta(minutes=sla_minutes), now)


def is_sla_compliant(
    created_at: datetime | None,
    completed_at: datetime | None,
    sla_minutes: int | None,
) -> bool:
    """완료 건이 SLA 내에 처리되었는지 확인합니다.

    compliant = (completed_at - created_at) <= sla_minutes * 60.
    Missing timestamps or budget count as non-compliant.
    """
    if created_at is None or completed_at is None or not sla_minutes:
        return False
    elapsed: float = (as_utc(completed_at) - as_utc(created_at)).total_seconds()
    return elapsed <= sla_minutes * 60


def sla_compliance_percent(tasks: Iterable[Any], verified_status: str = "Verified") -> int:
    """Verified 업무 중 SLA 준수 비율(%)을 계산합니다.

    SLA compliance percentage over Verified tasks, rounded to the nearest
    integer; 0 when no task is Verified.

    Args:
        tasks: status, created_at, completed_at, sla_minutes 속성을 가진 업무들
        verified_status: 검수 완료 상태 값 (Status value that counts as Verified)

    Returns:
        int: 0~100
    """
    verified: list[Any] = [t for t in tasks if t.status == verified_status]
    compliant: int = sum(
        1 for t in verified if is_sla_compliant(t.created_at, t.completed_at, t.sla_minutes)
    )
    return percent(compliant, len(verified))
