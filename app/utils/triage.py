"""이슈/긴급 트리아지 규칙 모듈.

Issue/emergency triage rules.
Status values are independent flags rather than a strict order: an issue
may move among open/assigned/merged freely, but ``closed`` is terminal.
An issue is an active emergency while its severity is ``emergency`` and
it is not closed; the dashboard banner counts those.
"""

from collections.abc import Iterable
from datetime import datetime
from enum import Enum
from typing import Any

from app.config import settings
from app.utils.exceptions import InvalidTransitionError, ValidationError
from app.utils.sla_clock import Countdown, countdown


class IssueSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EMERGENCY = "emergency"


class IssueStatus(str, Enum):
    OPEN = "open"
    ASSIGNED = "assigned"
    MERGED = "merged"
    CLOSED = "closed"


HIGH_SEVERITIES: frozenset[str] = frozenset({IssueSeverity.HIGH.value, IssueSeverity.EMERGENCY.value})


def is_active_emergency(issue: Any) -> bool:
    """긴급이면서 종료되지 않은 이슈인지 확인합니다."""
    return issue.severity == IssueSeverity.EMERGENCY.value and issue.status != IssueStatus.CLOSED.value


def is_high_severity(issue: Any) -> bool:
    return issue.severity in HIGH_SEVERITIES


def emergency_count(issues: Iterable[Any]) -> int:
    """긴급 배너 카운트 (Emergency banner count)."""
    return sum(1 for issue in issues if is_active_emergency(issue))


def _ensure_not_closed(issue: Any, action: str) -> None:
    if issue.status == IssueStatus.CLOSED.value:
        raise InvalidTransitionError(f"Cannot {action} a closed issue")


def plan_assign(issue: Any, assignee_name: str | None) -> dict[str, Any]:
    """담당자 배정 — assigned_to 설정 및 상태 assigned.

    Raises:
        ValidationError: 담당자 이름이 비었을 때 (Blank assignee name)
        InvalidTransitionError: 종료된 이슈일 때 (Issue already closed)
    """
    name: str = (assignee_name or "").strip()
    if not name:
        raise ValidationError("Assignee name is required")
    _ensure_not_closed(issue, "assign")
    return {"assigned_to": name, "status": IssueStatus.ASSIGNED.value}


def plan_merge(issue: Any) -> dict[str, Any]:
    _ensure_not_closed(issue, "merge")
    return {"status": IssueStatus.MERGED.value}


def plan_close(issue: Any) -> dict[str, Any]:
    _ensure_not_closed(issue, "close")
    return {"status": IssueStatus.CLOSED.value}


def issue_countdown(issue: Any, now: datetime | None = None, sla_hours: float | None = None) -> Countdown:
    """보고 시각 기준 고정 SLA 윈도우 카운트다운 (Fixed-window SLA countdown)."""
    window: float = sla_hours if sla_hours is not None else settings.ISSUE_SLA_HOURS
    return countdown(issue.reported_at, window, now)
