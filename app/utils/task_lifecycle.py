"""업무 라이프사이클 상태 머신 모듈.

Task lifecycle state machine.

    Pending --start--> In Progress --mark_done(evidence)--> Done --verify--> Verified
                            ^                                  |
                            +-------------reject---------------+

Verified is terminal. Every other (status, action) pair raises
InvalidTransitionError; nothing is coerced to the nearest valid state.

The functions here only plan the field changes for a transition; the
task service applies them through the repository.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from app.utils.exceptions import InvalidTransitionError, ValidationError
from app.utils.sla_clock import percent


class TaskStatus(str, Enum):
    """업무 상태 — ordered task status set."""

    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    DONE = "Done"
    VERIFIED = "Verified"


class TaskAction(str, Enum):
    """업무 상태 전이 액션 (Lifecycle actions)."""

    START = "start"
    MARK_DONE = "mark_done"
    VERIFY = "verify"
    REJECT = "reject"


class TaskPriority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


# 전이 테이블 — action -> (허용 출발 상태, 도착 상태)
TRANSITIONS: dict[TaskAction, tuple[TaskStatus, TaskStatus]] = {
    TaskAction.START: (TaskStatus.PENDING, TaskStatus.IN_PROGRESS),
    TaskAction.MARK_DONE: (TaskStatus.IN_PROGRESS, TaskStatus.DONE),
    TaskAction.VERIFY: (TaskStatus.DONE, TaskStatus.VERIFIED),
    TaskAction.REJECT: (TaskStatus.DONE, TaskStatus.IN_PROGRESS),
}

# 사전 사진 첨부 허용 상태 (Statuses that still accept before-photos)
BEFORE_PHOTO_STATUSES: frozenset[TaskStatus] = frozenset({TaskStatus.PENDING, TaskStatus.IN_PROGRESS})


def next_status(current: str, action: TaskAction) -> TaskStatus:
    """현재 상태에서 액션 적용 후 상태를 반환합니다.

    Resolve the target status for an action.

    Args:
        current: 현재 상태 값 (Current status value)
        action: 전이 액션 (Lifecycle action)

    Returns:
        TaskStatus: 도착 상태 (Target status)

    Raises:
        InvalidTransitionError: 현재 상태에서 허용되지 않는 액션일 때
    """
    source, target = TRANSITIONS[action]
    if current != source.value:
        raise InvalidTransitionError(
            f"Cannot {action.value} a task in status '{current}' "
            f"(allowed only from '{source.value}')"
        )
    return target


def clean_evidence(evidence: Sequence[str] | None) -> list[str]:
    """증빙 리소스 목록을 검증합니다 — 비어있거나 공백 항목이면 실패.

    Validate a photo-evidence set: non-empty, no blank locators, duplicates
    collapsed in first-seen order.
    """
    if not evidence:
        raise ValidationError("At least one after-photo is required to mark a task done")
    cleaned: list[str] = []
    for locator in evidence:
        value: str = (locator or "").strip()
        if not value:
            raise ValidationError("Photo evidence locators must not be blank")
        if value not in cleaned:
            cleaned.append(value)
    return cleaned


def plan_transition(
    current: str,
    action: TaskAction,
    evidence: Sequence[str] | None = None,
    now: datetime | None = None,
) -> dict[str, Any]:
    """상태 전이에 필요한 필드 변경 사항을 계산합니다.

    Plan the partial update for a lifecycle action.

    - start: status + started_at
    - mark_done: status + completed_at + photos_after (replaced wholesale)
    - verify: status only
    - reject: status only; evidence and timestamps are kept

    Args:
        current: 현재 상태 (Current status)
        action: 전이 액션 (Lifecycle action)
        evidence: mark_done 시 사후 사진 목록 (After-photo locators for mark_done)
        now: 기준 시각 (Reference time, defaults to now UTC)

    Returns:
        dict: 업데이트할 필드 (Partial update to apply)

    Raises:
        InvalidTransitionError: 허용되지 않은 전이 (Transition not permitted)
        ValidationError: mark_done 증빙이 비었을 때 (Empty evidence set)
    """
    target: TaskStatus = next_status(current, action)
    timestamp: datetime = now or datetime.now(timezone.utc)
    update: dict[str, Any] = {"status": target.value}

    if action is TaskAction.START:
        update["started_at"] = timestamp
    elif action is TaskAction.MARK_DONE:
        update["photos_after"] = clean_evidence(evidence)
        update["completed_at"] = timestamp
    return update


def completion_percent(tasks: Iterable[Any]) -> int:
    """Verified 업무 비율(%) — Verified / total, 빈 목록이면 0."""
    statuses: list[str] = [t.status for t in tasks]
    verified: int = sum(1 for s in statuses if s == TaskStatus.VERIFIED.value)
    return percent(verified, len(statuses))


def status_counts(tasks: Iterable[Any]) -> dict[str, int]:
    """상태별 업무 수 (Kanban column counts, every status present)."""
    counts: dict[str, int] = {s.value: 0 for s in TaskStatus}
    for task in tasks:
        if task.status in counts:
            counts[task.status] += 1
    return counts
