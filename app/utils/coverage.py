"""근무 커버리지 계산 유틸리티 모듈.

Shift coverage calculator.
Computes required staffing for a zone/shift from the zone's headcount
estimate and classifies assigned-vs-required into a tri-state signal.

    required = ceil(headcount / HEADCOUNT_PER_STAFF)

    green  — assigned >= required (또는 required == 0)
    orange — required/2 <= assigned < required
    red    — assigned < required/2

All functions are pure; they read zone/shift data already fetched from
the store and never touch the database.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from app.config import settings
from app.utils.exceptions import ValidationError


class CoverageLevel(str, Enum):
    """커버리지 등급 — Tri-state coverage signal."""

    GREEN = "green"
    ORANGE = "orange"
    RED = "red"


@dataclass(frozen=True)
class ShiftCoverage:
    """근무조 1건의 커버리지 평가 결과.

    Coverage evaluation of one zone/shift cell.

    Attributes:
        zone_id: 구역 ID (Zone identifier)
        shift_type: 근무조 유형 (Shift-type tag)
        shift_id: 근무조 ID, 미생성 시 None (Shift id, None when not created yet)
        assigned: 배정 인원 (Assigned staff count)
        required: 필요 인원 (Required staff count)
        level: 커버리지 등급 (Coverage level)
    """

    zone_id: str
    shift_type: str
    shift_id: str | None
    assigned: int
    required: int
    level: CoverageLevel

    def as_dict(self) -> dict[str, Any]:
        return {
            "zone_id": self.zone_id,
            "shift_type": self.shift_type,
            "shift_id": self.shift_id,
            "assigned": self.assigned,
            "required": self.required,
            "level": self.level.value,
        }


def required_staff(headcount: int, capacity_per_staff: int | None = None) -> int:
    """인원 추정치로부터 필요 스태프 수를 계산합니다.

    Required staffing for a zone/shift: ceil(headcount / capacity_per_staff).

    Args:
        headcount: 구역 인원 추정치, 0 이상 (Non-negative headcount estimate)
        capacity_per_staff: 스태프 1명당 담당 인원, 기본값은 설정값
                            (Visitors per staff member, defaults to HEADCOUNT_PER_STAFF)

    Returns:
        int: 필요 스태프 수 (Required staff count)

    Raises:
        ValidationError: 인원이 음수이거나 담당 인원이 0 이하일 때
                         (Negative headcount or non-positive capacity)
    """
    capacity: int = capacity_per_staff if capacity_per_staff is not None else settings.HEADCOUNT_PER_STAFF
    if capacity <= 0:
        raise ValidationError("Capacity per staff must be positive")
    if headcount < 0:
        raise ValidationError("Headcount must be non-negative")
    # 정수 올림 나눗셈 — integer ceiling division, no float rounding
    return -(-headcount // capacity)


def coverage_level(assigned: int, required: int) -> CoverageLevel:
    """배정 인원과 필요 인원으로 커버리지 등급을 판정합니다.

    Classify assigned-vs-required staffing.

    Args:
        assigned: 배정 인원 (Assigned staff count)
        required: 필요 인원 (Required staff count)

    Returns:
        CoverageLevel: green / orange / red
    """
    # 필요 인원 0 — 항상 충족으로 간주 (headcount 0 is fully covered)
    if required == 0:
        return CoverageLevel.GREEN
    if assigned >= required:
        return CoverageLevel.GREEN
    # assigned < required / 2 를 정수 비교로 판정
    if assigned * 2 < required:
        return CoverageLevel.RED
    return CoverageLevel.ORANGE


def evaluate_shift(
    zone: Any,
    shift_type: str,
    shift: Any | None,
    capacity_per_staff: int | None = None,
) -> ShiftCoverage:
    """구역/근무조 셀의 커버리지를 평가합니다.

    Evaluate coverage for a zone + shift-type cell. ``shift`` may be None
    when the shift has not been created yet; it then counts as zero assigned.

    Args:
        zone: headcount, id 속성을 가진 구역 (Zone with ``id`` and ``headcount``)
        shift_type: 근무조 유형 (Shift-type tag)
        shift: assigned_staff_ids 속성을 가진 근무조 또는 None
        capacity_per_staff: 스태프 1명당 담당 인원 (Override for HEADCOUNT_PER_STAFF)

    Returns:
        ShiftCoverage: 평가 결과 (Coverage evaluation)
    """
    required: int = required_staff(zone.headcount or 0, capacity_per_staff)
    assigned: int = len(shift.assigned_staff_ids or []) if shift is not None else 0
    return ShiftCoverage(
        zone_id=str(zone.id),
        shift_type=shift_type,
        shift_id=str(shift.id) if shift is not None else None,
        assigned=assigned,
        required=required,
        level=coverage_level(assigned, required),
    )
