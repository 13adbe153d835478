"""입력 값 검증 헬퍼.

Input validation helpers shared by services. Every failure raises
ValidationError (422) with a message naming the offending field.
"""

import math
from datetime import time
from typing import Any
from uuid import UUID

from app.utils.exceptions import ValidationError


def parse_finite(value: Any) -> float | None:
    """유한 실수로 변환합니다. 실패하거나 NaN/Inf이면 None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number: float = float(str(value).strip())
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def require_text(value: str | None, field: str) -> str:
    text: str = (value or "").strip()
    if not text:
        raise ValidationError(f"{field} is required")
    return text


def to_uuid(value: str | UUID | None, field: str) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a valid id") from None


def coordinates(lat: Any, lng: Any, required: bool = False) -> tuple[float | None, float | None]:
    """좌표 쌍 검증 — 둘 다 있거나 둘 다 없어야 하며, 있으면 유한 실수.

    Raises:
        ValidationError: 한쪽만 있거나 유한하지 않을 때
    """
    if lat is None and lng is None and not required:
        return None, None
    lat_value: float | None = parse_finite(lat)
    lng_value: float | None = parse_finite(lng)
    if lat_value is None or lng_value is None:
        raise ValidationError("lat and lng must both be finite numbers")
    return lat_value, lng_value


def parse_time_of_day(value: str, field: str) -> time:
    """"HH:MM" 문자열을 time으로 변환합니다."""
    try:
        hours, minutes = value.strip().split(":")
        return time(int(hours), int(minutes))
    except (AttributeError, ValueError):
        raise ValidationError(f"{field} must be HH:MM") from None
