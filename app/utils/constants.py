"""도메인 어휘(열거형) 모듈.

Domain vocabularies shared by models, schemas and services.
Facility status vocabularies are per facility type; a status outside the
type's vocabulary is a validation error.
"""

from enum import Enum


class FacilityType(str, Enum):
    TOILET = "Toilet"
    DUSTBIN = "Dustbin"
    WATER_SUPPLY = "Water Supply"


# 시설 유형별 상태 어휘 — Per-type status vocabulary (first entry is the import default)
FACILITY_STATUSES: dict[FacilityType, tuple[str, ...]] = {
    FacilityType.TOILET: ("clean", "dirty", "empty", "full"),
    FacilityType.DUSTBIN: ("empty", "full"),
    FacilityType.WATER_SUPPLY: ("working", "faulty"),
}

# 스프레드시트 표기 변형 허용 — Accepted spellings in imported sheets
FACILITY_TYPE_ALIASES: dict[str, FacilityType] = {
    "toilet": FacilityType.TOILET,
    "toilets": FacilityType.TOILET,
    "dustbin": FacilityType.DUSTBIN,
    "dustbins": FacilityType.DUSTBIN,
    "water supply": FacilityType.WATER_SUPPLY,
    "watersupply": FacilityType.WATER_SUPPLY,
    "water": FacilityType.WATER_SUPPLY,
}


class StaffRole(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    STAFF = "staff"


class StaffStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    ON_LEAVE = "on-leave"


class TeamShift(str, Enum):
    """팀 기본 근무조 (Team default shift tag)."""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    NIGHT = "night"


class AssigneeKind(str, Enum):
    """업무 담당 참조 종류 — tagged reference discriminator."""

    STAFF = "staff"
    TEAM = "team"


class AdType(str, Enum):
    AD = "ad"
    ANNOUNCEMENT = "announcement"


class AdStatus(str, Enum):
    PUBLISHED = "published"
    UNPUBLISHED = "unpublished"


def resolve_facility_type(value: str | None) -> FacilityType | None:
    """표기 변형을 포함해 시설 유형을 해석합니다. 알 수 없으면 None."""
    if not value:
        return None
    return FACILITY_TYPE_ALIASES.get(str(value).strip().lower())
