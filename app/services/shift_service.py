"""근무조 서비스 — 구역별 근무조 배정과 커버리지.

Shift Service — Per-zone shift rosters and staffing coverage.
One shift exists per (zone, shift type). Coverage is computed on read
from the zone's headcount; nothing derived is stored.
"""

from collections import Counter
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.zone import ShiftAssignment, Zone
from app.repositories.shift_repository import shift_repository
from app.repositories.staff_repository import staff_repository
from app.repositories.zone_repository import zone_repository
from app.schemas.zone import ShiftCreate, ShiftUpdate
from app.services.change_feed import change_feed
from app.utils.coverage import ShiftCoverage, evaluate_shift
from app.utils.exceptions import DuplicateError, NotFoundError, ValidationError
from app.utils.validation import parse_time_of_day, to_uuid


class ShiftService:

    def build_response(self, shift: ShiftAssignment, zone: Zone | None) -> dict:
        """근무조 응답 — 구역이 있으면 커버리지 포함 (coverage when the zone is known)."""
        coverage: dict | None = None
        if zone is not None:
            coverage = evaluate_shift(zone, shift.shift_type, shift).as_dict()
        return {
            "id": str(shift.id),
            "zone_id": str(shift.zone_id),
            "zone_name": zone.name if zone else None,
            "shift_type": shift.shift_type,
            "start_time": shift.start_time.strftime("%H:%M"),
            "end_time": shift.end_time.strftime("%H:%M"),
            "assigned_staff_ids": list(shift.assigned_staff_ids or []),
            "coverage": coverage,
        }

    async def _zone_map(self, db: AsyncSession) -> dict[UUID, Zone]:
        return {z.id: z for z in await zone_repository.get_ordered(db)}

    def _check_type(self, shift_type: str) -> str:
        if shift_type not in settings.SHIFT_TYPES:
            raise ValidationError(
                f"Shift type must be one of {', '.join(settings.SHIFT_TYPES)}"
            )
        return shift_type

    async def list_shifts(
        self,
        db: AsyncSession,
        zone_id: UUID | None = None,
        shift_type: str | None = None,
    ) -> list[dict]:
        shifts: Sequence[ShiftAssignment] = await shift_repository.get_filtered(db, zone_id, shift_type)
        zones: dict[UUID, Zone] = await self._zone_map(db)
        return [self.build_response(s, zones.get(s.zone_id)) for s in shifts]

    async def get_shift(self, db: AsyncSession, shift_id: UUID) -> ShiftAssignment:
        shift: ShiftAssignment | None = await shift_repository.get_by_id(db, shift_id)
        if shift is None:
            raise NotFoundError("근무조를 찾을 수 없습니다 (Shift not found)")
        return shift

    async def get_detail(self, db: AsyncSession, shift_id: UUID) -> dict:
        shift: ShiftAssignment = await self.get_shift(db, shift_id)
        zone: Zone | None = await zone_repository.get_by_id(db, shift.zone_id)
        return self.build_response(shift, zone)

    async def create_shift(self, db: AsyncSession, data: ShiftCreate) -> ShiftAssignment:
        """근무조를 생성합니다.

        Raises:
            NotFoundError: 구역이 없을 때 (Zone missing)
            ValidationError: 유형/시각 형식 오류 (Unknown shift type or bad HH:MM)
            DuplicateError: 같은 구역에 같은 유형이 이미 있을 때 (Type already exists for zone)
        """
        zone_id: UUID = to_uuid(data.zone_id, "zone_id")
        if await zone_repository.get_by_id(db, zone_id) is None:
            raise NotFoundError("구역을 찾을 수 없습니다 (Zone not found)")
        shift_type: str = self._check_type(data.shift_type)
        if await shift_repository.get_by_zone_and_type(db, zone_id, shift_type) is not None:
            raise DuplicateError(
                f"이미 존재하는 근무조입니다 (Shift '{shift_type}' already exists for this zone)"
            )

        return await shift_repository.create(
            db,
            {
                "zone_id": zone_id,
                "shift_type": shift_type,
                "start_time": parse_time_of_day(data.start_time or settings.DEFAULT_SHIFT_START, "start_time"),
                "end_time": parse_time_of_day(data.end_time or settings.DEFAULT_SHIFT_END, "end_time"),
                "assigned_staff_ids": [],
            },
        )

    async def create_defaults(self, db: AsyncSession) -> int:
        """모든 구역에 누락된 근무조 유형을 기본 시간으로 생성합니다.

        Create every missing (zone, shift type) pair with the default
        times. Existing shifts are left as they are.

        Returns:
            int: 생성된 근무조 수 (Number of shifts created)
        """
        existing: set[tuple[UUID, str]] = {
            (s.zone_id, s.shift_type) for s in await shift_repository.get_filtered(db)
        }
        start = parse_time_of_day(settings.DEFAULT_SHIFT_START, "DEFAULT_SHIFT_START")
        end = parse_time_of_day(settings.DEFAULT_SHIFT_END, "DEFAULT_SHIFT_END")

        created: int = 0
        for zone in await zone_repository.get_ordered(db):
            for shift_type in settings.SHIFT_TYPES:
                if (zone.id, shift_type) in existing:
                    continue
                await shift_repository.create(
                    db,
                    {
                        "zone_id": zone.id,
                        "shift_type": shift_type,
                        "start_time": start,
                        "end_time": end,
                        "assigned_staff_ids": [],
                    },
                )
                created += 1
        return created

    async def update_times(self, db: AsyncSession, shift_id: UUID, data: ShiftUpdate) -> ShiftAssignment:
        await self.get_shift(db, shift_id)
        update_data: dict[str, Any] = {}
        if data.start_time is not None:
            update_data["start_time"] = parse_time_of_day(data.start_time, "start_time")
        if data.end_time is not None:
            update_data["end_time"] = parse_time_of_day(data.end_time, "end_time")
        return await shift_repository.update(db, shift_id, update_data)

    async def assign_staff(self, db: AsyncSession, shift_id: UUID, staff_id: str) -> ShiftAssignment:
        """스태프를 근무조에 배정합니다 — 중복 배정은 DuplicateError.

        Raises:
            NotFoundError: 근무조 또는 스태프 없음 (Shift or staff missing)
            DuplicateError: 이미 배정된 스태프 (Staff already on this shift)
        """
        shift: ShiftAssignment = await self.get_shift(db, shift_id)
        staff_uuid: UUID = to_uuid(staff_id, "staff_id")
        if await staff_repository.get_by_id(db, staff_uuid) is None:
            raise NotFoundError("스태프를 찾을 수 없습니다 (Staff not found)")

        current: list[str] = list(shift.assigned_staff_ids or [])
        if str(staff_uuid) in current:
            raise DuplicateError("이미 배정된 스태프입니다 (Staff already assigned to this shift)")

        # JSON 컬럼은 새 리스트를 대입해야 변경이 감지됨 — assign a new list
        return await shift_repository.update(
            db, shift_id, {"assigned_staff_ids": current + [str(staff_uuid)]}
        )

    async def remove_staff(self, db: AsyncSession, shift_id: UUID, staff_id: UUID) -> ShiftAssignment:
        shift: ShiftAssignment = await self.get_shift(db, shift_id)
        current: list[str] = list(shift.assigned_staff_ids or [])
        if str(staff_id) not in current:
            raise NotFoundError("배정되지 않은 스태프입니다 (Staff is not assigned to this shift)")
        return await shift_repository.update(
            db, shift_id, {"assigned_staff_ids": [s for s in current if s != str(staff_id)]}
        )

    async def delete_shift(self, db: AsyncSession, shift_id: UUID) -> None:
        await self.get_shift(db, shift_id)
        await shift_repository.delete(db, shift_id)

    async def coverage_board(self, db: AsyncSession) -> dict:
        """구역 x 근무조 유형 전체 커버리지 보드.

        Every zone x shift-type cell, including shifts not created yet
        (counted as zero assigned), plus per-level totals.
        """
        shifts: dict[tuple[UUID, str], ShiftAssignment] = {
            (s.zone_id, s.shift_type): s for s in await shift_repository.get_filtered(db)
        }
        rows: list[dict] = []
        levels: Counter = Counter()
        for zone in await zone_repository.get_ordered(db):
            cells: list[dict] = []
            for shift_type in settings.SHIFT_TYPES:
                cell: ShiftCoverage = evaluate_shift(zone, shift_type, shifts.get((zone.id, shift_type)))
                levels[cell.level.value] += 1
                cells.append(cell.as_dict())
            rows.append({
                "zone_id": str(zone.id),
                "zone_name": zone.name,
                "headcount": zone.headcount,
                "shifts": cells,
            })
        return {
            "shift_types": list(settings.SHIFT_TYPES),
            "zones": rows,
            "levels": {level: levels.get(level, 0) for level in ("green", "orange", "red")},
        }

    async def snapshot_items(self, db: AsyncSession) -> list[dict]:
        return await self.list_shifts(db)


shift_service: ShiftService = ShiftService()
change_feed.register("shifts", shift_service.snapshot_items)
