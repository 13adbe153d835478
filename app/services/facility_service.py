"""시설 서비스 — 시설 관리, 상태 어휘, 통계, 엑셀 가져오기.

Facility Service — Toilets, dustbins and water supply points.
Each facility type has its own status vocabulary; any status outside it
is a ValidationError. Excel import follows the row contract
``{code|name, type, zoneId, lat, lng, status}`` and commits row by row.
"""

from collections import defaultdict
from datetime import datetime, timezone
from io import BytesIO
from typing import Any, Sequence
from uuid import UUID

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.facility import Facility
from app.models.zone import Zone
from app.repositories.facility_repository import facility_repository
from app.repositories.zone_repository import zone_repository
from app.schemas.common import BatchResult
from app.schemas.facility import FacilityCreate
from app.services.batch import commit_each
from app.services.change_feed import change_feed
from app.utils.constants import FACILITY_STATUSES, FacilityType, resolve_facility_type
from app.utils.exceptions import NotFoundError, ValidationError
from app.utils.spreadsheet import (
    FACILITY_COLUMNS,
    RowError,
    coerce_facility_row,
    read_xlsx_rows,
    set_widths,
    style_headers,
)
from app.utils.validation import coordinates, require_text, to_uuid


def check_status(facility_type: str, status: str | None) -> str:
    """유형별 어휘에 속한 상태인지 확인합니다. None이면 첫 상태.

    Raises:
        ValidationError: 어휘 밖의 상태 (Status outside the type's vocabulary)
    """
    ftype: FacilityType | None = resolve_facility_type(facility_type)
    if ftype is None:
        raise ValidationError(f"Unknown facility type '{facility_type}'")
    vocabulary: tuple[str, ...] = FACILITY_STATUSES[ftype]
    value: str = (status or "").strip().lower() or vocabulary[0]
    if value not in vocabulary:
        raise ValidationError(
            f"Status '{value}' is not valid for {ftype.value} (allowed: {', '.join(vocabulary)})"
        )
    return value


class FacilityService:

    def build_response(self, facility: Facility) -> dict:
        return {
            "id": str(facility.id),
            "code": facility.code,
            "type": facility.type,
            "zone_id": str(facility.zone_id),
            "lat": facility.lat,
            "lng": facility.lng,
            "status": facility.status,
            "last_updated": facility.last_updated,
            "assigned_task": facility.assigned_task,
        }

    async def list_facilities(
        self,
        db: AsyncSession,
        facility_type: str | None = None,
        zone_id: UUID | None = None,
        status: str | None = None,
    ) -> Sequence[Facility]:
        type_value: str | None = None
        if facility_type:
            resolved: FacilityType | None = resolve_facility_type(facility_type)
            if resolved is None:
                raise ValidationError(f"Unknown facility type '{facility_type}'")
            type_value = resolved.value
        return await facility_repository.get_filtered(db, type_value, zone_id, status)

    async def get_facility(self, db: AsyncSession, facility_id: UUID) -> Facility:
        facility: Facility | None = await facility_repository.get_by_id(db, facility_id)
        if facility is None:
            raise NotFoundError("시설을 찾을 수 없습니다 (Facility not found)")
        return facility

    async def create_facility(self, db: AsyncSession, data: FacilityCreate) -> Facility:
        """시설을 생성합니다.

        Raises:
            ValidationError: 코드 누락, 좌표 오류, 어휘 외 상태
            NotFoundError: 구역이 없을 때 (Zone missing)
        """
        code: str = require_text(data.code, "code")
        zone_id: UUID = to_uuid(data.zone_id, "zone_id")
        lat, lng = coordinates(data.lat, data.lng, required=True)
        status: str = check_status(data.type.value, data.status)
        if await zone_repository.get_by_id(db, zone_id) is None:
            raise NotFoundError("구역을 찾을 수 없습니다 (Zone not found)")

        return await facility_repository.create(
            db,
            {
                "code": code,
                "type": data.type.value,
                "zone_id": zone_id,
                "lat": lat,
                "lng": lng,
                "status": status,
            },
        )

    async def update_status(self, db: AsyncSession, facility_id: UUID, status: str) -> Facility:
        """상태 변경 — 어휘 검증 후 last_updated 갱신."""
        facility: Facility = await self.get_facility(db, facility_id)
        if not (status or "").strip():
            raise ValidationError("status is required")
        value: str = check_status(facility.type, status)
        return await facility_repository.update(
            db, facility_id, {"status": value, "last_updated": datetime.now(timezone.utc)}
        )

    async def assign_task(self, db: AsyncSession, facility_id: UUID, task: str) -> Facility:
        await self.get_facility(db, facility_id)
        return await facility_repository.update(
            db, facility_id, {"assigned_task": require_text(task, "task")}
        )

    async def delete_facility(self, db: AsyncSession, facility_id: UUID) -> None:
        await self.get_facility(db, facility_id)
        await facility_repository.delete(db, facility_id)

    async def get_stats(self, db: AsyncSession) -> dict:
        """유형/상태별, 구역별 시설 수.

        Returns:
            dict: {"total", "by_type": {type: {"total", "statuses"}},
                   "by_zone": [{"zone_id", "zone_name", "total", "by_type"}]}
        """
        by_type: dict[str, dict[str, Any]] = {
            t.value: {"total": 0, "statuses": {s: 0 for s in FACILITY_STATUSES[t]}}
            for t in FacilityType
        }
        total: int = 0
        for ftype, status, count in await facility_repository.count_grouped(db, "type", "status"):
            bucket = by_type.setdefault(ftype, {"total": 0, "statuses": {}})
            bucket["total"] += count
            bucket["statuses"][status] = bucket["statuses"].get(status, 0) + count
            total += count

        zones: dict[UUID, Zone] = {z.id: z for z in await zone_repository.get_ordered(db)}
        per_zone: dict[UUID, dict[str, int]] = defaultdict(dict)
        for zone_id, ftype, count in await facility_repository.count_grouped(db, "zone_id", "type"):
            per_zone[zone_id][ftype] = count
        by_zone: list[dict] = [
            {
                "zone_id": str(zone_id),
                "zone_name": zones[zone_id].name if zone_id in zones else None,
                "total": sum(counts.values()),
                "by_type": counts,
            }
            for zone_id, counts in per_zone.items()
        ]
        return {"total": total, "by_type": by_type, "by_zone": by_zone}

    async def _resolve_zone(self, db: AsyncSession, zone_ref: str) -> Zone | None:
        """zoneId 열 — 구역 UUID 또는 구역 이름 (Zone id or zone name)."""
        try:
            zone: Zone | None = await zone_repository.get_by_id(db, UUID(zone_ref))
        except ValueError:
            zone = None
        return zone or await zone_repository.get_by_name(db, zone_ref)

    async def import_from_excel(self, db: AsyncSession, file_content: bytes) -> BatchResult:
        """엑셀에서 시설을 가져옵니다 — 행 단위 커밋, 부분 실패 허용.

        Rows with missing fields, non-finite lat/lng, unknown zone or a
        status outside the type's vocabulary are skipped.

        Raises:
            ValueError: 워크북을 읽을 수 없을 때 (Unreadable workbook)
        """
        rows = read_xlsx_rows(file_content)
        result = BatchResult(total=len(rows))
        zone_ids: dict[str, UUID | None] = {}

        for row_num, row in rows:
            try:
                values: dict[str, Any] = coerce_facility_row(row)
            except RowError as e:
                result.skip(f"Row {row_num}", str(e))
                continue

            zone_ref: str = values.pop("zone_ref")
            if zone_ref not in zone_ids:
                zone: Zone | None = await self._resolve_zone(db, zone_ref)
                zone_ids[zone_ref] = zone.id if zone else None
            if zone_ids[zone_ref] is None:
                result.skip(f"Row {row_num}", f"Unknown zone '{zone_ref}'")
                continue

            async def write(values: dict[str, Any] = values, zone_id: UUID = zone_ids[zone_ref]) -> None:
                await facility_repository.create(db, {**values, "zone_id": zone_id})

            await commit_each(db, result, f"Row {row_num}", write)

        return result

    @staticmethod
    def generate_sample_excel() -> bytes:
        """가져오기 샘플 워크북 — 헤더, 어휘 안내 시트, 예시 행."""
        wb = Workbook()
        ws = wb.active
        ws.title = "Facilities"
        style_headers(ws, FACILITY_COLUMNS, color="6C5CE7")

        sample_data: list[list[Any]] = [
            ["T-101", "Toilet", "North", 28.6139, 77.2090, "clean"],
            ["T-102", "Toilet", "North", 28.6142, 77.2101, "dirty"],
            ["D-201", "Dustbin", "South", 28.6101, 77.2055, "full"],
            ["D-202", "Dustbin", "South", 28.6099, 77.2061, "empty"],
            ["W-301", "Water Supply", "East", 28.6155, 77.2120, "working"],
        ]
        for row in sample_data:
            ws.append(row)
        set_widths(ws, [12, 16, 14, 12, 12, 12])

        guide = wb.create_sheet("Statuses")
        guide_font = Font(italic=True, color="808080")
        guide_fill = PatternFill(start_color="F0F0F0", end_color="F0F0F0", fill_type="solid")
        style_headers(guide, ["type", "allowed statuses"], color="6C5CE7")
        for row_idx, ftype in enumerate(FacilityType, 2):
            guide.cell(row=row_idx, column=1, value=ftype.value)
            cell = guide.cell(row=row_idx, column=2, value=", ".join(FACILITY_STATUSES[ftype]))
            cell.font = guide_font
            cell.fill = guide_fill
            cell.alignment = Alignment(wrap_text=True)
        set_widths(guide, [16, 32])

        buffer = BytesIO()
        wb.save(buffer)
        return buffer.getvalue()

    async def snapshot_items(self, db: AsyncSession) -> list[dict]:
        return [self.build_response(f) for f in await self.list_facilities(db)]


facility_service: FacilityService = FacilityService()
change_feed.register("facilities", facility_service.snapshot_items)
