"""구역 서비스 — 구역 CRUD, 인원 추정치, 일괄 가져오기.

Zone Service — Zone CRUD, headcount estimates, and CSV/JSON import.
Zones referenced by shifts, facilities or tasks cannot be deleted.
"""

from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.zone import Zone
from app.repositories.zone_repository import zone_repository
from app.schemas.common import BatchResult
from app.schemas.zone import ZoneCreate, ZoneUpdate
from app.services.batch import commit_each
from app.services.change_feed import change_feed
from app.utils.exceptions import ConflictError, NotFoundError, ValidationError
from app.utils.spreadsheet import RowError, coerce_zone_row, read_delimited_rows
from app.utils.validation import coordinates, require_text


class ZoneService:

    def build_response(self, zone: Zone) -> dict:
        return {
            "id": str(zone.id),
            "name": zone.name,
            "description": zone.description,
            "lat": zone.lat,
            "lng": zone.lng,
            "headcount": zone.headcount,
            "created_at": zone.created_at,
            "updated_at": zone.updated_at,
        }

    async def list_zones(self, db: AsyncSession) -> Sequence[Zone]:
        return await zone_repository.get_ordered(db)

    async def get_zone(self, db: AsyncSession, zone_id: UUID) -> Zone:
        zone: Zone | None = await zone_repository.get_by_id(db, zone_id)
        if zone is None:
            raise NotFoundError("구역을 찾을 수 없습니다 (Zone not found)")
        return zone

    async def create_zone(self, db: AsyncSession, data: ZoneCreate) -> Zone:
        """구역을 생성합니다.

        Raises:
            ValidationError: 이름이 비었거나 좌표가 잘못되었을 때
                             (Blank name, half or non-finite coordinates)
        """
        name: str = require_text(data.name, "name")
        lat, lng = coordinates(data.lat, data.lng)
        return await zone_repository.create(
            db,
            {
                "name": name,
                "description": data.description,
                "lat": lat,
                "lng": lng,
                "headcount": data.headcount,
            },
        )

    async def update_zone(self, db: AsyncSession, zone_id: UUID, data: ZoneUpdate) -> Zone:
        zone: Zone = await self.get_zone(db, zone_id)
        update_data: dict[str, Any] = data.model_dump(exclude_unset=True)

        if "name" in update_data:
            update_data["name"] = require_text(update_data["name"], "name")
        if "lat" in update_data or "lng" in update_data:
            # 한쪽만 수정해도 결과 좌표 쌍 전체를 검증 — validate the resulting pair
            lat, lng = coordinates(
                update_data.get("lat", zone.lat),
                update_data.get("lng", zone.lng),
            )
            update_data["lat"], update_data["lng"] = lat, lng

        return await zone_repository.update(db, zone_id, update_data)

    async def set_headcount(self, db: AsyncSession, zone_id: UUID, headcount: int) -> Zone:
        """인원 추정치를 갱신합니다. 음수는 ValidationError."""
        if headcount < 0:
            raise ValidationError("Headcount must be non-negative")
        await self.get_zone(db, zone_id)
        return await zone_repository.update(db, zone_id, {"headcount": headcount})

    async def delete_zone(self, db: AsyncSession, zone_id: UUID) -> None:
        """구역 삭제 — 참조 중이면 ConflictError."""
        await self.get_zone(db, zone_id)
        refs: dict[str, int] = await zone_repository.count_references(db, zone_id)
        in_use: list[str] = [f"{count} {label}" for label, count in refs.items() if count]
        if in_use:
            raise ConflictError(
                f"구역이 사용 중입니다 (Zone is still referenced by {', '.join(in_use)})"
            )
        await zone_repository.delete(db, zone_id)

    async def import_zones(self, db: AsyncSession, filename: str, content: bytes) -> BatchResult:
        """CSV(name,description,lat,lng) 또는 JSON 목록에서 구역을 가져옵니다.

        Rows without a name or finite lat/lng are skipped; each valid row is
        committed on its own.

        Raises:
            ValueError: 파일 형식 오류 (Unreadable file)
        """
        rows = read_delimited_rows(filename, content)
        result = BatchResult(total=len(rows))

        for row_num, row in rows:
            try:
                values: dict[str, Any] = coerce_zone_row(row)
            except RowError as e:
                result.skip(f"Row {row_num}", str(e))
                continue

            async def write(values: dict[str, Any] = values) -> None:
                await zone_repository.create(db, {**values, "description": values["description"] or None})

            await commit_each(db, result, f"Row {row_num}", write)

        return result

    async def snapshot_items(self, db: AsyncSession) -> list[dict]:
        return [self.build_response(z) for z in await self.list_zones(db)]


zone_service: ZoneService = ZoneService()
change_feed.register("zones", zone_service.snapshot_items)
