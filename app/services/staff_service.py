"""스태프 서비스 — 스태프 관리, 그룹 집계, 엑셀 가져오기/내보내기.

Staff Service — Staff directory management.
Staff are never hard-deleted: DELETE flips status to ``inactive``.
"""

from io import BytesIO
from typing import Any, Sequence
from uuid import UUID

from openpyxl import Workbook
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.communication import Notification
from app.models.staff import Staff
from app.repositories.staff_repository import staff_repository
from app.schemas.common import BatchResult
from app.schemas.staff import StaffCreate, StaffUpdate
from app.services.batch import commit_each
from app.services.change_feed import change_feed
from app.services.notification_service import notification_service
from app.utils.constants import StaffStatus
from app.utils.exceptions import NotFoundError, ValidationError
from app.utils.spreadsheet import (
    STAFF_COLUMNS,
    RowError,
    coerce_staff_row,
    read_xlsx_rows,
    set_widths,
    style_headers,
)
from app.utils.validation import require_text

# 그룹 집계 허용 컬럼 — Columns staff can be grouped by
GROUP_FIELDS: tuple[str, ...] = ("role", "department")
_REQUIRED_FIELDS: tuple[str, ...] = ("name", "email", "phone", "department")


class StaffService:

    def build_response(self, staff: Staff) -> dict:
        return {
            "id": str(staff.id),
            "name": staff.name,
            "phone": staff.phone,
            "email": staff.email,
            "role": staff.role,
            "zone": staff.zone,
            "department": staff.department,
            "status": staff.status,
            "teams": list(staff.teams or []),
            "join_date": staff.join_date,
            "last_active": staff.last_active,
        }

    async def list_staff(
        self,
        db: AsyncSession,
        role: str | None = None,
        zone: str | None = None,
        status: str | None = None,
        department: str | None = None,
        search: str | None = None,
        page: int = 1,
        per_page: int | None = None,
    ) -> tuple[Sequence[Staff], int]:
        return await staff_repository.search(
            db, role, zone, status, department, search, page, per_page or settings.STAFF_PAGE_SIZE
        )

    async def get_staff(self, db: AsyncSession, staff_id: UUID) -> Staff:
        staff: Staff | None = await staff_repository.get_by_id(db, staff_id)
        if staff is None:
            raise NotFoundError("스태프를 찾을 수 없습니다 (Staff not found)")
        return staff

    async def create_staff(self, db: AsyncSession, data: StaffCreate) -> Staff:
        values: dict[str, Any] = data.model_dump(mode="json")
        for field in _REQUIRED_FIELDS:
            values[field] = require_text(values[field], field)
        values["zone"] = (values.get("zone") or "").strip() or "General"
        values["teams"] = []
        return await staff_repository.create(db, values)

    async def update_staff(self, db: AsyncSession, staff_id: UUID, data: StaffUpdate) -> Staff:
        await self.get_staff(db, staff_id)
        update_data: dict[str, Any] = data.model_dump(exclude_unset=True, mode="json")
        for field in _REQUIRED_FIELDS:
            if field in update_data:
                update_data[field] = require_text(update_data[field], field)
        return await staff_repository.update(db, staff_id, update_data)

    async def deactivate_staff(self, db: AsyncSession, staff_id: UUID) -> Staff:
        """비활성화 — 상태만 inactive로 변경 (Soft delete)."""
        await self.get_staff(db, staff_id)
        return await staff_repository.update(db, staff_id, {"status": StaffStatus.INACTIVE.value})

    async def group_counts(self, db: AsyncSession, by: str) -> dict[str, int]:
        if by not in GROUP_FIELDS:
            raise ValidationError(f"Group by must be one of {', '.join(GROUP_FIELDS)}")
        return await staff_repository.count_by(db, by)

    async def notify(self, db: AsyncSession, staff_id: UUID, message: str) -> Notification:
        """스태프 1명에게 알림 — 알림 센터 기록만 남김."""
        staff: Staff = await self.get_staff(db, staff_id)
        return await notification_service.record(db, staff.name, staff.phone, message)

    async def import_from_excel(self, db: AsyncSession, file_content: bytes) -> BatchResult:
        """엑셀에서 스태프를 가져옵니다 — 행 단위 커밋.

        Columns: name, phone, email, role, zone, department, status.
        Invalid rows are skipped; valid rows commit one by one.

        Raises:
            ValueError: 워크북을 읽을 수 없을 때 (Unreadable workbook)
        """
        rows = read_xlsx_rows(file_content)
        result = BatchResult(total=len(rows))

        for row_num, row in rows:
            try:
                values: dict[str, Any] = coerce_staff_row(row)
            except RowError as e:
                result.skip(f"Row {row_num}", str(e))
                continue

            async def write(values: dict[str, Any] = values) -> None:
                await staff_repository.create(db, {**values, "teams": []})

            await commit_each(db, result, f"Row {row_num}", write)

        return result

    async def export_excel(
        self,
        db: AsyncSession,
        role: str | None = None,
        zone: str | None = None,
        status: str | None = None,
        department: str | None = None,
    ) -> bytes:
        """필터된 스태프 목록을 엑셀로 내보냅니다 (import와 같은 컬럼 + teams)."""
        staff_list: Sequence[Staff] = await staff_repository.get_filtered(db, role, zone, status, department)

        wb = Workbook()
        ws = wb.active
        ws.title = "Staff"
        headers: list[str] = STAFF_COLUMNS + ["teams"]
        style_headers(ws, headers)
        for s in staff_list:
            ws.append([s.name, s.phone, s.email, s.role, s.zone, s.department, s.status, ", ".join(s.teams or [])])
        set_widths(ws, [22, 16, 28, 10, 16, 18, 10, 30])

        buffer = BytesIO()
        wb.save(buffer)
        return buffer.getvalue()

    async def snapshot_items(self, db: AsyncSession) -> list[dict]:
        return [self.build_response(s) for s in await staff_repository.get_filtered(db)]


staff_service: StaffService = StaffService()
change_feed.register("staff", staff_service.snapshot_items)
