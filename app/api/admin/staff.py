"""관리자 스태프 라우터 — 스태프 관리 API.

Admin Staff Router — Staff directory, grouping, Excel import/export and
notifications. DELETE deactivates; staff are never hard-deleted.
"""

from io import BytesIO
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, UploadFile
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.schemas.common import BatchResult, PaginatedResponse
from app.schemas.staff import NotifyRequest, StaffCreate, StaffUpdate
from app.services.change_feed import change_feed
from app.services.notification_service import notification_service
from app.services.staff_service import staff_service
from app.utils.exceptions import BadRequestError

router: APIRouter = APIRouter()

_XLSX_MEDIA_TYPE: str = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.get("", response_model=PaginatedResponse)
async def list_staff(
    db: Annotated[AsyncSession, Depends(get_db)],
    role: Annotated[str | None, Query()] = None,
    zone: Annotated[str | None, Query()] = None,
    status: Annotated[str | None, Query()] = None,
    department: Annotated[str | None, Query()] = None,
    search: Annotated[str | None, Query()] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int | None, Query(ge=1, le=100)] = None,
) -> dict:
    """스태프 목록 — 역할/구역/상태/부서 필터, 이름·이메일·전화 검색.

    List staff with filters; pages hold STAFF_PAGE_SIZE rows by default.
    """
    page_size: int = per_page or settings.STAFF_PAGE_SIZE
    staff_list, total = await staff_service.list_staff(
        db, role, zone, status, department, search, page, page_size
    )
    return {
        "items": [staff_service.build_response(s) for s in staff_list],
        "total": total,
        "page": page,
        "per_page": page_size,
    }


@router.get("/groups")
async def group_staff(
    db: Annotated[AsyncSession, Depends(get_db)],
    by: Annotated[str, Query()] = "role",
) -> dict:
    """역할 또는 부서별 스태프 수."""
    return {"by": by, "counts": await staff_service.group_counts(db, by)}


@router.post("/import", response_model=BatchResult)
async def import_staff(
    db: Annotated[AsyncSession, Depends(get_db)],
    file: UploadFile = File(...),
) -> BatchResult:
    """Excel 파일에서 스태프를 일괄 등록합니다 (행 단위 커밋)."""
    if not file.filename or not file.filename.endswith(".xlsx"):
        raise BadRequestError("Only .xlsx files are supported")

    content: bytes = await file.read()
    try:
        result = await staff_service.import_from_excel(db, content)
    except ValueError as e:
        raise BadRequestError(str(e))
    await change_feed.publish(db, "staff")
    return result


@router.get("/export")
async def export_staff(
    db: Annotated[AsyncSession, Depends(get_db)],
    role: Annotated[str | None, Query()] = None,
    zone: Annotated[str | None, Query()] = None,
    status: Annotated[str | None, Query()] = None,
    department: Annotated[str | None, Query()] = None,
) -> StreamingResponse:
    """필터된 스태프 목록을 Excel로 내보냅니다."""
    excel_bytes: bytes = await staff_service.export_excel(db, role, zone, status, department)
    return StreamingResponse(
        BytesIO(excel_bytes),
        media_type=_XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": "attachment; filename=staff.xlsx"},
    )


@router.get("/{staff_id}")
async def get_staff(
    staff_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    staff = await staff_service.get_staff(db, staff_id)
    return staff_service.build_response(staff)


@router.post("", status_code=201)
async def create_staff(
    data: StaffCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """스태프 등록 — name, email, phone, department 필수."""
    staff = await staff_service.create_staff(db, data)
    await db.commit()
    await change_feed.publish(db, "staff")
    return staff_service.build_response(staff)


@router.put("/{staff_id}")
async def update_staff(
    staff_id: UUID,
    data: StaffUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    staff = await staff_service.update_staff(db, staff_id, data)
    await db.commit()
    await change_feed.publish(db, "staff")
    return staff_service.build_response(staff)


@router.delete("/{staff_id}")
async def deactivate_staff(
    staff_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """스태프 비활성화 — 레코드는 유지되고 상태만 inactive."""
    staff = await staff_service.deactivate_staff(db, staff_id)
    await db.commit()
    await change_feed.publish(db, "staff")
    return staff_service.build_response(staff)


@router.post("/{staff_id}/notify", status_code=201)
async def notify_staff(
    staff_id: UUID,
    data: NotifyRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """스태프에게 알림 — 알림 센터에 기록됩니다."""
    notification = await staff_service.notify(db, staff_id, data.message)
    await db.commit()
    await change_feed.publish(db, "notifications")
    return notification_service.build_response(notification)
