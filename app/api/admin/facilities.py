"""관리자 시설 라우터 — 시설 관리 API.

Admin Facility Router — Facility CRUD, status updates, stats and
Excel import.
"""

from io import BytesIO
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, UploadFile
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.common import BatchResult, MessageResponse
from app.schemas.facility import FacilityCreate, FacilityStatusUpdate, FacilityTaskAssign
from app.services.change_feed import change_feed
from app.services.facility_service import facility_service
from app.utils.exceptions import BadRequestError

router: APIRouter = APIRouter()


@router.get("")
async def list_facilities(
    db: Annotated[AsyncSession, Depends(get_db)],
    type: Annotated[str | None, Query()] = None,
    zone_id: Annotated[UUID | None, Query()] = None,
    status: Annotated[str | None, Query()] = None,
) -> list[dict]:
    facilities = await facility_service.list_facilities(db, type, zone_id, status)
    return [facility_service.build_response(f) for f in facilities]


@router.get("/stats")
async def facility_stats(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """유형/상태별, 구역별 시설 수."""
    return await facility_service.get_stats(db)


@router.post("/import", response_model=BatchResult)
async def import_facilities(
    db: Annotated[AsyncSession, Depends(get_db)],
    file: UploadFile = File(...),
) -> BatchResult:
    """Excel 파일에서 시설을 가져옵니다.

    Row contract: {code|name, type, zoneId, lat, lng, status}. Rows with
    non-finite coordinates are skipped; valid rows commit one by one.
    """
    if not file.filename or not file.filename.endswith(".xlsx"):
        raise BadRequestError("Only .xlsx files are supported")

    content: bytes = await file.read()
    try:
        result = await facility_service.import_from_excel(db, content)
    except ValueError as e:
        raise BadRequestError(str(e))
    await change_feed.publish(db, "facilities")
    return result


@router.get("/import/sample")
async def download_sample_excel() -> StreamingResponse:
    """시설 가져오기 샘플 Excel을 다운로드합니다."""
    excel_bytes: bytes = facility_service.generate_sample_excel()
    return StreamingResponse(
        BytesIO(excel_bytes),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": "attachment; filename=facility_import_sample.xlsx"},
    )


@router.get("/{facility_id}")
async def get_facility(
    facility_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    facility = await facility_service.get_facility(db, facility_id)
    return facility_service.build_response(facility)


@router.post("", status_code=201)
async def create_facility(
    data: FacilityCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    facility = await facility_service.create_facility(db, data)
    await db.commit()
    await change_feed.publish(db, "facilities")
    return facility_service.build_response(facility)


@router.put("/{facility_id}/status")
async def update_facility_status(
    facility_id: UUID,
    data: FacilityStatusUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """상태 변경 — 유형별 어휘 밖이면 422."""
    facility = await facility_service.update_status(db, facility_id, data.status)
    await db.commit()
    await change_feed.publish(db, "facilities")
    return facility_service.build_response(facility)


@router.put("/{facility_id}/task")
async def assign_facility_task(
    facility_id: UUID,
    data: FacilityTaskAssign,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    facility = await facility_service.assign_task(db, facility_id, data.task)
    await db.commit()
    await change_feed.publish(db, "facilities")
    return facility_service.build_response(facility)


@router.delete("/{facility_id}", response_model=MessageResponse)
async def delete_facility(
    facility_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    await facility_service.delete_facility(db, facility_id)
    await db.commit()
    await change_feed.publish(db, "facilities")
    return {"message": "시설이 삭제되었습니다 (Facility deleted)"}
