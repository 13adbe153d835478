"""관리자 스토리지 라우터 — 업무 사진 증빙 업로드 API.

Admin Storage Router — Generates presigned URLs for S3 or local uploads
of task photo evidence. 로컬 모드에서는 PUT 엔드포인트로 파일을 직접 받아 저장합니다.
"""

from fastapi import APIRouter, Request
from pydantic import BaseModel

from app.services.storage_service import storage_service

router: APIRouter = APIRouter()


class PresignedUrlRequest(BaseModel):
    filename: str
    content_type: str
    task_id: str
    phase: str = "after"  # before | after


class PresignedUrlResponse(BaseModel):
    upload_url: str
    file_url: str


@router.post("/presigned-url", response_model=PresignedUrlResponse)
async def create_presigned_url(
    data: PresignedUrlRequest,
) -> dict:
    """증빙 사진용 presigned upload URL을 생성합니다 (S3 또는 로컬).

    file_url is the locator to send with mark-done or before-photo calls.
    """
    result = storage_service.generate_presigned_upload_url(
        filename=data.filename,
        content_type=data.content_type,
        folder=storage_service.evidence_folder(data.task_id, data.phase),
    )
    return {"upload_url": result["upload_url"], "file_url": result["file_url"]}


@router.put("/upload/{key:path}")
async def upload_local(
    key: str,
    request: Request,
) -> dict:
    """로컬 모드 전용 — 파일을 서버에 직접 저장합니다."""
    body = await request.body()
    storage_service.save_local(key, body)
    return {"ok": True}
