"""스토리지 서비스 — 업무 사진 증빙 S3 또는 로컬 저장.

Storage Service — Photo evidence storage (S3 presigned URL or local disk).
AWS 키가 비어있으면 자동으로 로컬 모드로 전환됩니다.
모든 업로드는 temp/ 폴더에 먼저 저장되고, finalize_upload()로 최종 위치로 이동합니다.
증빙 폴더 규칙: tasks/{task_id}/before, tasks/{task_id}/after
"""

import shutil
import uuid
from pathlib import Path

from app.config import settings
from app.utils.exceptions import BadRequestError, StoreError, ValidationError

# 로컬 업로드 디렉토리 — .env의 LOCAL_UPLOADS_DIR 또는 프로젝트 루트의 uploads/
_SERVER_ROOT: Path = Path(__file__).resolve().parent.parent.parent
UPLOADS_DIR: Path = Path(settings.LOCAL_UPLOADS_DIR) if settings.LOCAL_UPLOADS_DIR else _SERVER_ROOT / "uploads"

EVIDENCE_PHASES: tuple[str, ...] = ("before", "after")


class StorageService:
    """파일 업로드 서비스 — S3 또는 로컬 모드 자동 선택."""

    def __init__(self) -> None:
        self._client = None

    @property
    def is_local(self) -> bool:
        return not settings.AWS_ACCESS_KEY_ID or not settings.AWS_S3_BUCKET

    @property
    def client(self):
        if self.is_local:
            return None
        if self._client is None:
            import boto3
            from botocore.config import Config as BotoConfig

            self._client = boto3.client(
                "s3",
                region_name=settings.AWS_S3_REGION,
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                config=BotoConfig(signature_version="s3v4"),
            )
        return self._client

    @property
    def _public_prefix(self) -> str:
        if self.is_local:
            return f"{settings.PUBLIC_BASE_URL.rstrip('/')}/uploads/"
        return f"https://{settings.AWS_S3_BUCKET}.s3.{settings.AWS_S3_REGION}.amazonaws.com/"

    def evidence_folder(self, task_id: uuid.UUID | str, phase: str) -> str:
        if phase not in EVIDENCE_PHASES:
            raise ValidationError(f"phase must be one of {', '.join(EVIDENCE_PHASES)}")
        return f"tasks/{task_id}/{phase}"

    def _generate_key(self, filename: str, folder: str) -> str:
        ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else "bin"
        return f"temp/{folder}/{uuid.uuid4().hex}.{ext}"

    def generate_presigned_upload_url(
        self,
        filename: str,
        content_type: str,
        folder: str,
        expires: int = 3600,
    ) -> dict[str, str]:
        """presigned PUT URL과 temp file URL을 반환합니다.

        모든 업로드는 temp/ 하위에 저장됩니다.
        finalize_upload()로 최종 위치로 이동해야 합니다.
        """
        key = self._generate_key(filename, folder)

        if self.is_local:
            base = f"{settings.PUBLIC_BASE_URL.rstrip('/')}/api/v1/admin/storage/upload/{key}"
            return {"upload_url": base, "file_url": f"{self._public_prefix}{key}", "key": key}

        upload_url = self.client.generate_presigned_url(
            "put_object",
            Params={
                "Bucket": settings.AWS_S3_BUCKET,
                "Key": key,
                "ContentType": content_type,
            },
            ExpiresIn=expires,
        )
        return {"upload_url": upload_url, "file_url": f"{self._public_prefix}{key}", "key": key}

    def save_local(self, key: str, data: bytes) -> str:
        """로컬 파일 저장. temp/ 밖이나 상위 경로 키는 거부합니다."""
        if not key.startswith("temp/") or ".." in Path(key).parts:
            raise BadRequestError("Invalid upload key")
        path = UPLOADS_DIR / key
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return str(path)

    def _extract_key(self, file_url: str) -> str | None:
        """file URL에서 storage key를 추출합니다."""
        prefix = self._public_prefix
        if file_url.startswith(prefix):
            return file_url[len(prefix):]
        return None

    def _temp_key(self, file_url: str) -> str | None:
        key = self._extract_key(file_url)
        if not key or not key.startswith("temp/"):
            return None
        return key

    def _object_exists(self, key: str) -> bool:
        """저장소에 키가 있는지 확인합니다 (S3는 head_object).

        Raises:
            StoreError: S3 권한/연결 오류 (Anything other than a missing key)
        """
        if self.is_local:
            return (UPLOADS_DIR / key).exists()

        from botocore.exceptions import ClientError

        try:
            self.client.head_object(Bucket=settings.AWS_S3_BUCKET, Key=key)
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in ("404", "NoSuchKey", "NotFound"):
                return False
            raise StoreError(f"Storage unavailable: {exc}") from exc
        return True

    def ensure_uploaded(self, file_urls: list[str]) -> None:
        """모든 temp 업로드가 도착했는지 이동 전에 확인합니다.

        A temp locator passes when its temp object exists or when it was
        already moved to the final key by an earlier attempt.

        Raises:
            ValidationError: 업로드되지 않은 temp 로케이터 (Upload never arrived)
        """
        for file_url in file_urls:
            key = self._temp_key(file_url)
            if key is None:
                continue
            if not self._object_exists(key) and not self._object_exists(key[len("temp/"):]):
                raise ValidationError(f"Uploaded file not found: {file_url}")

    def finalize_upload(self, file_url: str) -> str:
        """temp 파일을 최종 위치로 이동합니다. 최종 file_url을 반환합니다.

        temp/ 경로가 아닌 로케이터는 그대로 반환합니다. 이미 이동된 경우
        (temp 없음, 최종 키 있음) 최종 URL만 반환합니다.

        Raises:
            ValidationError: temp와 최종 위치 모두 파일이 없을 때 (Upload never arrived)
        """
        key = self._temp_key(file_url)
        if key is None:
            return file_url

        final_key = key[len("temp/"):]
        final_url = f"{self._public_prefix}{final_key}"

        if not self._object_exists(key):
            if self._object_exists(final_key):
                return final_url
            raise ValidationError(f"Uploaded file not found: {file_url}")

        if self.is_local:
            dst = UPLOADS_DIR / final_key
            dst.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(str(UPLOADS_DIR / key), str(dst))
            return final_url

        self.client.copy_object(
            Bucket=settings.AWS_S3_BUCKET,
            Key=final_key,
            CopySource={"Bucket": settings.AWS_S3_BUCKET, "Key": key},
        )
        self.client.delete_object(Bucket=settings.AWS_S3_BUCKET, Key=key)
        return final_url

    def finalize_uploads(self, file_urls: list[str]) -> list[str]:
        """여러 로케이터를 확인 후 일괄 이동 — 하나라도 없으면 아무것도 이동하지 않음."""
        self.ensure_uploaded(file_urls)
        return [self.finalize_upload(u) for u in file_urls]



storage_service: StorageService = StorageService()
