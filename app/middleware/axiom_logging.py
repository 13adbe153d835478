"""Axiom API 로깅 미들웨어.

Axiom request logging middleware.
Ships one structured event per request to Axiom: method, path, params,
masked JSON body, status code, duration and the error ``detail`` of
failed responses. Credentials and reporter contact details (phone,
number, contact, email) are masked before leaving the process.
"""

import json
import re
import time
from typing import Any

from axiom_py import Client as AxiomClient
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.config import settings

# 마스킹 대상 — credentials and reporter PII
_SENSITIVE_KEYS = re.compile(
    r"(password|secret|token|authorization|api_key|credential|phone|number|contact|email)",
    re.IGNORECASE,
)

_SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}
# 장시간 스트림/바이너리 업로드 — long-lived streams and raw uploads
_SKIP_PREFIXES = ("/api/v1/admin/events/", "/api/v1/admin/storage/upload/", "/uploads/")

_MAX_BODY_CHARS = 2000
_MAX_DETAIL_CHARS = 500


def _mask(data: Any, depth: int = 0) -> Any:
    """민감 필드 재귀 마스킹."""
    if depth > 5:
        return "..."
    if isinstance(data, dict):
        return {k: "***" if _SENSITIVE_KEYS.search(str(k)) else _mask(v, depth + 1) for k, v in data.items()}
    if isinstance(data, list):
        return [_mask(item, depth + 1) for item in data[:20]]
    return data


def _should_skip(path: str) -> bool:
    return path in _SKIP_PATHS or path.startswith(_SKIP_PREFIXES)


async def _read_json_body(request: Request) -> Any:
    if request.method not in ("POST", "PUT", "PATCH"):
        return None
    if not request.headers.get("content-type", "").startswith("application/json"):
        return None
    try:
        body_bytes = await request.body()
        if not body_bytes:
            return None
        masked = json.dumps(_mask(json.loads(body_bytes)), default=str)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return "(non-json body)"
    return masked[:_MAX_BODY_CHARS]


async def _capture_error(response: Response) -> tuple[Response, str]:
    """에러 응답 본문을 읽고 detail을 추출합니다. 소비한 본문으로 응답을 재구성."""
    raw = b""
    async for chunk in response.body_iterator:
        raw += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")

    try:
        payload = json.loads(raw)
        detail = payload.get("detail", payload) if isinstance(payload, dict) else payload
        detail_text = detail if isinstance(detail, str) else json.dumps(detail, default=str)
    except (json.JSONDecodeError, UnicodeDecodeError):
        detail_text = raw.decode("utf-8", errors="replace")

    rebuilt = Response(
        content=raw,
        status_code=response.status_code,
        headers=dict(response.headers),
        media_type=response.media_type,
    )
    return rebuilt, detail_text[:_MAX_DETAIL_CHARS]


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """요청/응답을 Axiom에 기록합니다. 미설정 시 패스스루."""

    def __init__(self, app: Any) -> None:
        super().__init__(app)
        self._dataset: str = settings.AXIOM_DATASET
        self._client: AxiomClient | None = (
            AxiomClient(token=settings.AXIOM_API_TOKEN)
            if settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET
            else None
        )

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if self._client is None or _should_skip(request.url.path):
            return await call_next(request)

        started = time.perf_counter()
        event: dict[str, Any] = {"method": request.method, "path": request.url.path, "status_code": 500}
        if request.query_params:
            event["query_params"] = _mask(dict(request.query_params))
        body = await _read_json_body(request)
        if body is not None:
            event["request_body"] = body

        try:
            response = await call_next(request)
            event["status_code"] = response.status_code
            if response.status_code >= 400:
                response, event["error"] = await _capture_error(response)
            if request.path_params:
                event["path_params"] = dict(request.path_params)
        except Exception as exc:
            event["error"] = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            event["duration_ms"] = round((time.perf_counter() - started) * 1000, 2)
            self._ingest(event)

        return response

    def _ingest(self, event: dict[str, Any]) -> None:
        try:
            self._client.ingest_events(self._dataset, [event])
        except Exception:
            # 로깅 실패가 요청 처리에 영향을 주지 않음
            pass
