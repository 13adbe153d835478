"""관리자 실시간 이벤트 라우터 — Server-Sent Events.

Admin Events Router — Streams full-collection snapshots over SSE.
Each stream starts with the current snapshot, then one event per
committed write to the collection.

    GET /events/emergency-banner   emergency count derived from issues
    GET /events/{collection}       zones, shifts, staff, teams, facilities,
                                   tasks, issues, emergency-reports,
                                   notifications, ads
"""

import asyncio
import json
import logging
from collections.abc import AsyncGenerator, Callable
from typing import Annotated, Any

from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.services.change_feed import Subscription, SubscriptionClosed, change_feed
from app.services.issue_service import banner_from_snapshot

logger = logging.getLogger(__name__)

router: APIRouter = APIRouter()

# 연결 유지 주석 간격(초) — keep-alive comment interval
HEARTBEAT_SECONDS: float = 30.0


def _to_sse(event: str, data: dict[str, Any]) -> str:
    return f"event: {event}\ndata: {json.dumps(jsonable_encoder(data))}\n\n"


async def _stream(
    sub: Subscription,
    initial: dict[str, Any],
    event: str,
    transform: Callable[[dict[str, Any]], dict[str, Any]],
) -> AsyncGenerator[str, None]:
    try:
        yield _to_sse(event, transform(initial))
        while True:
            try:
                snapshot = await asyncio.wait_for(sub.next(), timeout=HEARTBEAT_SECONDS)
            except TimeoutError:
                yield ": keep-alive\n\n"
                continue
            yield _to_sse(event, transform(snapshot))
    except SubscriptionClosed:
        logger.debug("SSE subscription for %s closed", sub.collection)
    finally:
        sub.cancel()


def _response(generator: AsyncGenerator[str, None]) -> StreamingResponse:
    return StreamingResponse(
        generator,
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


@router.get("/emergency-banner")
async def stream_emergency_banner(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> StreamingResponse:
    """긴급 배너 스트림 — issues 변경마다 활성 긴급 이슈 수를 전송."""
    sub = change_feed.subscribe("issues")
    try:
        initial = await change_feed.snapshot(db, "issues")
    except Exception:
        sub.cancel()
        raise
    return _response(_stream(sub, initial, "emergency-banner", banner_from_snapshot))


@router.get("/{collection}")
async def stream_collection(
    collection: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> StreamingResponse:
    """컬렉션 스냅샷 스트림.

    Raises:
        NotFoundError: 알 수 없는 컬렉션 (Unknown collection)
    """
    sub = change_feed.subscribe(collection)
    try:
        initial = await change_feed.snapshot(db, collection)
    except Exception:
        sub.cancel()
        raise
    return _response(_stream(sub, initial, collection, lambda snapshot: snapshot))
