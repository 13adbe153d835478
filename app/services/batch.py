"""일괄 작업 헬퍼 — 레코드 단위 커밋.

Batch helper for non-atomic bulk operations. Each record is written and
committed on its own; a store failure rolls back only that record and is
recorded on the BatchResult, and the loop moves on. Earlier commits stay.

Callers must capture plain ids before the loop and reload records inside
the write, since a rollback expires every ORM object in the session. A
write that finds nothing to do raises SkipRecord.
"""

from collections.abc import Awaitable, Callable
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.schemas.common import BatchResult


class SkipRecord(Exception):
    """쓰기 전 레코드를 건너뜀 — 결과에 skipped로 기록 (Record skipped, not failed)."""


async def commit_each(
    db: AsyncSession,
    result: BatchResult,
    ref: Any,
    write: Callable[[], Awaitable[Any]],
) -> bool:
    """레코드 하나를 쓰고 커밋합니다. 실패 시 롤백 후 결과에 기록.

    Args:
        db: 비동기 데이터베이스 세션 (Async database session)
        result: 누적 결과 (Tally to update)
        ref: 행 번호 또는 레코드 ID (Row number or record id for error reports)
        write: 쓰기 코루틴 팩토리 (Coroutine factory doing the write)

    Returns:
        bool: 커밋 성공 여부 (Whether the record committed)
    """
    try:
        await write()
        await db.commit()
    except SkipRecord as exc:
        result.skip(ref, str(exc))
        return False
    except SQLAlchemyError as exc:
        await db.rollback()
        result.fail(ref, f"{type(exc).__name__}: {str(exc)[:200]}")
        return False
    result.succeeded += 1
    return True
