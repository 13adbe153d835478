"""공통 Pydantic 요청/응답 스키마 정의.

Common Pydantic request/response schema definitions shared across
resources: pagination wrapper, generic messages, the batch tally returned
by non-atomic bulk operations, and the tagged assignee reference.
"""

from typing import Any

from pydantic import BaseModel, Field

from app.utils.constants import AssigneeKind


class PaginatedResponse(BaseModel):
    """페이지네이션 응답 스키마.

    Attributes:
        items: 항목 목록 (List of result items)
        total: 전체 항목 수 (Total count across all pages)
        page: 현재 페이지 번호 (Current page number, 1-based)
        per_page: 페이지당 항목 수 (Items per page)
    """

    items: list[Any]  # 결과 항목 목록 (List of items for the current page)
    total: int  # 전체 항목 수 (Total item count)
    page: int  # 현재 페이지 — 1부터 시작 (Current page, 1-indexed)
    per_page: int  # 페이지당 항목 수 (Items per page)


class MessageResponse(BaseModel):
    """범용 메시지 응답 스키마 (Generic confirmation message)."""

    message: str  # 응답 메시지 (Human-readable confirmation message)


class BatchError(BaseModel):
    ref: str  # 행 번호 또는 레코드 ID (Row number or record id)
    reason: str  # 실패/건너뜀 사유 (Why the record failed or was skipped)


class BatchResult(BaseModel):
    """일괄 작업 결과 집계 — 부분 실패 허용.

    Tally of a non-atomic batch operation. Records are committed one by one;
    earlier successes stay committed when a later record fails.

    Attributes:
        total: 처리 대상 수 (Records attempted)
        succeeded: 성공 수 (Committed records)
        failed: 저장 실패 수 (Records whose write failed)
        skipped: 검증 실패로 건너뛴 수 (Rows rejected before writing)
        errors: 실패/건너뜀 상세 (Per-record reasons)
    """

    total: int = 0
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0
    errors: list[BatchError] = Field(default_factory=list)

    def skip(self, ref: Any, reason: str) -> None:
        self.skipped += 1
        self.errors.append(BatchError(ref=str(ref), reason=reason))

    def fail(self, ref: Any, reason: str) -> None:
        self.failed += 1
        self.errors.append(BatchError(ref=str(ref), reason=reason))


class AssigneeRef(BaseModel):
    """업무 담당 참조 — 스태프 또는 팀 (Tagged reference to a staff member or a team)."""

    type: AssigneeKind  # "staff" | "team"
    id: str  # 스태프/팀 UUID 문자열 (Staff or team UUID)
