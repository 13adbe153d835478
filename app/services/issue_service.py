"""이슈 서비스 — 이슈 접수, 트리아지, 긴급 카운트.

Issue service — Issue intake and triage (assign / merge / close).
"""

from datetime import datetime, timezone
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.issue import Issue
from app.repositories.issue_repository import issue_repository
from app.schemas.issue import IssueCreate
from app.services.change_feed import change_feed
from app.utils.exceptions import NotFoundError
from app.utils.triage import (
    IssueStatus,
    emergency_count,
    is_active_emergency,
    is_high_severity,
    issue_countdown,
    plan_assign,
    plan_close,
    plan_merge,
)
from app.utils.validation import require_text


class IssueService:

    def build_response(self, issue: Issue, now: datetime | None = None) -> dict:
        return {
            "id": str(issue.id),
            "facility_ref": issue.facility_ref,
            "zone_ref": issue.zone_ref,
            "category": issue.category,
            "severity": issue.severity,
            "description": issue.description,
            "reported_by": issue.reported_by,
            "status": issue.status,
            "assigned_to": issue.assigned_to,
            "reported_at": issue.reported_at,
            "is_active_emergency": is_active_emergency(issue),
            "is_high_severity": is_high_severity(issue),
            "sla": issue_countdown(issue, now).as_dict(),
        }

    def build_responses(self, issues: Sequence[Issue]) -> list[dict]:
        now: datetime = datetime.now(timezone.utc)
        return [self.build_response(i, now) for i in issues]

    async def list_issues(
        self,
        db: AsyncSession,
        severity: str | None = None,
        status: str | None = None,
        high_only: bool = False,
    ) -> Sequence[Issue]:
        return await issue_repository.get_filtered(db, severity, status, high_only)

    async def get_issue(self, db: AsyncSession, issue_id: UUID) -> Issue:
        issue: Issue | None = await issue_repository.get_by_id(db, issue_id)
        if issue is None:
            raise NotFoundError("이슈를 찾을 수 없습니다 (Issue not found)")
        return issue

    async def create_issue(self, db: AsyncSession, data: IssueCreate) -> Issue:
        return await issue_repository.create(
            db,
            {
                "description": require_text(data.description, "description"),
                "category": (data.category or "").strip() or "general",
                "severity": data.severity.value,
                "facility_ref": data.facility_ref,
                "zone_ref": data.zone_ref,
                "reported_by": (data.reported_by or "").strip() or "anonymous",
                "status": IssueStatus.OPEN.value,
            },
        )

    async def assign(self, db: AsyncSession, issue_id: UUID, assignee_name: str) -> Issue:
        issue: Issue = await self.get_issue(db, issue_id)
        return await issue_repository.update(db, issue_id, plan_assign(issue, assignee_name))

    async def merge(self, db: AsyncSession, issue_id: UUID) -> Issue:
        issue: Issue = await self.get_issue(db, issue_id)
        return await issue_repository.update(db, issue_id, plan_merge(issue))

    async def close(self, db: AsyncSession, issue_id: UUID) -> Issue:
        issue: Issue = await self.get_issue(db, issue_id)
        return await issue_repository.update(db, issue_id, plan_close(issue))

    async def delete_issue(self, db: AsyncSession, issue_id: UUID) -> None:
        await self.get_issue(db, issue_id)
        await issue_repository.delete(db, issue_id)

    async def emergency_count(self, db: AsyncSession) -> int:
        return emergency_count(await issue_repository.get_all(db))

    async def snapshot_items(self, db: AsyncSession) -> list[dict]:
        return self.build_responses(await self.list_issues(db))


def banner_from_snapshot(snapshot: dict) -> dict:
    """issues 스냅샷에서 긴급 배너 카운트를 다시 계산합니다."""
    return {
        "emergency_count": sum(1 for item in snapshot["items"] if item["is_active_emergency"]),
        "published_at": snapshot["published_at"],
    }


issue_service: IssueService = IssueService()
change_feed.register("issues", issue_service.snapshot_items)
