"""앱 이슈 신고 라우터 — 공개 이슈 접수 API.

App Issue Intake Router — Public endpoint for reporting facility/zone issues.
Reports enter the admin triage queue with status ``open``.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.issue import IssueCreate
from app.services.change_feed import change_feed
from app.services.issue_service import issue_service

router: APIRouter = APIRouter()


@router.post("", status_code=201)
async def report_issue(
    data: IssueCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """이슈 신고 — 설명 필수, 상태 open으로 접수."""
    issue = await issue_service.create_issue(db, data)
    await db.commit()
    await change_feed.publish(db, "issues")
    return issue_service.build_response(issue)
