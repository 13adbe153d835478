"""앱 API 라우터 패키지 — 공개 접수 엔드포인트 통합.

App API Router package — Aggregates the public intake endpoints
(issue and emergency reports) into a single router.
"""

from fastapi import APIRouter

from app.api.app.issues import router as issues_router
from app.api.app.emergency_reports import router as emergency_reports_router

app_router: APIRouter = APIRouter()

app_router.include_router(issues_router, prefix="/issues", tags=["Issue Intake"])
app_router.include_router(emergency_reports_router, prefix="/emergency-reports", tags=["Emergency Intake"])
