"""관리자 API 라우터 패키지 — 모든 관리자 엔드포인트 통합.

Admin API Router package — Aggregates all dashboard endpoints
into a single router for inclusion in the FastAPI application.

Included routers (Operations):
    - zones: 구역 관리 (Zone management, headcount, bulk import)
    - shifts: 근무조 배정 및 커버리지 (Shift assignment & coverage board)
    - staff: 스태프 관리 (Staff directory, import/export)
    - teams: 팀 관리 (Teams and member tag sync)
    - facilities: 시설 관리 (Facility status, stats, import)
    - tasks: 업무 라이프사이클 (Task lifecycle & evidence)

Included routers (Triage):
    - issues: 이슈 트리아지 (Issue triage)
    - emergency_reports: 긴급 신고 (Emergency reports)

Included routers (Communication):
    - notifications: 알림 센터 (Notification log)
    - ads: 광고/공지 (Ads & announcements)

Included routers (Dashboard):
    - dashboard: 요약/내보내기 (Summary & export)
    - storage: 증빙 사진 업로드 (Evidence uploads)
    - events: 실시간 스트림 (Server-Sent Events)
"""

from fastapi import APIRouter

from app.api.admin.zones import router as zones_router
from app.api.admin.shifts import router as shifts_router
from app.api.admin.staff import router as staff_router
from app.api.admin.teams import router as teams_router
from app.api.admin.facilities import router as facilities_router
from app.api.admin.tasks import router as tasks_router

from app.api.admin.issues import router as issues_router
from app.api.admin.emergency_reports import router as emergency_reports_router

from app.api.admin.notifications import router as notifications_router
from app.api.admin.ads import router as ads_router

from app.api.admin.dashboard import router as dashboard_router
from app.api.admin.storage import router as storage_router
from app.api.admin.events import router as events_router

admin_router: APIRouter = APIRouter()

# ---------------------------------------------------------------------------
# 운영 라우터 등록 — Operations
# ---------------------------------------------------------------------------
admin_router.include_router(zones_router, prefix="/zones", tags=["Zones"])
admin_router.include_router(shifts_router, prefix="/shifts", tags=["Shifts"])
admin_router.include_router(staff_router, prefix="/staff", tags=["Staff"])
admin_router.include_router(teams_router, prefix="/teams", tags=["Teams"])
admin_router.include_router(facilities_router, prefix="/facilities", tags=["Facilities"])
admin_router.include_router(tasks_router, prefix="/tasks", tags=["Tasks"])

# ---------------------------------------------------------------------------
# 트리아지 라우터 등록 — Triage
# ---------------------------------------------------------------------------
admin_router.include_router(issues_router, prefix="/issues", tags=["Issues"])
admin_router.include_router(emergency_reports_router, prefix="/emergency-reports", tags=["Emergency Reports"])

# ---------------------------------------------------------------------------
# 커뮤니케이션 라우터 등록 — Communication
# ---------------------------------------------------------------------------
admin_router.include_router(notifications_router, prefix="/notifications", tags=["Notifications"])
admin_router.include_router(ads_router, prefix="/ads", tags=["Ads"])

# ---------------------------------------------------------------------------
# 대시보드 라우터 등록 — Dashboard
# ---------------------------------------------------------------------------
admin_router.include_router(dashboard_router, prefix="/dashboard", tags=["Dashboard"])
admin_router.include_router(storage_router, prefix="/storage", tags=["Storage"])
admin_router.include_router(events_router, prefix="/events", tags=["Events"])
