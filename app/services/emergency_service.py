"""긴급 신고 서비스.

Emergency report service — intake from the public app and read-only
listing for the admin dashboard. Location arrives either as free text or
as a structured {address, lat, lng} object.
"""

from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.issue import EmergencyReport
from app.repositories.issue_repository import emergency_report_repository
from app.schemas.issue import EmergencyLocation, EmergencyReportCreate
from app.services.change_feed import change_feed
from app.utils.exceptions import NotFoundError
from app.utils.validation import coordinates, require_text


class EmergencyService:

    def build_response(self, report: EmergencyReport) -> dict:
        location: Any = report.location_text
        if report.address is not None or report.lat is not None:
            location = {"address": report.address, "lat": report.lat, "lng": report.lng}
        return {
            "id": str(report.id),
            "contact": report.contact,
            "description": report.description,
            "location": location,
            "source": report.source,
            "type": report.type,
            "reported_at": report.reported_at,
        }

    async def list_reports(
        self,
        db: AsyncSession,
        report_type: str | None = None,
        source: str | None = None,
    ) -> Sequence[EmergencyReport]:
        return await emergency_report_repository.get_filtered(db, report_type, source)

    async def get_report(self, db: AsyncSession, report_id: UUID) -> EmergencyReport:
        report: EmergencyReport | None = await emergency_report_repository.get_by_id(db, report_id)
        if report is None:
            raise NotFoundError("긴급 신고를 찾을 수 없습니다 (Emergency report not found)")
        return report

    async def create_report(self, db: AsyncSession, data: EmergencyReportCreate) -> EmergencyReport:
        values: dict[str, Any] = {
            "contact": require_text(data.contact, "contact"),
            "description": data.description or "",
            "source": (data.source or "").strip() or "app",
            "type": (data.type or "").strip() or "general",
        }
        if isinstance(data.location, EmergencyLocation):
            values["address"] = data.location.address
            values["lat"], values["lng"] = coordinates(data.location.lat, data.location.lng)
        elif isinstance(data.location, str):
            values["location_text"] = data.location.strip() or None
        return await emergency_report_repository.create(db, values)

    async def snapshot_items(self, db: AsyncSession) -> list[dict]:
        return [self.build_response(r) for r in await self.list_reports(db)]


emergency_service: EmergencyService = EmergencyService()
change_feed.register("emergency-reports", emergency_service.snapshot_items)
