"""대시보드 API 테스트 — 요약/Excel 내보내기."""

from io import BytesIO

from httpx import AsyncClient
from openpyxl import load_workbook

from tests.conftest import ADMIN, PUBLIC, XLSX_TYPE


async def _task(client: AsyncClient, staff: dict, title: str) -> dict:
    res = await client.post(f"{ADMIN}/tasks", json={
        "title": title, "assigned_to": {"type": "staff", "id": staff["id"]},
    })
    return res.json()


class TestDashboard:

    async def test_summary_empty(self, client: AsyncClient):
        res = await client.get(f"{ADMIN}/dashboard/summary")
        assert res.status_code == 200
        data = res.json()
        assert data["tasks"]["total"] == 0
        assert data["tasks"]["completion_percent"] == 0
        assert data["active_emergencies"] == 0
        assert data["facilities"]["total"] == 0
        assert "generated_at" in data

    async def test_summary(self, client: AsyncClient, staff_member):
        task = await _task(client, staff_member, "Clean T-1")
        await _task(client, staff_member, "Clean T-2")
        await client.post(f"{ADMIN}/tasks/{task['id']}/start")
        await client.post(f"{ADMIN}/tasks/{task['id']}/done", json={"photos": ["https://cdn.example.com/a.jpg"]})
        await client.post(f"{ADMIN}/tasks/{task['id']}/verify")
        await client.post(f"{PUBLIC}/issues", json={"description": "Fire", "severity": "emergency"})

        data = (await client.get(f"{ADMIN}/dashboard/summary")).json()
        assert data["tasks"]["total"] == 2
        assert data["tasks"]["completion_percent"] == 50
        assert data["tasks"]["sla_compliance_percent"] == 100
        assert data["active_emergencies"] == 1

    async def test_export(self, client: AsyncClient, staff_member):
        task = await _task(client, staff_member, "Clean T-1")
        await _task(client, staff_member, "Clean T-2")
        await client.post(f"{ADMIN}/tasks/{task['id']}/start")

        res = await client.get(f"{ADMIN}/dashboard/export")
        assert res.status_code == 200
        assert res.headers["content-type"] == XLSX_TYPE
        assert "tasks_report.xlsx" in res.headers["content-disposition"]

        ws = load_workbook(BytesIO(res.content)).active
        rows = list(ws.iter_rows(values_only=True))
        assert rows[0][0] == "Title"
        assert sorted(r[0] for r in rows[1:]) == ["Clean T-1", "Clean T-2"]
        assert {r[4] for r in rows[1:]} == {"Ravi Kumar"}

        res = await client.get(f"{ADMIN}/dashboard/export", params={"status": "In Progress"})
        rows = list(load_workbook(BytesIO(res.content)).active.iter_rows(values_only=True))
        assert [r[0] for r in rows[1:]] == ["Clean T-1"]
