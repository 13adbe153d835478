"""시설 API 테스트.

Facility API tests: per-type status vocabularies, stats, and Excel
import with per-row commit and partial failure.
"""

from io import BytesIO

from httpx import AsyncClient
from openpyxl import load_workbook

from tests.conftest import ADMIN, XLSX_TYPE, xlsx_bytes

FACILITIES = f"{ADMIN}/facilities"


async def _facility(client: AsyncClient, zone: dict, **overrides) -> dict:
    payload = {"code": "T-1", "type": "Toilet", "zone_id": zone["id"], "lat": 25.4, "lng": 81.8}
    payload.update(overrides)
    res = await client.post(FACILITIES, json=payload)
    assert res.status_code == 201, res.text
    return res.json()


class TestFacilityCRUD:
    """시설 CRUD 및 상태 어휘 테스트."""

    async def test_default_status_is_first_of_vocabulary(self, client: AsyncClient, zone):
        toilet = await _facility(client, zone)
        assert toilet["status"] == "clean"
        water = await _facility(client, zone, code="W-1", type="Water Supply")
        assert water["status"] == "working"

    async def test_status_outside_vocabulary(self, client: AsyncClient, zone):
        res = await client.post(FACILITIES, json={
            "code": "D-1", "type": "Dustbin", "zone_id": zone["id"], "lat": 1, "lng": 1, "status": "dirty",
        })
        assert res.status_code == 422

    async def test_unknown_zone(self, client: AsyncClient):
        res = await client.post(FACILITIES, json={
            "code": "D-1", "type": "Dustbin", "zone_id": "00000000-0000-0000-0000-000000000000", "lat": 1, "lng": 1,
        })
        assert res.status_code == 404

    async def test_update_status_stamps_last_updated(self, client: AsyncClient, zone):
        toilet = await _facility(client, zone)
        res = await client.put(f"{FACILITIES}/{toilet['id']}/status", json={"status": "dirty"})
        assert res.status_code == 200
        assert res.json()["status"] == "dirty"
        assert res.json()["last_updated"] is not None

        bad = await client.put(f"{FACILITIES}/{toilet['id']}/status", json={"status": "faulty"})
        assert bad.status_code == 422

    async def test_assign_task_note(self, client: AsyncClient, zone):
        toilet = await _facility(client, zone)
        res = await client.put(f"{FACILITIES}/{toilet['id']}/task", json={"task": "Deep clean at 14:00"})
        assert res.status_code == 200
        assert res.json()["assigned_task"] == "Deep clean at 14:00"

    async def test_filters_and_delete(self, client: AsyncClient, zone):
        await _facility(client, zone)
        bin_ = await _facility(client, zone, code="D-1", type="Dustbin", status="full")

        res = await client.get(FACILITIES, params={"type": "dustbins"})
        assert [f["code"] for f in res.json()] == ["D-1"]
        res = await client.get(FACILITIES, params={"status": "clean"})
        assert [f["code"] for f in res.json()] == ["T-1"]

        assert (await client.delete(f"{FACILITIES}/{bin_['id']}")).status_code == 200
        assert (await client.get(f"{FACILITIES}/{bin_['id']}")).status_code == 404

    async def test_stats(self, client: AsyncClient, zone):
        await _facility(client, zone)
        await _facility(client, zone, code="T-2", status="full")
        await _facility(client, zone, code="D-1", type="Dustbin")

        stats = (await client.get(f"{FACILITIES}/stats")).json()
        assert stats["total"] == 3
        assert stats["by_type"]["Toilet"]["total"] == 2
        assert stats["by_type"]["Toilet"]["statuses"] == {"clean": 1, "dirty": 0, "empty": 0, "full": 1}
        assert stats["by_type"]["Water Supply"]["total"] == 0
        assert stats["by_zone"] == [{
            "zone_id": zone["id"], "zone_name": "North Gate", "total": 3, "by_type": {"Dustbin": 1, "Toilet": 2},
        }]


class TestFacilityImport:
    """시설 엑셀 가져오기 — 행 단위 커밋, 부분 실패."""

    async def test_import_mixed_rows(self, client: AsyncClient, zone):
        content = xlsx_bytes([
            ["code", "type", "zoneId", "lat", "lng", "status"],
            ["T-10", "Toilet", zone["id"], 25.1, 81.1, "dirty"],
            ["T-11", "toilets", "north gate", 25.2, 81.2, None],
            ["T-12", "Toilet", zone["id"], "n/a", 81.3, "clean"],
            ["D-10", "Dustbin", "Nowhere", 25.4, 81.4, "full"],
            ["W-10", "Water Supply", zone["id"], 25.5, 81.5, "dirty"],
        ])
        res = await client.post(
            f"{FACILITIES}/import", files={"file": ("facilities.xlsx", content, XLSX_TYPE)}
        )
        assert res.status_code == 200
        result = res.json()
        assert result["total"] == 5
        assert result["succeeded"] == 2
        assert result["skipped"] == 3
        assert result["failed"] == 0
        reasons = {e["ref"]: e["reason"] for e in result["errors"]}
        assert set(reasons) == {"Row 4", "Row 5", "Row 6"}
        assert "Unknown zone" in reasons["Row 5"]

        codes = sorted(f["code"] for f in (await client.get(FACILITIES)).json())
        assert codes == ["T-10", "T-11"]

    async def test_import_rejects_non_xlsx(self, client: AsyncClient):
        res = await client.post(f"{FACILITIES}/import", files={"file": ("f.csv", b"a", "text/csv")})
        assert res.status_code == 400

    async def test_sample_workbook(self, client: AsyncClient):
        res = await client.get(f"{FACILITIES}/import/sample")
        assert res.status_code == 200
        wb = load_workbook(BytesIO(res.content))
        headers = [c.value for c in wb["Facilities"][1]]
        assert headers == ["code", "type", "zoneId", "lat", "lng", "status"]
        assert "Statuses" in wb.sheetnames
