"""구역/근무조 API 테스트.

Zone and shift API tests: CRUD, coordinate validation, guarded delete,
CSV/JSON import, shift rosters and the coverage board.
"""

import json

from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

from app.repositories.zone_repository import zone_repository
from tests.conftest import ADMIN, make_staff

ZONES = f"{ADMIN}/zones"
SHIFTS = f"{ADMIN}/shifts"


class TestZoneCRUD:
    """구역 CRUD 테스트."""

    async def test_create_and_get(self, client: AsyncClient, zone):
        res = await client.get(f"{ZONES}/{zone['id']}")
        assert res.status_code == 200
        assert res.json()["name"] == "North Gate"
        assert res.json()["headcount"] == 40

    async def test_blank_name_rejected(self, client: AsyncClient):
        res = await client.post(ZONES, json={"name": "   "})
        assert res.status_code == 422

    async def test_half_coordinates_rejected(self, client: AsyncClient):
        res = await client.post(ZONES, json={"name": "A", "lat": 25.0})
        assert res.status_code == 422

    async def test_zone_without_coordinates(self, client: AsyncClient):
        res = await client.post(ZONES, json={"name": "Floating"})
        assert res.status_code == 201
        assert res.json()["lat"] is None

    async def test_update_validates_resulting_pair(self, client: AsyncClient, zone):
        res = await client.put(f"{ZONES}/{zone['id']}", json={"lat": 26.0})
        assert res.status_code == 200
        assert res.json()["lat"] == 26.0
        assert res.json()["lng"] == 81.84

    async def test_set_headcount(self, client: AsyncClient, zone):
        res = await client.put(f"{ZONES}/{zone['id']}/headcount", json={"headcount": 9})
        assert res.status_code == 200
        assert res.json()["headcount"] == 9

        res = await client.put(f"{ZONES}/{zone['id']}/headcount", json={"headcount": -1})
        assert res.status_code == 422

    async def test_missing_zone(self, client: AsyncClient):
        res = await client.get(f"{ZONES}/00000000-0000-0000-0000-000000000000")
        assert res.status_code == 404

    async def test_delete_unreferenced(self, client: AsyncClient, zone):
        res = await client.delete(f"{ZONES}/{zone['id']}")
        assert res.status_code == 200
        assert (await client.get(f"{ZONES}/{zone['id']}")).status_code == 404

    async def test_delete_referenced_conflicts(self, client: AsyncClient, zone):
        await client.post(SHIFTS, json={"zone_id": zone["id"], "shift_type": "red"})
        res = await client.delete(f"{ZONES}/{zone['id']}")
        assert res.status_code == 409
        assert "shift" in res.json()["detail"]

    async def test_delete_zone_covered_by_team_conflicts(self, client: AsyncClient, zone, staff_member):
        res = await client.post(f"{ADMIN}/teams", json={
            "name": "Gate crew", "leader_id": staff_member["id"], "zone_ids": [zone["id"]],
        })
        assert res.status_code == 201
        res = await client.delete(f"{ZONES}/{zone['id']}")
        assert res.status_code == 409
        assert "1 teams" in res.json()["detail"]

    async def test_store_failure_is_503(self, client: AsyncClient, monkeypatch):
        async def unavailable(db):
            raise OperationalError("SELECT zones", {}, ConnectionRefusedError("connection refused"))

        monkeypatch.setattr(zone_repository, "get_ordered", unavailable)
        res = await client.get(ZONES)
        assert res.status_code == 503
        assert res.json() == {"detail": "Store unavailable"}


class TestZoneImport:
    """구역 가져오기 — CSV/JSON, 행 단위 커밋."""

    async def test_csv_import_skips_bad_rows(self, client: AsyncClient):
        csv_body = "name,description,lat,lng\nGate A,Main,25.1,81.2\nGate B,,abc,81.3\n,,1,1\nGate C,,25.3,81.4\n"
        res = await client.post(
            f"{ZONES}/import", files={"file": ("zones.csv", csv_body.encode(), "text/csv")}
        )
        assert res.status_code == 200
        result = res.json()
        assert result["total"] == 4
        assert result["succeeded"] == 2
        assert result["skipped"] == 2
        assert {e["ref"] for e in result["errors"]} == {"Row 3", "Row 4"}

        names = [z["name"] for z in (await client.get(ZONES)).json()]
        assert names == ["Gate A", "Gate C"]

    async def test_json_import(self, client: AsyncClient):
        body = json.dumps([{"name": "J1", "lat": 1, "lng": 2}, {"name": "J2"}]).encode()
        res = await client.post(f"{ZONES}/import", files={"file": ("zones.json", body, "application/json")})
        assert res.status_code == 200
        assert res.json()["succeeded"] == 1
        assert res.json()["skipped"] == 1

    async def test_unsupported_file_type(self, client: AsyncClient):
        res = await client.post(f"{ZONES}/import", files={"file": ("zones.txt", b"x", "text/plain")})
        assert res.status_code == 400


class TestShifts:
    """근무조/커버리지 테스트."""

    async def test_create_with_default_times(self, client: AsyncClient, zone):
        res = await client.post(SHIFTS, json={"zone_id": zone["id"], "shift_type": "red"})
        assert res.status_code == 201
        data = res.json()
        assert data["start_time"] == "09:00"
        assert data["end_time"] == "17:00"
        assert data["coverage"]["required"] == 5
        assert data["coverage"]["level"] == "red"

    async def test_unknown_type_rejected(self, client: AsyncClient, zone):
        res = await client.post(SHIFTS, json={"zone_id": zone["id"], "shift_type": "blue"})
        assert res.status_code == 422

    async def test_duplicate_type_per_zone(self, client: AsyncClient, zone):
        await client.post(SHIFTS, json={"zone_id": zone["id"], "shift_type": "green"})
        res = await client.post(SHIFTS, json={"zone_id": zone["id"], "shift_type": "green"})
        assert res.status_code == 409

    async def test_missing_zone(self, client: AsyncClient):
        res = await client.post(SHIFTS, json={
            "zone_id": "00000000-0000-0000-0000-000000000000", "shift_type": "red",
        })
        assert res.status_code == 404

    async def test_assign_and_remove_staff(self, client: AsyncClient, zone, staff_member):
        shift = (await client.post(SHIFTS, json={"zone_id": zone["id"], "shift_type": "orange"})).json()
        url = f"{SHIFTS}/{shift['id']}/staff"

        res = await client.post(url, json={"staff_id": staff_member["id"]})
        assert res.status_code == 200
        assert res.json()["assigned_staff_ids"] == [staff_member["id"]]
        assert res.json()["coverage"]["assigned"] == 1

        dup = await client.post(url, json={"staff_id": staff_member["id"]})
        assert dup.status_code == 409

        res = await client.delete(f"{url}/{staff_member['id']}")
        assert res.status_code == 200
        assert res.json()["assigned_staff_ids"] == []

        res = await client.delete(f"{url}/{staff_member['id']}")
        assert res.status_code == 404

    async def test_assign_unknown_staff(self, client: AsyncClient, zone):
        shift = (await client.post(SHIFTS, json={"zone_id": zone["id"], "shift_type": "orange"})).json()
        res = await client.post(f"{SHIFTS}/{shift['id']}/staff", json={
            "staff_id": "00000000-0000-0000-0000-000000000000",
        })
        assert res.status_code == 404

    async def test_update_times(self, client: AsyncClient, zone):
        shift = (await client.post(SHIFTS, json={"zone_id": zone["id"], "shift_type": "red"})).json()
        res = await client.put(f"{SHIFTS}/{shift['id']}", json={"start_time": "06:30"})
        assert res.status_code == 200
        assert res.json()["start_time"] == "06:30"

        bad = await client.put(f"{SHIFTS}/{shift['id']}", json={"end_time": "late"})
        assert bad.status_code == 422

    async def test_defaults_fill_missing_types(self, client: AsyncClient, zone):
        await client.post(SHIFTS, json={"zone_id": zone["id"], "shift_type": "red", "start_time": "05:00"})
        res = await client.post(f"{SHIFTS}/defaults")
        assert res.json() == {"created": 2}

        shifts = (await client.get(SHIFTS, params={"zone_id": zone["id"]})).json()
        assert sorted(s["shift_type"] for s in shifts) == ["green", "orange", "red"]
        red = next(s for s in shifts if s["shift_type"] == "red")
        assert red["start_time"] == "05:00"

        again = await client.post(f"{SHIFTS}/defaults")
        assert again.json() == {"created": 0}

    async def test_coverage_board(self, client: AsyncClient, zone):
        staff = [await make_staff(client, f"Guard {i}") for i in range(3)]
        shift = (await client.post(SHIFTS, json={"zone_id": zone["id"], "shift_type": "green"})).json()
        for s in staff:
            await client.post(f"{SHIFTS}/{shift['id']}/staff", json={"staff_id": s["id"]})
        await client.post(ZONES, json={"name": "Empty Zone"})

        res = await client.get(f"{SHIFTS}/coverage")
        assert res.status_code == 200
        board = res.json()
        assert board["shift_types"] == ["red", "orange", "green"]

        north = next(z for z in board["zones"] if z["zone_name"] == "North Gate")
        cells = {c["shift_type"]: c for c in north["shifts"]}
        assert cells["green"]["level"] == "orange"  # 3 of 5
        assert cells["red"]["shift_id"] is None
        assert cells["red"]["level"] == "red"

        # 인원 0 구역은 모두 green — headcount 0 is fully covered
        assert board["levels"] == {"green": 3, "orange": 1, "red": 2}
