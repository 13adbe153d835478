"""스태프/팀 API 테스트.

Staff and team API tests: directory CRUD with soft delete, search and
pagination, Excel import/export, team tag sync batches and notify.
"""

import uuid
from io import BytesIO
from uuid import UUID

from httpx import AsyncClient
from openpyxl import load_workbook
from sqlalchemy.exc import SQLAlchemyError

from app.repositories.staff_repository import staff_repository
from app.services.team_service import team_service
from tests.conftest import ADMIN, XLSX_TYPE, make_staff, xlsx_bytes

STAFF = f"{ADMIN}/staff"
TEAMS = f"{ADMIN}/teams"


class TestStaffCRUD:
    """스태프 CRUD 테스트."""

    async def test_create_defaults(self, client: AsyncClient, staff_member):
        assert staff_member["role"] == "staff"
        assert staff_member["status"] == "active"
        assert staff_member["zone"] == "General"
        assert staff_member["teams"] == []

    async def test_required_fields(self, client: AsyncClient):
        res = await client.post(STAFF, json={
            "name": "X", "email": "x@example.com", "phone": "  ", "department": "Ops",
        })
        assert res.status_code == 422

    async def test_unknown_role_rejected(self, client: AsyncClient):
        res = await client.post(STAFF, json={
            "name": "X", "email": "x@example.com", "phone": "1", "department": "Ops", "role": "boss",
        })
        assert res.status_code == 422

    async def test_update(self, client: AsyncClient, staff_member):
        res = await client.put(f"{STAFF}/{staff_member['id']}", json={"role": "manager", "status": "on-leave"})
        assert res.status_code == 200
        assert res.json()["role"] == "manager"
        assert res.json()["status"] == "on-leave"

    async def test_delete_is_soft(self, client: AsyncClient, staff_member):
        res = await client.delete(f"{STAFF}/{staff_member['id']}")
        assert res.status_code == 200
        assert res.json()["status"] == "inactive"

        res = await client.get(f"{STAFF}/{staff_member['id']}")
        assert res.status_code == 200
        assert res.json()["status"] == "inactive"


class TestStaffListing:
    """스태프 목록/검색/그룹 테스트."""

    async def test_pagination_default_page_size(self, client: AsyncClient):
        for i in range(12):
            await make_staff(client, f"Member {i:02d}")
        res = await client.get(STAFF)
        data = res.json()
        assert data["total"] == 12
        assert data["per_page"] == 10
        assert len(data["items"]) == 10

        page2 = (await client.get(STAFF, params={"page": 2})).json()
        assert len(page2["items"]) == 2

    async def test_search_and_filters(self, client: AsyncClient):
        await make_staff(client, "Asha Verma", role="manager", department="Security")
        await make_staff(client, "Neha Singh")
        res = await client.get(STAFF, params={"search": "asha"})
        assert [s["name"] for s in res.json()["items"]] == ["Asha Verma"]

        res = await client.get(STAFF, params={"department": "Sanitation"})
        assert [s["name"] for s in res.json()["items"]] == ["Neha Singh"]

    async def test_group_counts(self, client: AsyncClient):
        await make_staff(client, "A", role="manager")
        await make_staff(client, "B")
        await make_staff(client, "C")
        res = await client.get(f"{STAFF}/groups", params={"by": "role"})
        assert res.json() == {"by": "role", "counts": {"manager": 1, "staff": 2}}

        bad = await client.get(f"{STAFF}/groups", params={"by": "email"})
        assert bad.status_code == 422


class TestStaffExcel:
    """스태프 엑셀 가져오기/내보내기."""

    async def test_import_partial(self, client: AsyncClient):
        content = xlsx_bytes([
            ["Name", "Phone", "Email", "Role", "Zone", "Department", "Status"],
            ["Imran Khan", "+91-1", "imran@example.com", "staff", "North", "Water", "active"],
            ["No Email", "+91-2", None, "staff", None, None, None],
            ["Priya", "+91-3", "priya@example.com", "chief", None, None, None],
            ["Sara", "+91-4", "sara@example.com", None, None, None, None],
        ])
        res = await client.post(f"{STAFF}/import", files={"file": ("staff.xlsx", content, XLSX_TYPE)})
        assert res.status_code == 200
        result = res.json()
        assert result["total"] == 4
        assert result["succeeded"] == 2
        assert result["skipped"] == 2
        assert [e["ref"] for e in result["errors"]] == ["Row 3", "Row 4"]

        names = [s["name"] for s in (await client.get(STAFF)).json()["items"]]
        assert names == ["Imran Khan", "Sara"]

    async def test_import_rejects_non_xlsx(self, client: AsyncClient):
        res = await client.post(f"{STAFF}/import", files={"file": ("staff.csv", b"a,b", "text/csv")})
        assert res.status_code == 400

    async def test_import_unreadable_workbook(self, client: AsyncClient):
        res = await client.post(f"{STAFF}/import", files={"file": ("staff.xlsx", b"garbage", XLSX_TYPE)})
        assert res.status_code == 400

    async def test_export(self, client: AsyncClient, staff_member):
        res = await client.get(f"{STAFF}/export")
        assert res.status_code == 200
        ws = load_workbook(BytesIO(res.content)).active
        assert ws.cell(row=1, column=1).value == "name"
        assert ws.cell(row=2, column=1).value == "Ravi Kumar"


class TestTeams:
    """팀 관리와 팀 태그 동기화."""

    async def _team(self, client: AsyncClient, leader: dict, members: list[dict], name: str = "Alpha") -> dict:
        res = await client.post(TEAMS, json={
            "name": name,
            "leader_id": leader["id"],
            "member_ids": [m["id"] for m in members] + [members[0]["id"]] if members else [],
        })
        assert res.status_code == 201, res.text
        return res.json()

    async def test_create_tags_members(self, client: AsyncClient):
        leader = await make_staff(client, "Leader")
        a = await make_staff(client, "Member A")
        b = await make_staff(client, "Member B")

        body = await self._team(client, leader, [a, b])
        team = body["team"]
        assert team["leader_name"] == "Leader"
        # 중복 멤버 제거 — duplicates collapsed
        assert team["member_ids"] == [a["id"], b["id"]]
        assert [m["name"] for m in team["members"]] == ["Member A", "Member B"]
        assert body["member_sync"]["succeeded"] == 2

        assert (await client.get(f"{STAFF}/{a['id']}")).json()["teams"] == ["Alpha"]

    async def test_create_requires_existing_leader(self, client: AsyncClient):
        res = await client.post(TEAMS, json={
            "name": "Ghost", "leader_id": "00000000-0000-0000-0000-000000000000",
        })
        assert res.status_code == 404

    async def test_update_members_syncs_tags(self, client: AsyncClient):
        leader = await make_staff(client, "Leader")
        a = await make_staff(client, "Member A")
        b = await make_staff(client, "Member B")
        team = (await self._team(client, leader, [a]))["team"]

        res = await client.put(f"{TEAMS}/{team['id']}/members", json={"member_ids": [b["id"]]})
        assert res.status_code == 200
        sync = res.json()["member_sync"]
        assert sync["total"] == 2
        assert sync["succeeded"] == 2

        assert (await client.get(f"{STAFF}/{a['id']}")).json()["teams"] == []
        assert (await client.get(f"{STAFF}/{b['id']}")).json()["teams"] == ["Alpha"]

    async def test_member_sync_failure_keeps_other_writes(self, client: AsyncClient, monkeypatch):
        leader = await make_staff(client, "Leader")
        a = await make_staff(client, "Member A")
        b = await make_staff(client, "Member B")
        c = await make_staff(client, "Member C")
        team = (await self._team(client, leader, [a]))["team"]

        original_update = staff_repository.update

        async def flaky_update(db, record_id, update_data):
            if str(record_id) == b["id"]:
                raise SQLAlchemyError("disk I/O error")
            return await original_update(db, record_id, update_data)

        monkeypatch.setattr(staff_repository, "update", flaky_update)
        res = await client.put(f"{TEAMS}/{team['id']}/members", json={
            "member_ids": [a["id"], b["id"], c["id"]],
        })
        monkeypatch.undo()

        assert res.status_code == 200
        sync = res.json()["member_sync"]
        assert sync["total"] == 2
        assert sync["succeeded"] == 1
        assert sync["failed"] == 1
        assert [e["ref"] for e in sync["errors"]] == [b["id"]]

        assert (await client.get(f"{STAFF}/{b['id']}")).json()["teams"] == []
        assert (await client.get(f"{STAFF}/{c['id']}")).json()["teams"] == ["Alpha"]

    async def test_member_sync_skips_staff_removed_meanwhile(self, db, client: AsyncClient):
        a = await make_staff(client, "Member A")
        ghost = uuid.uuid4()

        result = await team_service.sync_tags(db, [UUID(a["id"]), ghost], add="Alpha")
        assert (result.succeeded, result.skipped, result.failed) == (1, 1, 0)
        assert result.errors[0].ref == str(ghost)

    async def test_create_with_unknown_zone(self, client: AsyncClient):
        leader = await make_staff(client, "Leader")
        res = await client.post(TEAMS, json={
            "name": "Nowhere", "leader_id": leader["id"],
            "zone_ids": ["00000000-0000-0000-0000-000000000000"],
        })
        assert res.status_code == 404
        assert (await client.get(TEAMS)).json() == []

    async def test_rename_renames_tags(self, client: AsyncClient):
        leader = await make_staff(client, "Leader")
        a = await make_staff(client, "Member A")
        team = (await self._team(client, leader, [a]))["team"]

        res = await client.put(f"{TEAMS}/{team['id']}", json={"name": "Bravo"})
        assert res.status_code == 200
        assert res.json()["team"]["name"] == "Bravo"
        assert res.json()["member_sync"]["succeeded"] == 1
        assert (await client.get(f"{STAFF}/{a['id']}")).json()["teams"] == ["Bravo"]

    async def test_delete_cleans_tags_keeps_staff(self, client: AsyncClient):
        leader = await make_staff(client, "Leader")
        a = await make_staff(client, "Member A")
        team = (await self._team(client, leader, [a]))["team"]

        res = await client.delete(f"{TEAMS}/{team['id']}")
        assert res.status_code == 200
        assert res.json()["succeeded"] == 1

        member = await client.get(f"{STAFF}/{a['id']}")
        assert member.status_code == 200
        assert member.json()["teams"] == []
        assert (await client.get(f"{TEAMS}/{team['id']}")).status_code == 404

    async def test_notify_records_one_entry_per_person(self, client: AsyncClient):
        leader = await make_staff(client, "Leader")
        a = await make_staff(client, "Member A")
        team = (await self._team(client, leader, [a]))["team"]

        res = await client.post(f"{TEAMS}/{team['id']}/notify", json={"message": "Report to gate 3"})
        assert res.status_code == 201
        assert sorted(n["name"] for n in res.json()) == ["Leader", "Member A"]

        log = (await client.get(f"{ADMIN}/notifications")).json()
        assert len(log) == 2
        assert all(n["message"] == "Report to gate 3" for n in log)

    async def test_staff_notify(self, client: AsyncClient, staff_member):
        res = await client.post(f"{STAFF}/{staff_member['id']}/notify", json={"message": "Shift moved"})
        assert res.status_code == 201
        assert res.json()["name"] == "Ravi Kumar"
        assert res.json()["number"] == staff_member["phone"]
