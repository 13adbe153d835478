"""초기 데이터 시드 스크립트 — 데모 행사장 데이터 생성.

Seed script — Creates a small demo event site: zones with headcounts,
staff, one team, default shifts, facilities, a task and an issue.

Usage:
    python -m app.seed

Idempotent: 구역이 하나라도 있으면 건너뜁니다 (Skips when any zone exists).
"""

import asyncio
from datetime import time

from sqlalchemy import select

from app.config import settings
from app.database import async_session, engine, Base
from app.models import Facility, Issue, ShiftAssignment, Staff, Task, Team, Zone

# (이름, 위도, 경도, 인원) — demo zones
_ZONES: list[tuple[str, float, float, int]] = [
    ("Main Gate", 25.4358, 81.8463, 120),
    ("Sangam Ghat", 25.4240, 81.8850, 400),
    ("Parking Area B", 25.4410, 81.8320, 30),
]

# (이름, 전화, 이메일, 역할, 부서)
_STAFF: list[tuple[str, str, str, str, str]] = [
    ("Asha Verma", "+91-9000000001", "asha@example.com", "manager", "Sanitation"),
    ("Ravi Kumar", "+91-9000000002", "ravi@example.com", "staff", "Sanitation"),
    ("Neha Singh", "+91-9000000003", "neha@example.com", "staff", "Security"),
    ("Imran Khan", "+91-9000000004", "imran@example.com", "staff", "Water"),
]


def _clock(value: str) -> time:
    hours, minutes = value.split(":")
    return time(int(hours), int(minutes))


async def seed() -> None:
    """데이터베이스를 데모 데이터로 시드합니다."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as db:
        result = await db.execute(select(Zone).limit(1))
        if result.scalar_one_or_none():
            print("Already seeded. Skipping.")
            return

        zones: list[Zone] = [Zone(name=n, lat=lat, lng=lng, headcount=hc) for n, lat, lng, hc in _ZONES]
        db.add_all(zones)
        staff: list[Staff] = [
            Staff(name=n, phone=p, email=e, role=r, department=d, zone=zones[0].name)
            for n, p, e, r, d in _STAFF
        ]
        db.add_all(staff)
        await db.flush()

        team = Team(
            name="Sanitation Alpha",
            leader_id=staff[0].id,
            member_ids=[str(staff[1].id)],
            zone_ids=[str(zones[0].id), str(zones[1].id)],
        )
        db.add(team)
        staff[0].teams = [team.name]
        staff[1].teams = [team.name]

        start, end = _clock(settings.DEFAULT_SHIFT_START), _clock(settings.DEFAULT_SHIFT_END)
        for zone in zones:
            for shift_type in settings.SHIFT_TYPES:
                db.add(ShiftAssignment(zone_id=zone.id, shift_type=shift_type, start_time=start, end_time=end))

        toilet = Facility(code="T-001", type="Toilet", zone_id=zones[1].id, lat=25.4242, lng=81.8852, status="clean")
        db.add_all([
            toilet,
            Facility(code="D-001", type="Dustbin", zone_id=zones[0].id, lat=25.4359, lng=81.8464, status="empty"),
            Facility(code="W-001", type="Water Supply", zone_id=zones[2].id, lat=25.4411, lng=81.8321, status="working"),
        ])
        await db.flush()

        db.add(Task(
            title="Clean T-001",
            description="Morning cleaning round",
            facility_id=toilet.id,
            zone_id=zones[1].id,
            assignee_kind="team",
            assignee_id=team.id,
            priority="High",
            sla_minutes=settings.DEFAULT_TASK_SLA_MINUTES,
        ))
        db.add(Issue(
            facility_ref="T-001",
            zone_ref=zones[1].name,
            category="sanitation",
            severity="high",
            description="Water leakage near entrance",
            reported_by="visitor",
        ))

        await db.commit()
        print(f"Seeded: {len(zones)} zones, {len(staff)} staff, team={team.name}")


if __name__ == "__main__":
    asyncio.run(seed())
