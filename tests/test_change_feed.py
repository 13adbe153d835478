"""변경 피드 테스트 — 구독/발행/드롭, SSE 스트림.

Change feed tests: subscription lifecycle, publish-after-commit,
dropping slow subscribers, and the SSE event format.
"""

import asyncio
import json

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.services.change_feed import ChangeFeed, SubscriptionClosed, change_feed
from app.services.issue_service import banner_from_snapshot
from app.utils.exceptions import NotFoundError
from tests.conftest import ADMIN, PUBLIC


def _feed(queue_size: int = 2) -> ChangeFeed:
    feed = ChangeFeed(queue_size=queue_size)
    counter = {"n": 0}

    async def loader(db):
        counter["n"] += 1
        return [{"version": counter["n"]}]

    feed.register("things", loader)
    return feed


class TestChangeFeed:

    def test_unknown_collection(self):
        with pytest.raises(NotFoundError) as exc_info:
            _feed().subscribe("nope")
        assert "available: things" in exc_info.value.detail

    async def test_publish_without_subscribers_skips_loader(self):
        feed = _feed()
        assert await feed.publish(None, "things") == 0
        snapshot = await feed.snapshot(None, "things")
        # 로더는 snapshot()에서 처음 호출됨 — loader ran once, here
        assert snapshot["items"] == [{"version": 1}]

    async def test_subscriber_receives_snapshot(self):
        feed = _feed()
        async with feed.subscribe("things") as sub:
            assert await feed.publish(None, "things") == 1
            snapshot = await sub.next()
            assert snapshot["collection"] == "things"
            assert snapshot["items"] == [{"version": 1}]
        assert feed.subscriber_count("things") == 0

    async def test_full_queue_drops_subscriber(self):
        feed = _feed(queue_size=1)
        slow = feed.subscribe("things")
        await feed.publish(None, "things")
        delivered = await feed.publish(None, "things")
        assert delivered == 0
        assert not slow.active
        assert feed.subscriber_count("things") == 0
        # 큐에 남은 스냅샷은 소비 가능, 이후 종료 — drain then closed
        assert (await slow.next())["items"] == [{"version": 1}]
        with pytest.raises(SubscriptionClosed):
            await slow.next()

    async def test_cancel_wakes_pending_next(self):
        feed = _feed()
        sub = feed.subscribe("things")
        waiter = asyncio.create_task(sub.next())
        await asyncio.sleep(0)
        sub.cancel()
        with pytest.raises(SubscriptionClosed):
            await waiter

    def test_banner_from_snapshot(self):
        snapshot = {
            "published_at": "now",
            "items": [{"is_active_emergency": True}, {"is_active_emergency": False}, {"is_active_emergency": True}],
        }
        assert banner_from_snapshot(snapshot) == {"emergency_count": 2, "published_at": "now"}


class TestPublishAfterWrite:
    """API 쓰기 후 구독자에게 전체 스냅샷이 전달됨."""

    async def test_issue_report_publishes_issues_snapshot(self, client: AsyncClient, db: AsyncSession):
        sub = change_feed.subscribe("issues")
        try:
            res = await client.post(f"{PUBLIC}/issues", json={
                "description": "Overflowing bin", "severity": "emergency",
            })
            assert res.status_code == 201
            snapshot = await asyncio.wait_for(sub.next(), timeout=1)
            assert len(snapshot["items"]) == 1
            assert snapshot["items"][0]["is_active_emergency"] is True
            assert banner_from_snapshot(snapshot)["emergency_count"] == 1
        finally:
            sub.cancel()

    async def test_zone_write_publishes(self, client: AsyncClient):
        async with change_feed.subscribe("zones") as sub:
            await client.post(f"{ADMIN}/zones", json={"name": "East"})
            snapshot = await asyncio.wait_for(sub.next(), timeout=1)
            assert [z["name"] for z in snapshot["items"]] == ["East"]


class TestEventStream:

    async def test_unknown_collection_404(self, client: AsyncClient):
        res = await client.get(f"{ADMIN}/events/unknown")
        assert res.status_code == 404

    async def test_stream_emits_initial_then_updates(self):
        from app.api.admin.events import _stream

        feed = _feed(queue_size=5)
        sub = feed.subscribe("things")
        initial = await feed.snapshot(None, "things")
        stream = _stream(sub, initial, "things", lambda snapshot: snapshot)

        first = await stream.__anext__()
        assert first.startswith("event: things\ndata: ")
        assert json.loads(first.split("data: ", 1)[1])["items"] == [{"version": 1}]

        await feed.publish(None, "things")
        second = await stream.__anext__()
        assert json.loads(second.split("data: ", 1)[1])["items"] == [{"version": 2}]

        await stream.aclose()
        assert not sub.active
