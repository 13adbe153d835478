"""변경 피드 서비스 — 컬렉션 스냅샷 구독/발행.

Change feed — in-process push of full-collection snapshots.

After a write commits, the router calls ``publish(db, collection)``; the
feed loads the whole collection through the loader registered for it and
pushes one snapshot to every subscriber of that collection. Subscribers
hold a bounded queue; a subscriber whose queue is full is dropped
(cancelled) instead of blocking the publisher. Nothing is retried.

Usage:
    sub = change_feed.subscribe("issues")
    async with sub:
        snapshot = await sub.next()
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.utils.exceptions import NotFoundError

logger = logging.getLogger(__name__)

SnapshotLoader = Callable[[AsyncSession], Awaitable[list[dict[str, Any]]]]


class SubscriptionClosed(Exception):
    """구독이 취소되었거나 드롭됨 (Subscription cancelled or dropped)."""


class Subscription:
    """단일 컬렉션 구독 핸들 — 반드시 cancel()로 해제해야 합니다.

    Explicit subscription handle. Also usable as an async context manager,
    which cancels on exit.
    """

    def __init__(self, feed: "ChangeFeed", collection: str, maxsize: int) -> None:
        self.collection: str = collection
        self._feed: ChangeFeed = feed
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self.active: bool = True

    def offer(self, snapshot: dict[str, Any]) -> bool:
        """스냅샷을 큐에 넣습니다. 큐가 가득 차면 False."""
        try:
            self._queue.put_nowait(snapshot)
        except asyncio.QueueFull:
            return False
        return True

    async def next(self) -> dict[str, Any]:
        """다음 스냅샷을 기다립니다.

        Raises:
            SubscriptionClosed: 취소 후 큐가 비었을 때 (Cancelled and drained)
        """
        if not self.active and self._queue.empty():
            raise SubscriptionClosed(self.collection)
        snapshot: dict[str, Any] | None = await self._queue.get()
        if snapshot is None:
            raise SubscriptionClosed(self.collection)
        return snapshot

    def cancel(self) -> None:
        if not self.active:
            return
        self.active = False
        self._feed._remove(self)
        # 대기 중인 next()를 깨움 — wake a pending next()
        try:
            self._queue.put_nowait(None)
        except asyncio.QueueFull:
            pass

    async def __aenter__(self) -> "Subscription":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.cancel()


class ChangeFeed:
    """컬렉션별 스냅샷 로더 레지스트리와 구독자 집합."""

    def __init__(self, queue_size: int | None = None) -> None:
        self._loaders: dict[str, SnapshotLoader] = {}
        self._subscribers: dict[str, set[Subscription]] = {}
        self._queue_size: int = queue_size or settings.CHANGE_FEED_QUEUE_SIZE

    def register(self, collection: str, loader: SnapshotLoader) -> None:
        self._loaders[collection] = loader

    @property
    def collections(self) -> list[str]:
        return sorted(self._loaders)

    def _ensure_known(self, collection: str) -> None:
        if collection not in self._loaders:
            raise NotFoundError(
                f"알 수 없는 컬렉션입니다 (Unknown collection: {collection}; "
                f"available: {', '.join(self.collections)})"
            )

    def subscribe(self, collection: str) -> Subscription:
        """컬렉션을 구독합니다.

        Raises:
            NotFoundError: 등록되지 않은 컬렉션 (Unknown collection)
        """
        self._ensure_known(collection)
        sub = Subscription(self, collection, self._queue_size)
        self._subscribers.setdefault(collection, set()).add(sub)
        return sub

    def _remove(self, sub: Subscription) -> None:
        self._subscribers.get(sub.collection, set()).discard(sub)

    def subscriber_count(self, collection: str) -> int:
        return len(self._subscribers.get(collection, ()))

    async def snapshot(self, db: AsyncSession, collection: str) -> dict[str, Any]:
        """현재 컬렉션 전체 스냅샷을 만듭니다 (Full snapshot of a collection)."""
        self._ensure_known(collection)
        items: list[dict[str, Any]] = await self._loaders[collection](db)
        return {
            "collection": collection,
            "items": items,
            "published_at": datetime.now(timezone.utc).isoformat(),
        }

    async def publish(self, db: AsyncSession, collection: str) -> int:
        """커밋 이후 호출 — 구독자에게 스냅샷을 전달합니다.

        Push a fresh snapshot to every subscriber of ``collection``. Does
        nothing when nobody is subscribed. Subscribers with a full queue
        are dropped.

        Returns:
            int: 스냅샷을 받은 구독자 수 (Subscribers that received it)
        """
        subscribers: set[Subscription] = self._subscribers.get(collection, set())
        if not subscribers:
            return 0

        snapshot: dict[str, Any] = await self.snapshot(db, collection)
        delivered: int = 0
        for sub in list(subscribers):
            if sub.offer(snapshot):
                delivered += 1
            else:
                logger.warning("Change feed queue full, dropping %s subscriber", collection)
                sub.cancel()
        return delivered


change_feed: ChangeFeed = ChangeFeed()
