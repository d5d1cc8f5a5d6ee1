"""Push emergency feed changes to websocket subscribers."""

from __future__ import annotations

import asyncio
from typing import Any, Callable

from tourguide.domain.entities import EmergencyNotification
from tourguide.utils import isoformat_or_none

from .emergency_feed import EmergencyFeed
from .manager import FeedConnectionManager
from .tasks import BackgroundTaskRunner, NoEventLoopError


def serialize_feed_entry(entry: EmergencyNotification) -> dict[str, Any]:
    """Return the JSON representation of a feed entry."""

    return {
        "id": entry.id,
        "type": entry.type,
        "title": entry.title,
        "message": entry.message,
        "is_read": entry.is_read,
        "created_at": isoformat_or_none(entry.created_at),
        "metadata": dict(entry.metadata),
        "action_url": entry.action_url,
    }


def serialize_feed(entries: list[EmergencyNotification]) -> dict[str, Any]:
    return {
        "type": "emergency_feed",
        "data": {
            "items": [serialize_feed_entry(entry) for entry in entries],
            "unread": sum(1 for entry in entries if not entry.is_read),
        },
    }


class FeedBroadcaster:
    """Forward every feed change to the connected websockets.

    Broadcasts run one at a time and always send the list as it is when the
    send starts, so every socket ends on the latest state even when an
    earlier send to a slow client finishes last.
    """

    def __init__(
        self,
        feed: EmergencyFeed,
        manager: FeedConnectionManager,
        runner: BackgroundTaskRunner,
    ) -> None:
        self._feed = feed
        self._manager = manager
        self._runner = runner
        self._send_lock = asyncio.Lock()
        self._unsubscribe: Callable[[], None] | None = None

    def start(self) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = self._feed.subscribe(self._on_change)

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_change(self, entries: list[EmergencyNotification]) -> None:
        if not self._manager.active:
            return
        try:
            self._runner.spawn(self._broadcast_current, name="feed-broadcast")
        except NoEventLoopError:
            # No loop means no websocket can be connected either.
            return

    async def _broadcast_current(self) -> None:
        async with self._send_lock:
            await self._manager.broadcast(serialize_feed(self._feed.list()))


__all__ = [
    "FeedBroadcaster",
    "serialize_feed",
    "serialize_feed_entry",
]
