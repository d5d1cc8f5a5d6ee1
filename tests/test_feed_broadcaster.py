"""Tests for pushing feed changes to websocket clients."""

from __future__ import annotations

import asyncio

import pytest

from tourguide.infrastructure.notifications import (
    BackgroundTaskRunner,
    EmergencyFeed,
    FeedBroadcaster,
    FeedConnectionManager,
)

pytestmark = pytest.mark.anyio


class _Socket:
    def __init__(self, first_send_delay: float = 0.0) -> None:
        self.first_send_delay = first_send_delay
        self.sent: list[dict] = []

    async def accept(self) -> None:
        return None

    async def send_json(self, message: dict) -> None:
        if self.first_send_delay:
            delay, self.first_send_delay = self.first_send_delay, 0.0
            await asyncio.sleep(delay)
        self.sent.append(message)


def _titles(message: dict) -> list[str]:
    return [item["title"] for item in message["data"]["items"]]


async def test_every_socket_ends_on_latest_state_when_one_is_slow() -> None:
    runner = BackgroundTaskRunner()
    runner.bind()
    feed = EmergencyFeed(seed=False)
    manager = FeedConnectionManager()
    slow, fast = _Socket(first_send_delay=0.05), _Socket()
    await manager.connect(slow)
    await manager.connect(fast)
    FeedBroadcaster(feed, manager, runner).start()

    feed.publish("info", "first", "uno")
    await asyncio.sleep(0)
    feed.publish("info", "second", "dos")
    await runner.drain(timeout=2.0)

    assert _titles(fast.sent[-1]) == ["second", "first"]
    assert _titles(slow.sent[-1]) == ["second", "first"]


async def test_no_broadcast_without_connections() -> None:
    runner = BackgroundTaskRunner()
    runner.bind()
    feed = EmergencyFeed(seed=False)
    FeedBroadcaster(feed, FeedConnectionManager(), runner).start()

    feed.publish("info", "first", "uno")

    assert runner.pending == 0


async def test_stopped_broadcaster_ignores_changes() -> None:
    runner = BackgroundTaskRunner()
    runner.bind()
    feed = EmergencyFeed(seed=False)
    manager = FeedConnectionManager()
    socket = _Socket()
    await manager.connect(socket)
    broadcaster = FeedBroadcaster(feed, manager, runner)
    broadcaster.start()
    broadcaster.stop()

    feed.publish("info", "first", "uno")
    await runner.drain(timeout=1.0)

    assert socket.sent == []
