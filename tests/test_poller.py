"""Tests for the retrying background poller."""

from __future__ import annotations

import asyncio

import pytest

from tourguide.application.polling import (
    STATE_FAILED,
    STATE_FETCHING,
    STATE_IDLE,
    RetryingPoller,
)

pytestmark = pytest.mark.anyio


class _Source:
    def __init__(self, *results) -> None:
        self.results = list(results)
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        result = self.results.pop(0) if self.results else self.last
        self.last = result
        if isinstance(result, Exception):
            raise result
        return result


async def _no_sleep(_delay: float) -> None:
    return None


async def test_successful_poll_stores_items() -> None:
    poller = RetryingPoller(_Source(["a", "b"]), sleep=_no_sleep)

    snapshot = await poller.poll()

    assert snapshot.state == STATE_IDLE
    assert snapshot.items == ["a", "b"]
    assert snapshot.degraded is False
    assert snapshot.error is None
    assert snapshot.last_success_at is not None


async def test_failures_are_retried_until_success() -> None:
    source = _Source(RuntimeError("down"), RuntimeError("down"), ["ok"])
    delays: list[float] = []

    async def sleep(delay: float) -> None:
        delays.append(delay)

    poller = RetryingPoller(source, max_retries=3, retry_delay=3.0, sleep=sleep)

    snapshot = await poller.poll()

    assert snapshot.items == ["ok"]
    assert snapshot.retry_count == 2
    assert source.calls == 3
    assert delays == [3.0, 3.0]


async def test_exhausted_retries_degrade_with_empty_items() -> None:
    source = _Source(["stale"], RuntimeError("down"))
    poller = RetryingPoller(source, max_retries=2, sleep=_no_sleep)
    await poller.poll()

    snapshot = await poller.poll()

    assert snapshot.state == STATE_IDLE
    assert snapshot.degraded is True
    assert snapshot.items == []
    assert snapshot.error == "down"
    assert snapshot.retry_count == 2
    assert source.calls == 4


async def test_state_transitions_during_a_failed_fetch() -> None:
    states: list[str] = []

    async def sleep(_delay: float) -> None:
        states.append(poller.state)

    async def fetch():
        states.append(poller.state)
        if len(states) < 3:
            raise RuntimeError("down")
        return []

    poller = RetryingPoller(fetch, max_retries=1, sleep=sleep)

    await poller.poll()

    assert states == [STATE_FETCHING, STATE_FAILED, STATE_FETCHING]
    assert poller.state == STATE_IDLE


async def test_run_refreshes_until_stopped() -> None:
    source = _Source(["a"], ["b"], ["c"])
    poller = RetryingPoller(source, sleep=_no_sleep)

    task = asyncio.create_task(poller.run(0.01))
    for _ in range(100):
        if source.calls >= 2:
            break
        await asyncio.sleep(0.01)
    poller.stop()
    await asyncio.wait_for(task, timeout=1.0)

    assert source.calls >= 2
    assert poller.snapshot().items in (["b"], ["c"])
