"""Tests for the deadline-bounded parallel aggregator."""

from __future__ import annotations

import asyncio

import pytest

from tourguide.application.aggregation import (
    OUTCOME_FAILED,
    OUTCOME_OK,
    OUTCOME_TIMEOUT,
    TIMEOUT_ADVISORY,
    Query,
    TimeoutGuardedAggregator,
)

pytestmark = pytest.mark.anyio


def _value(value, delay: float = 0.0):
    async def fetch():
        if delay:
            await asyncio.sleep(delay)
        return value

    return fetch


def _failing(message: str):
    async def fetch():
        raise RuntimeError(message)

    return fetch


async def test_all_queries_resolve() -> None:
    result = await TimeoutGuardedAggregator().aggregate(
        [Query("a", _value(1), 0), Query("b", _value(2), 0)], deadline=1.0
    )

    assert result.values == {"a": 1, "b": 2}
    assert result.timed_out is False
    assert result.advisory is None
    assert result.failed_sources == []


async def test_failing_query_uses_default() -> None:
    result = await TimeoutGuardedAggregator().aggregate(
        [
            Query("a", _value(1), 0),
            Query("b", _failing("boom"), -1),
            Query("c", _value(3), 0),
        ],
        deadline=1.0,
    )

    assert result.timed_out is False
    assert result.values == {"a": 1, "b": -1, "c": 3}
    assert result.outcomes["b"].status == OUTCOME_FAILED
    assert result.outcomes["b"].error == "boom"
    assert result.failed_sources == ["b"]
    assert result.advisory is not None


async def test_deadline_returns_partial_results() -> None:
    slow_finished = asyncio.Event()

    async def slow():
        await asyncio.sleep(0.3)
        slow_finished.set()
        return "late"

    result = await TimeoutGuardedAggregator().aggregate(
        [Query("fast", _value("ok"), None), Query("slow", slow, "default")],
        deadline=0.05,
    )

    assert result.timed_out is True
    assert result.advisory == TIMEOUT_ADVISORY
    assert result.outcomes["fast"].status == OUTCOME_OK
    assert result.outcomes["slow"].status == OUTCOME_TIMEOUT
    assert result.value("slow") == "default"
    assert result.failed_sources == ["slow"]

    # Late queries keep running after the deadline.
    await asyncio.wait_for(slow_finished.wait(), timeout=1.0)
    assert result.value("slow") == "default"


async def test_queries_run_concurrently() -> None:
    loop = asyncio.get_running_loop()
    started = loop.time()

    result = await TimeoutGuardedAggregator().aggregate(
        [Query(name, _value(name, 0.1), None) for name in ("a", "b", "c")],
        deadline=1.0,
    )

    assert result.timed_out is False
    assert loop.time() - started < 0.25


async def test_default_deadline_is_used() -> None:
    aggregator = TimeoutGuardedAggregator(default_deadline=0.01)

    result = await aggregator.aggregate([Query("slow", _value(1, 0.2), 0)])

    assert result.timed_out is True
    await asyncio.sleep(0.25)


async def test_empty_query_list() -> None:
    result = await TimeoutGuardedAggregator().aggregate([], deadline=1.0)

    assert result.outcomes == {}
    assert result.timed_out is False


async def test_duplicate_names_are_rejected() -> None:
    with pytest.raises(ValueError):
        await TimeoutGuardedAggregator().aggregate(
            [Query("a", _value(1)), Query("a", _value(2))], deadline=1.0
        )
