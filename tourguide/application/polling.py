"""Background refresh of a remote list with bounded retries."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Generic, TypeVar

from tourguide.utils import now_in_app_timezone

logger = logging.getLogger(__name__)

T = TypeVar("T")

STATE_IDLE = "idle"
STATE_FETCHING = "fetching"
STATE_FAILED = "failed"


@dataclass(frozen=True)
class PollerSnapshot(Generic[T]):
    state: str
    items: list[T] = field(default_factory=list)
    error: str | None = None
    retry_count: int = 0
    degraded: bool = False
    last_success_at: datetime | None = None


class RetryingPoller(Generic[T]):
    """Fetch a list periodically, retrying failed fetches a bounded number of times.

    A cycle starts in ``fetching``. A failure moves the poller to ``failed``
    and, after ``retry_delay`` seconds, to ``fetching`` again. Once
    ``max_retries`` retries have failed the poller settles in ``idle`` with
    ``degraded=True`` and an empty item list until the next cycle succeeds.
    """

    def __init__(
        self,
        fetch: Callable[[], Awaitable[Sequence[T]]],
        *,
        name: str = "poller",
        max_retries: int = 3,
        retry_delay: float = 3.0,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._fetch = fetch
        self.name = name
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._sleep = sleep
        self._state = STATE_IDLE
        self._items: list[T] = []
        self._error: str | None = None
        self._retry_count = 0
        self._degraded = False
        self._last_success_at: datetime | None = None
        self._stop_event = asyncio.Event()

    @property
    def state(self) -> str:
        return self._state

    def snapshot(self) -> PollerSnapshot[T]:
        return PollerSnapshot(
            state=self._state,
            items=list(self._items),
            error=self._error,
            retry_count=self._retry_count,
            degraded=self._degraded,
            last_success_at=self._last_success_at,
        )

    async def poll(self) -> PollerSnapshot[T]:
        """Run one full fetch cycle including its retries."""

        self._retry_count = 0
        while True:
            self._state = STATE_FETCHING
            try:
                items = await self._fetch()
            except Exception as exc:
                self._state = STATE_FAILED
                self._error = str(exc) or exc.__class__.__name__
                if self._retry_count >= self.max_retries:
                    logger.error(
                        "%s gave up after %s retries: %s",
                        self.name,
                        self._retry_count,
                        self._error,
                    )
                    self._items = []
                    self._degraded = True
                    self._state = STATE_IDLE
                    return self.snapshot()
                self._retry_count += 1
                logger.warning(
                    "%s fetch failed (%s); retry %s/%s in %.1fs",
                    self.name,
                    self._error,
                    self._retry_count,
                    self.max_retries,
                    self.retry_delay,
                )
                await self._sleep(self.retry_delay)
                continue

            self._items = list(items)
            self._error = None
            self._degraded = False
            self._last_success_at = now_in_app_timezone()
            self._state = STATE_IDLE
            return self.snapshot()

    async def run(self, interval: float) -> None:
        """Keep polling every ``interval`` seconds until :meth:`stop` is called."""

        self._stop_event.clear()
        while not self._stop_event.is_set():
            await self.poll()
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=interval)
            except asyncio.TimeoutError:
                continue
        logger.info("%s stopped", self.name)

    def stop(self) -> None:
        self._stop_event.set()


__all__ = [
    "PollerSnapshot",
    "RetryingPoller",
    "STATE_FAILED",
    "STATE_FETCHING",
    "STATE_IDLE",
]
