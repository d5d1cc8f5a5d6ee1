"""Fire-and-forget scheduling of coroutines on the application event loop."""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Awaitable, Callable
from concurrent.futures import Future
from typing import Any

logger = logging.getLogger(__name__)

CoroutineFactory = Callable[[], Awaitable[Any]]


class NoEventLoopError(RuntimeError):
    """Raised when a task is spawned before the runner is bound to a loop."""


class BackgroundTaskRunner:
    """Schedule coroutines without making the caller wait for them.

    The runner is bound to the application loop during start-up. Calls made on
    the loop thread use ``loop.create_task``; calls made from worker threads
    (sync FastAPI routes run there) hand the coroutine over with
    ``asyncio.run_coroutine_threadsafe``. Strong references are kept until
    each task finishes and failures are logged.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop
        self._lock = threading.Lock()
        self._pending: set[asyncio.Future[Any] | Future[Any]] = set()

    @property
    def bound(self) -> bool:
        return self._loop is not None and not self._loop.is_closed()

    def bind(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        """Attach the runner to ``loop`` (or the running loop)."""

        self._loop = loop or asyncio.get_running_loop()

    def spawn(self, factory: CoroutineFactory, *, name: str) -> None:
        """Start ``factory()`` in the background.

        :raises NoEventLoopError: when no loop is available to run the task.
        """

        loop = self._loop
        if loop is None or loop.is_closed():
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                raise NoEventLoopError(f"No event loop available to run {name}") from None

        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is loop:
            future: asyncio.Future[Any] | Future[Any] = loop.create_task(
                self._guard(factory, name), name=name
            )
        else:
            future = asyncio.run_coroutine_threadsafe(self._guard(factory, name), loop)

        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._discard)

    def _discard(self, future: asyncio.Future[Any] | Future[Any]) -> None:
        with self._lock:
            self._pending.discard(future)

    @staticmethod
    async def _guard(factory: CoroutineFactory, name: str) -> None:
        try:
            await factory()
        except asyncio.CancelledError:
            logger.info("Background task %s cancelled", name)
            raise
        except Exception:
            logger.exception("Background task %s failed", name)

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._pending)

    async def drain(self, timeout: float | None = None) -> None:
        """Wait for tasks started on the bound loop to finish."""

        with self._lock:
            tasks = [
                future for future in self._pending if isinstance(future, asyncio.Future)
            ]
            threadsafe = [
                future for future in self._pending if not isinstance(future, asyncio.Future)
            ]
        awaitables = tasks + [asyncio.wrap_future(future) for future in threadsafe]
        if not awaitables:
            return
        done, pending = await asyncio.wait(awaitables, timeout=timeout)
        if pending:
            logger.warning("%s background tasks still running after drain", len(pending))

    async def close(self, timeout: float | None = 5.0) -> None:
        await self.drain(timeout)
        self._loop = None


__all__ = ["BackgroundTaskRunner", "CoroutineFactory", "NoEventLoopError"]
