"""Run independent data sources concurrently under a shared deadline."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

OUTCOME_OK = "ok"
OUTCOME_FAILED = "failed"
OUTCOME_TIMEOUT = "timeout"

TIMEOUT_ADVISORY = (
    "Algunos datos tardaron demasiado en cargar. Se muestran los datos disponibles."
)
FAILURE_ADVISORY = "Algunos datos no se pudieron cargar. Se muestran valores por defecto."


@dataclass(frozen=True)
class Query:
    """A named data source with the value to use when it is unavailable."""

    name: str
    fetch: Callable[[], Awaitable[Any]]
    default: Any = None


@dataclass(frozen=True)
class QueryOutcome:
    name: str
    status: str
    value: Any
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == OUTCOME_OK


@dataclass
class AggregationResult:
    """Best-effort composite of every query outcome."""

    outcomes: dict[str, QueryOutcome] = field(default_factory=dict)
    timed_out: bool = False
    advisory: str | None = None

    def value(self, name: str) -> Any:
        return self.outcomes[name].value

    @property
    def values(self) -> dict[str, Any]:
        return {name: outcome.value for name, outcome in self.outcomes.items()}

    @property
    def failed_sources(self) -> list[str]:
        return [name for name, outcome in self.outcomes.items() if not outcome.ok]


class TimeoutGuardedAggregator:
    """Start every query at once and stop waiting when the deadline expires.

    Each query settles independently, so one failing source never hides the
    others. Queries still running at the deadline are reported with their
    default value and keep running in the background; their late results are
    discarded.
    """

    def __init__(self, default_deadline: float = 15.0) -> None:
        self.default_deadline = default_deadline
        self._stragglers: set[asyncio.Future[QueryOutcome]] = set()

    async def aggregate(
        self, queries: Sequence[Query], deadline: float | None = None
    ) -> AggregationResult:
        deadline = self.default_deadline if deadline is None else deadline
        names = [query.name for query in queries]
        if len(set(names)) != len(names):
            raise ValueError("Query names must be unique")

        result = AggregationResult()
        if not queries:
            return result

        tasks = {
            asyncio.ensure_future(self._settle(query)): query for query in queries
        }
        done, pending = await asyncio.wait(tasks, timeout=deadline)

        for task, query in tasks.items():
            if task in done:
                result.outcomes[query.name] = task.result()
            else:
                logger.warning(
                    "Query %s did not finish within %.1fs; using default", query.name, deadline
                )
                result.outcomes[query.name] = QueryOutcome(
                    name=query.name,
                    status=OUTCOME_TIMEOUT,
                    value=query.default,
                    error="timeout",
                )

        for task in pending:
            self._stragglers.add(task)
            task.add_done_callback(self._stragglers.discard)

        if pending:
            result.timed_out = True
            result.advisory = TIMEOUT_ADVISORY
        elif result.failed_sources:
            result.advisory = FAILURE_ADVISORY
        return result

    @staticmethod
    async def _settle(query: Query) -> QueryOutcome:
        try:
            value = await query.fetch()
        except Exception as exc:
            logger.warning("Query %s failed: %s", query.name, exc)
            return QueryOutcome(
                name=query.name, status=OUTCOME_FAILED, value=query.default, error=str(exc)
            )
        return QueryOutcome(name=query.name, status=OUTCOME_OK, value=value)


__all__ = [
    "AggregationResult",
    "FAILURE_ADVISORY",
    "OUTCOME_FAILED",
    "OUTCOME_OK",
    "OUTCOME_TIMEOUT",
    "Query",
    "QueryOutcome",
    "TIMEOUT_ADVISORY",
    "TimeoutGuardedAggregator",
]
