"""Use case for building the administrative dashboard statistics."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, TypeVar

from anyio import to_thread
from sqlalchemy.orm import Session

from tourguide.application.aggregation import Query, TimeoutGuardedAggregator
from tourguide.domain.entities import (
    PAYMENT_STATUS_FAILED,
    PAYMENT_STATUS_PAID,
    PAYMENT_STATUS_PENDING,
    Reservation,
)
from tourguide.infrastructure.notifications import EmergencyFeed
from tourguide.infrastructure.repositories import (
    NotificationRepository,
    ReservationRepository,
)

from .reservations.get_reservation_stats import ReservationStats, stats_from_counts

T = TypeVar("T")

SessionFactory = Callable[[], Session]


@dataclass
class PaymentSummary:
    """Payment status counts and the revenue of paid reservations."""

    paid: int = 0
    pending: int = 0
    failed: int = 0
    confirmed_revenue: float = 0.0


@dataclass
class NoticeSummary:
    total: int = 0
    unread: int = 0


@dataclass
class FeedSummary:
    total: int = 0
    unread: int = 0


@dataclass
class DashboardStats:
    """Composite statistics shown on the dashboard."""

    reservations: ReservationStats = field(default_factory=ReservationStats)
    payments: PaymentSummary = field(default_factory=PaymentSummary)
    notices: NoticeSummary = field(default_factory=NoticeSummary)
    recent_reservations: Sequence[Reservation] = field(default_factory=list)
    feed: FeedSummary = field(default_factory=FeedSummary)


@dataclass
class DashboardReport:
    """Dashboard statistics together with the loading state of their sources."""

    stats: DashboardStats
    loading: bool = False
    error: str | None = None
    timed_out: bool = False
    failed_sources: list[str] = field(default_factory=list)


def _with_session(session_factory: SessionFactory, work: Callable[[Session], T]) -> T:
    session = session_factory()
    try:
        return work(session)
    finally:
        session.close()


def _reservation_counts(session: Session) -> ReservationStats:
    return stats_from_counts(ReservationRepository(session).count_by_status())


def _payment_summary(session: Session) -> PaymentSummary:
    repository = ReservationRepository(session)
    counts = repository.count_by_payment_status()
    return PaymentSummary(
        paid=counts.get(PAYMENT_STATUS_PAID, 0),
        pending=counts.get(PAYMENT_STATUS_PENDING, 0),
        failed=counts.get(PAYMENT_STATUS_FAILED, 0),
        confirmed_revenue=repository.paid_revenue(),
    )


def _notice_summary(session: Session) -> NoticeSummary:
    total, unread = NotificationRepository(session).count_for_audience("admin")
    return NoticeSummary(total=total, unread=unread)


def _recent_reservations(session: Session) -> Sequence[Reservation]:
    return ReservationRepository(session).list_recent(limit=5)


def build_dashboard_queries(
    session_factory: SessionFactory, feed: EmergencyFeed
) -> list[Query]:
    """Return the independent data sources behind the dashboard."""

    def db_query(name: str, work: Callable[[Session], Any], default: Any) -> Query:
        async def fetch() -> Any:
            return await to_thread.run_sync(_with_session, session_factory, work)

        return Query(name=name, fetch=fetch, default=default)

    async def feed_summary() -> FeedSummary:
        return FeedSummary(total=len(feed.list()), unread=feed.unread_count())

    return [
        db_query("reservations", _reservation_counts, ReservationStats()),
        db_query("payments", _payment_summary, PaymentSummary()),
        db_query("notices", _notice_summary, NoticeSummary()),
        db_query("recent_reservations", _recent_reservations, []),
        Query(name="feed", fetch=feed_summary, default=FeedSummary()),
    ]


async def get_dashboard_stats(
    *,
    aggregator: TimeoutGuardedAggregator,
    queries: Sequence[Query],
    deadline: float | None = None,
) -> DashboardReport:
    """Run every dashboard source and return whatever finished in time."""

    result = await aggregator.aggregate(queries, deadline)
    values = result.values
    stats = DashboardStats(
        reservations=values.get("reservations", ReservationStats()),
        payments=values.get("payments", PaymentSummary()),
        notices=values.get("notices", NoticeSummary()),
        recent_reservations=values.get("recent_reservations", []),
        feed=values.get("feed", FeedSummary()),
    )
    return DashboardReport(
        stats=stats,
        loading=False,
        error=result.advisory,
        timed_out=result.timed_out,
        failed_sources=result.failed_sources,
    )


__all__ = [
    "DashboardReport",
    "DashboardStats",
    "FeedSummary",
    "NoticeSummary",
    "PaymentSummary",
    "build_dashboard_queries",
    "get_dashboard_stats",
]
