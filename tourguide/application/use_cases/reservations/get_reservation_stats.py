"""Use case for counting reservations per status."""

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from tourguide.infrastructure.repositories import ReservationRepository

logger = logging.getLogger(__name__)


@dataclass
class ReservationStats:
    total: int = 0
    pending: int = 0
    confirmed: int = 0
    cancelled: int = 0
    completed: int = 0


def stats_from_counts(counts: dict[str, int]) -> ReservationStats:
    return ReservationStats(
        total=sum(counts.values()),
        pending=counts.get("pending", 0),
        confirmed=counts.get("confirmed", 0),
        cancelled=counts.get("cancelled", 0),
        completed=counts.get("completed", 0),
    )


def get_reservation_stats(session: Session) -> ReservationStats:
    """Return reservation counts, or zeros when the store is unavailable."""

    try:
        counts = ReservationRepository(session).count_by_status()
    except Exception as exc:
        logger.warning("Could not load reservation stats: %s", exc)
        return ReservationStats()
    return stats_from_counts(counts)
