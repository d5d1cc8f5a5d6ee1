"""Aggregate application use cases."""

from .dashboard import build_dashboard_queries, get_dashboard_stats
from .notifications import ReservationEventOrchestrator
from .reservations import (
    create_reservation,
    get_reservation,
    get_reservation_stats,
    list_reservations,
    update_reservation,
)

__all__ = [
    "ReservationEventOrchestrator",
    "build_dashboard_queries",
    "create_reservation",
    "get_dashboard_stats",
    "get_reservation",
    "get_reservation_stats",
    "list_reservations",
    "update_reservation",
]
