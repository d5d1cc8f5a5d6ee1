"""Reservation use cases."""

from .create_reservation import create_reservation
from .get_reservation import get_reservation
from .get_reservation_stats import ReservationStats, get_reservation_stats
from .list_reservations import ReservationPage, list_reservations
from .update_reservation import update_reservation

__all__ = [
    "ReservationPage",
    "ReservationStats",
    "create_reservation",
    "get_reservation",
    "get_reservation_stats",
    "list_reservations",
    "update_reservation",
]
