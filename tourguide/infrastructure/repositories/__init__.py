"""Repository implementations for infrastructure layer."""

from .notification_repository import AdminNoticeStore, NotificationRepository
from .reservation_repository import ReservationRepository

__all__ = [
    "AdminNoticeStore",
    "NotificationRepository",
    "ReservationRepository",
]
