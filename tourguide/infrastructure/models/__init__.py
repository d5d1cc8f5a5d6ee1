"""ORM models used by the application infrastructure."""

from .notification import NotificationModel
from .reservation import ReservationModel

__all__ = ["NotificationModel", "ReservationModel"]
