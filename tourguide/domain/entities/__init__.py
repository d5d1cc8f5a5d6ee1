"""Domain entities exposed by the application."""

from .delivery import (
    MESSAGE_KIND_ADMIN_NOTICE,
    MESSAGE_KIND_CONFIRMATION,
    MESSAGE_KIND_PAYMENT_LINK,
    MESSAGE_KINDS,
    ChannelResult,
    DeliveryMessage,
    DeliveryOutcome,
)
from .notification import NOTIFICATION_TYPES, AdminNotice, EmergencyNotification
from .reservation import (
    PAYMENT_STATUS_FAILED,
    PAYMENT_STATUS_PAID,
    PAYMENT_STATUS_PENDING,
    PAYMENT_STATUSES,
    RESERVATION_STATUS_CANCELLED,
    RESERVATION_STATUS_COMPLETED,
    RESERVATION_STATUS_CONFIRMED,
    RESERVATION_STATUS_PENDING,
    RESERVATION_STATUSES,
    Reservation,
)

__all__ = [
    "AdminNotice",
    "ChannelResult",
    "DeliveryMessage",
    "DeliveryOutcome",
    "EmergencyNotification",
    "MESSAGE_KIND_ADMIN_NOTICE",
    "MESSAGE_KIND_CONFIRMATION",
    "MESSAGE_KIND_PAYMENT_LINK",
    "MESSAGE_KINDS",
    "NOTIFICATION_TYPES",
    "PAYMENT_STATUS_FAILED",
    "PAYMENT_STATUS_PAID",
    "PAYMENT_STATUS_PENDING",
    "PAYMENT_STATUSES",
    "RESERVATION_STATUS_CANCELLED",
    "RESERVATION_STATUS_COMPLETED",
    "RESERVATION_STATUS_CONFIRMED",
    "RESERVATION_STATUS_PENDING",
    "RESERVATION_STATUSES",
    "Reservation",
]
