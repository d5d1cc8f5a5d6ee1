"""Domain entity representing a customer reservation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

RESERVATION_STATUS_PENDING = "pending"
RESERVATION_STATUS_CONFIRMED = "confirmed"
RESERVATION_STATUS_CANCELLED = "cancelled"
RESERVATION_STATUS_COMPLETED = "completed"

RESERVATION_STATUSES = (
    RESERVATION_STATUS_PENDING,
    RESERVATION_STATUS_CONFIRMED,
    RESERVATION_STATUS_CANCELLED,
    RESERVATION_STATUS_COMPLETED,
)

PAYMENT_STATUS_PENDING = "pending"
PAYMENT_STATUS_PAID = "paid"
PAYMENT_STATUS_FAILED = "failed"

PAYMENT_STATUSES = (
    PAYMENT_STATUS_PENDING,
    PAYMENT_STATUS_PAID,
    PAYMENT_STATUS_FAILED,
)


@dataclass
class Reservation:
    """Booking of a tour or service made by a visitor."""

    id: str
    service_id: str | None
    service_name: str
    service_type: str
    full_name: str
    email: str
    phone: str | None
    participants: int
    reservation_date: str
    reservation_time: str | None
    special_requests: str | None = None
    admin_notes: str | None = None
    status: str = RESERVATION_STATUS_PENDING
    payment_status: str = PAYMENT_STATUS_PENDING
    price: float | None = None
    payment_link: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def total_amount(self) -> float:
        """Price per person multiplied by the number of participants."""

        return float(self.price or 0) * self.participants


__all__ = [
    "Reservation",
    "RESERVATION_STATUS_PENDING",
    "RESERVATION_STATUS_CONFIRMED",
    "RESERVATION_STATUS_CANCELLED",
    "RESERVATION_STATUS_COMPLETED",
    "RESERVATION_STATUSES",
    "PAYMENT_STATUS_PENDING",
    "PAYMENT_STATUS_PAID",
    "PAYMENT_STATUS_FAILED",
    "PAYMENT_STATUSES",
]
