"""Domain entities for admin notices and in-memory feed entries."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

NOTIFICATION_TYPES = (
    "info",
    "success",
    "warning",
    "error",
    "feedback",
    "reservation",
    "payment",
)


@dataclass
class AdminNotice:
    """Notice recorded for the back-office notification table."""

    id: int | None
    title: str
    message: str
    type: str
    target_audience: str = "admin"
    status: str = "sent"
    metadata: dict[str, Any] = field(default_factory=dict)
    is_read: bool = False
    created_at: datetime | None = None
    sent_at: datetime | None = None


@dataclass(frozen=True)
class EmergencyNotification:
    """Entry of the process-local notification feed."""

    id: str
    type: str
    title: str
    message: str
    is_read: bool
    created_at: datetime
    metadata: dict[str, Any] = field(default_factory=dict)
    action_url: str | None = None


__all__ = ["AdminNotice", "EmergencyNotification", "NOTIFICATION_TYPES"]
