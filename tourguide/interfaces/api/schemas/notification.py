"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EmergencyNotificationRead(BaseModel):
    """Entry of the in-memory notification feed."""

    id: str
    type: str
    title: str
    message: str
    is_read: bool
    created_at: datetime
    metadata: dict[str, Any] = Field(default_factory=dict)
    action_url: str | None = None

    model_config = ConfigDict(from_attributes=True)


class EmergencyFeedRead(BaseModel):
    items: list[EmergencyNotificationRead]
    unread: int = Field(..., description="Cantidad de entradas sin leer")


class AdminNoticeRead(BaseModel):
    """Notice stored for the back-office team."""

    id: int
    title: str
    message: str
    type: str
    target_audience: str
    status: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    is_read: bool
    created_at: datetime | None = None
    sent_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class AdminNoticeFeedRead(BaseModel):
    """Latest snapshot of the admin notice poller."""

    state: str
    items: list[AdminNoticeRead]
    error: str | None = None
    retry_count: int = 0
    degraded: bool = False
    last_success_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


__all__ = [
    "AdminNoticeFeedRead",
    "AdminNoticeRead",
    "EmergencyFeedRead",
    "EmergencyNotificationRead",
]
