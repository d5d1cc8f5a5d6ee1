"""Pydantic schemas used by the API routes."""

from .dashboard import (
    CountSummaryRead,
    DashboardReportRead,
    DashboardStatsRead,
    PaymentSummaryRead,
)
from .notification import (
    AdminNoticeFeedRead,
    AdminNoticeRead,
    EmergencyFeedRead,
    EmergencyNotificationRead,
)
from .reservation import (
    ReservationCreate,
    ReservationPageRead,
    ReservationRead,
    ReservationStatsRead,
    ReservationUpdate,
)

__all__ = [
    "AdminNoticeFeedRead",
    "AdminNoticeRead",
    "CountSummaryRead",
    "DashboardReportRead",
    "DashboardStatsRead",
    "EmergencyFeedRead",
    "EmergencyNotificationRead",
    "PaymentSummaryRead",
    "ReservationCreate",
    "ReservationPageRead",
    "ReservationRead",
    "ReservationStatsRead",
    "ReservationUpdate",
]
