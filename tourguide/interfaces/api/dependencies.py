"""FastAPI dependency utilities."""

from collections.abc import Callable

from fastapi import Request
from sqlalchemy.orm import Session
from starlette.requests import HTTPConnection

from tourguide.application.aggregation import TimeoutGuardedAggregator
from tourguide.application.polling import RetryingPoller
from tourguide.application.use_cases.notifications import ReservationEventOrchestrator
from tourguide.config import Settings
from tourguide.domain.entities import AdminNotice
from tourguide.infrastructure.notifications import EmergencyFeed, FeedConnectionManager


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_orchestrator(request: Request) -> ReservationEventOrchestrator:
    """Return the orchestrator created during application start-up."""

    return request.app.state.orchestrator


def get_emergency_feed(connection: HTTPConnection) -> EmergencyFeed:
    return connection.app.state.emergency_feed


def get_feed_connections(connection: HTTPConnection) -> FeedConnectionManager:
    return connection.app.state.feed_connections


def get_session_factory(request: Request) -> Callable[[], Session]:
    return request.app.state.session_factory


def get_aggregator(request: Request) -> TimeoutGuardedAggregator:
    return request.app.state.aggregator


def get_admin_notice_poller(request: Request) -> RetryingPoller[AdminNotice]:
    return request.app.state.admin_notice_poller


__all__ = [
    "get_admin_notice_poller",
    "get_aggregator",
    "get_app_settings",
    "get_emergency_feed",
    "get_feed_connections",
    "get_orchestrator",
    "get_session_factory",
]
