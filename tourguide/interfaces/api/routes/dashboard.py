"""Rutas para obtener las estadísticas del panel administrativo."""

from collections.abc import Callable

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tourguide.application.aggregation import TimeoutGuardedAggregator
from tourguide.application.use_cases.dashboard import (
    build_dashboard_queries,
    get_dashboard_stats,
)
from tourguide.config import Settings
from tourguide.infrastructure.notifications import EmergencyFeed
from tourguide.interfaces.api.dependencies import (
    get_aggregator,
    get_app_settings,
    get_emergency_feed,
    get_session_factory,
)
from tourguide.interfaces.api.schemas import DashboardReportRead

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardReportRead)
async def read_dashboard_stats(
    aggregator: TimeoutGuardedAggregator = Depends(get_aggregator),
    feed: EmergencyFeed = Depends(get_emergency_feed),
    settings: Settings = Depends(get_app_settings),
    session_factory: Callable[[], Session] = Depends(get_session_factory),
) -> DashboardReportRead:
    """Devuelve las estadísticas disponibles antes del tiempo límite.

    Las fuentes que fallan o no responden a tiempo se informan en
    ``failed_sources`` y se reemplazan por valores vacíos.
    """

    report = await get_dashboard_stats(
        aggregator=aggregator,
        queries=build_dashboard_queries(session_factory, feed),
        deadline=settings.dashboard_deadline_seconds,
    )
    return DashboardReportRead.model_validate(report)


__all__ = ["router"]
