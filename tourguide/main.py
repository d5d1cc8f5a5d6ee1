import asyncio
import logging
from collections.abc import Sequence
from contextlib import asynccontextmanager, suppress

from anyio import to_thread
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tourguide.application.aggregation import TimeoutGuardedAggregator
from tourguide.application.errors import VALIDATION_ERROR
from tourguide.application.polling import RetryingPoller
from tourguide.application.use_cases.notifications import ReservationEventOrchestrator
from tourguide.config import Settings, get_settings
from tourguide.infrastructure.database import SessionLocal, engine, initialize_database
from tourguide.infrastructure.email import (
    DeliveryChannel,
    SendGridChannel,
    SmtpChannel,
    TieredEmailDispatcher,
)
from tourguide.infrastructure.notifications import (
    BackgroundTaskRunner,
    EmergencyFeed,
    FeedBroadcaster,
    FeedConnectionManager,
)
from tourguide.infrastructure.repositories import AdminNoticeStore
from tourguide.interfaces.api.routes import register_routes

logger = logging.getLogger(__name__)


def _build_lifespan(settings: Settings, channels: Sequence[DeliveryChannel] | None):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Inicializa la base de datos y los servicios de notificación al arrancar."""

        initialize_database()

        runner = BackgroundTaskRunner()
        runner.bind(asyncio.get_running_loop())
        feed = EmergencyFeed(seed=settings.emergency_seed_enabled)
        feed_connections = FeedConnectionManager()
        broadcaster = FeedBroadcaster(feed, feed_connections, runner)
        broadcaster.start()

        dispatcher = TieredEmailDispatcher(
            channels or [SendGridChannel(settings), SmtpChannel(settings)], settings
        )
        notices = AdminNoticeStore(SessionLocal)
        orchestrator = ReservationEventOrchestrator(
            dispatcher=dispatcher, feed=feed, notices=notices, runner=runner
        )
        poller = RetryingPoller(
            lambda: to_thread.run_sync(notices.list_recent),
            name="admin-notice-poller",
            max_retries=settings.poller_max_retries,
            retry_delay=settings.poller_retry_delay_seconds,
        )
        poller_task = asyncio.create_task(
            poller.run(settings.poller_interval_seconds), name="admin-notice-poller"
        )

        app.state.session_factory = SessionLocal
        app.state.task_runner = runner
        app.state.emergency_feed = feed
        app.state.feed_connections = feed_connections
        app.state.dispatcher = dispatcher
        app.state.orchestrator = orchestrator
        app.state.aggregator = TimeoutGuardedAggregator(settings.dashboard_deadline_seconds)
        app.state.admin_notice_poller = poller

        try:
            yield
        finally:
            poller.stop()
            poller_task.cancel()
            with suppress(asyncio.CancelledError):
                await poller_task
            broadcaster.stop()
            await runner.close()
            engine.dispose()

    return lifespan


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": {
                "code": VALIDATION_ERROR,
                "message": "Datos de la solicitud no válidos",
                "errors": jsonable_encoder(exc.errors()),
            }
        },
    )


def create_app(
    settings: Settings | None = None,
    *,
    channels: Sequence[DeliveryChannel] | None = None,
) -> FastAPI:
    """Crea y configura la aplicación principal de FastAPI."""

    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(title="QR Tour Guide API", lifespan=_build_lifespan(settings, channels))
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, _validation_error_handler)

    register_routes(app)
    return app
