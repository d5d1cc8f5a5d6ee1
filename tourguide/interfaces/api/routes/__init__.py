from fastapi import FastAPI

from .dashboard import router as dashboard_router
from .notifications import router as notifications_router
from .reservations import router as reservations_router


def register_routes(app: FastAPI) -> None:
    """Registra todos los routers de la API en la aplicación FastAPI."""

    app.include_router(reservations_router)
    app.include_router(notifications_router)
    app.include_router(dashboard_router)
