"""Rutas para registrar y administrar reservas."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from tourguide.application.use_cases.notifications import ReservationEventOrchestrator
from tourguide.application.use_cases.reservations import (
    ReservationPage,
    create_reservation as create_reservation_uc,
    get_reservation as get_reservation_uc,
    get_reservation_stats as get_reservation_stats_uc,
    list_reservations as list_reservations_uc,
    update_reservation as update_reservation_uc,
)
from tourguide.domain.entities import Reservation
from tourguide.infrastructure.database import get_db
from tourguide.interfaces.api.dependencies import get_orchestrator
from tourguide.interfaces.api.routes_helpers import service_error_to_http
from tourguide.interfaces.api.schemas import (
    ReservationCreate,
    ReservationPageRead,
    ReservationRead,
    ReservationStatsRead,
    ReservationUpdate,
)

router = APIRouter(prefix="/reservations", tags=["reservations"])


def _to_read_model(reservation: Reservation) -> ReservationRead:
    return ReservationRead.model_validate(reservation)


@router.post("/", response_model=ReservationRead, status_code=status.HTTP_201_CREATED)
def create_reservation(
    reservation_in: ReservationCreate,
    db: Session = Depends(get_db),
    orchestrator: ReservationEventOrchestrator = Depends(get_orchestrator),
) -> ReservationRead:
    """Registra una reserva y programa las notificaciones sin esperarlas."""

    result = create_reservation_uc(db, reservation_in.model_dump(), orchestrator)
    if result.error is not None:
        raise service_error_to_http(result.error)
    return _to_read_model(result.data)


@router.get("/", response_model=ReservationPageRead)
def list_reservations(
    status_filter: str | None = Query(default=None, alias="status"),
    service_id: str | None = None,
    email: str | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=50, ge=1, le=200),
    db: Session = Depends(get_db),
) -> ReservationPageRead:
    """Devuelve las reservas filtradas y paginadas, de la más reciente a la más antigua."""

    result = list_reservations_uc(
        db,
        status=status_filter,
        service_id=service_id,
        email=email,
        page=page,
        limit=limit,
    )
    if result.error is not None:
        raise service_error_to_http(result.error)
    page_data: ReservationPage = result.data
    return ReservationPageRead(
        items=[_to_read_model(item) for item in page_data.items],
        total=page_data.total,
        page=page_data.page,
        limit=page_data.limit,
    )


@router.get("/stats", response_model=ReservationStatsRead)
def read_reservation_stats(db: Session = Depends(get_db)) -> ReservationStatsRead:
    """Devuelve la cantidad de reservas por estado."""

    return ReservationStatsRead.model_validate(get_reservation_stats_uc(db))


@router.get("/{reservation_id}", response_model=ReservationRead)
def read_reservation(reservation_id: str, db: Session = Depends(get_db)) -> ReservationRead:
    result = get_reservation_uc(db, reservation_id)
    if result.error is not None:
        raise service_error_to_http(result.error)
    return _to_read_model(result.data)


@router.patch("/{reservation_id}", response_model=ReservationRead)
def update_reservation(
    reservation_id: str,
    reservation_in: ReservationUpdate,
    db: Session = Depends(get_db),
    orchestrator: ReservationEventOrchestrator = Depends(get_orchestrator),
) -> ReservationRead:
    """Actualiza el estado, el pago o las notas de una reserva."""

    changes = reservation_in.model_dump(exclude_unset=True)
    result = update_reservation_uc(db, reservation_id, changes, orchestrator)
    if result.error is not None:
        raise service_error_to_http(result.error)
    return _to_read_model(result.data)


__all__ = ["router"]
