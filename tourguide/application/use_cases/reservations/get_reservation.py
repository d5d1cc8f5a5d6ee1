"""Use case for fetching a single reservation."""

from sqlalchemy.orm import Session

from tourguide.application.errors import NOT_FOUND, ServiceResult, classify_error
from tourguide.domain.entities import Reservation
from tourguide.infrastructure.repositories import ReservationRepository


def get_reservation(session: Session, reservation_id: str) -> ServiceResult[Reservation]:
    try:
        reservation = ReservationRepository(session).get(reservation_id)
    except Exception as exc:
        return ServiceResult(
            error=classify_error(exc, fallback_message="No se pudo obtener la reserva")
        )
    if reservation is None:
        return ServiceResult.failure(NOT_FOUND, "Reserva no encontrada")
    return ServiceResult.success(reservation)
