"""Use case for listing reservations with filters and pagination."""

from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy.orm import Session

from tourguide.application.errors import ServiceResult, classify_error
from tourguide.domain.entities import Reservation
from tourguide.infrastructure.repositories import ReservationRepository


@dataclass
class ReservationPage:
    items: Sequence[Reservation]
    total: int
    page: int
    limit: int


def list_reservations(
    session: Session,
    *,
    status: str | None = None,
    service_id: str | None = None,
    email: str | None = None,
    page: int = 1,
    limit: int = 50,
) -> ServiceResult[ReservationPage]:
    """Return one page of reservations, newest first."""

    page = max(page, 1)
    try:
        items, total = ReservationRepository(session).list(
            status=status,
            service_id=service_id,
            email=email,
            offset=(page - 1) * limit,
            limit=limit,
        )
    except Exception as exc:
        return ServiceResult(
            error=classify_error(exc, fallback_message="No se pudieron obtener las reservas")
        )
    return ServiceResult.success(ReservationPage(items=items, total=total, page=page, limit=limit))
