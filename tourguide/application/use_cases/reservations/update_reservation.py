"""Use case for changing the state of an existing reservation."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy.orm import Session

from tourguide.application.errors import (
    NOT_FOUND,
    PERSISTENCE_ERROR,
    ServiceResult,
    classify_error,
)
from tourguide.application.use_cases.notifications import ReservationEventOrchestrator
from tourguide.domain.entities import Reservation
from tourguide.infrastructure.repositories import ReservationRepository
from tourguide.utils import now_in_app_timezone

from .validators import validate_statuses

logger = logging.getLogger(__name__)

_NON_NULLABLE_FIELDS = ("status", "payment_status", "participants", "reservation_date")


def update_reservation(
    session: Session,
    reservation_id: str,
    changes: Mapping[str, Any],
    orchestrator: ReservationEventOrchestrator | None = None,
) -> ServiceResult[Reservation]:
    """Apply ``changes`` and notify status or payment status transitions."""

    changes = {
        name: value
        for name, value in changes.items()
        if value is not None or name not in _NON_NULLABLE_FIELDS
    }
    try:
        validate_statuses(changes)
    except ValueError as exc:
        return ServiceResult(error=classify_error(exc, fallback_message=str(exc)))

    repository = ReservationRepository(session)
    try:
        previous = repository.get(reservation_id)
        if previous is None:
            return ServiceResult.failure(NOT_FOUND, "Reserva no encontrada")
        updated = repository.update(
            reservation_id, {**changes, "updated_at": now_in_app_timezone()}
        )
    except Exception as exc:
        session.rollback()
        error = classify_error(exc, fallback_message="No se pudo actualizar la reserva")
        if error.code == PERSISTENCE_ERROR:
            logger.exception("Failed to update reservation %s", reservation_id)
        return ServiceResult(error=error)

    if updated is None:
        return ServiceResult.failure(NOT_FOUND, "Reserva no encontrada")

    if orchestrator is not None and (
        updated.status != previous.status
        or updated.payment_status != previous.payment_status
    ):
        orchestrator.on_reservation_updated(updated, previous)
    return ServiceResult.success(updated)
