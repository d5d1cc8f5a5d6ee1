"""Use case for registering a new reservation."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from typing import Any

from sqlalchemy.orm import Session

from tourguide.application.errors import ServiceResult, classify_error
from tourguide.application.use_cases.notifications import ReservationEventOrchestrator
from tourguide.domain.entities import (
    PAYMENT_STATUS_PENDING,
    RESERVATION_STATUS_PENDING,
    Reservation,
)
from tourguide.infrastructure.repositories import ReservationRepository
from tourguide.utils import now_in_app_timezone

from .validators import validate_new_reservation

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_TYPE = "excursion"


def _optional(data: Mapping[str, Any], name: str) -> Any:
    value = data.get(name)
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def create_reservation(
    session: Session,
    data: Mapping[str, Any],
    orchestrator: ReservationEventOrchestrator | None = None,
) -> ServiceResult[Reservation]:
    """Persist a reservation and schedule its notifications.

    The notifications are only scheduled; this function returns as soon as
    the row is stored. Failures are returned as a :class:`ServiceResult`.
    """

    try:
        validate_new_reservation(data)
    except ValueError as exc:
        return ServiceResult(error=classify_error(exc, fallback_message=str(exc)))

    now = now_in_app_timezone()
    reservation = Reservation(
        id=_optional(data, "id") or str(uuid.uuid4()),
        service_id=_optional(data, "service_id"),
        service_name=str(data["service_name"]).strip(),
        service_type=_optional(data, "service_type") or DEFAULT_SERVICE_TYPE,
        full_name=_optional(data, "full_name") or "",
        email=str(data["email"]).strip(),
        phone=_optional(data, "phone"),
        participants=data["participants"],
        reservation_date=str(data["reservation_date"]).strip(),
        reservation_time=_optional(data, "reservation_time"),
        special_requests=_optional(data, "special_requests"),
        admin_notes=_optional(data, "admin_notes"),
        status=data.get("status") or RESERVATION_STATUS_PENDING,
        payment_status=data.get("payment_status") or PAYMENT_STATUS_PENDING,
        price=data.get("price"),
        payment_link=_optional(data, "payment_link"),
        created_at=now,
        updated_at=now,
    )

    repository = ReservationRepository(session)
    try:
        saved = repository.create(reservation)
    except Exception as exc:
        session.rollback()
        error = classify_error(exc, fallback_message="No se pudo crear la reserva")
        if error.retryable:
            logger.warning("Connection error while creating reservation: %s", exc)
        else:
            logger.exception("Failed to create reservation for %s", reservation.email)
        return ServiceResult(error=error)

    logger.info("Reservation %s created for %s", saved.id, saved.service_name)
    if orchestrator is not None:
        orchestrator.on_reservation_created(saved)
    return ServiceResult.success(saved)
