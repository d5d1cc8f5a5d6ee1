"""Validation helpers for reservation payloads."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from tourguide.domain.entities import PAYMENT_STATUSES, RESERVATION_STATUSES

REQUIRED_FIELDS = ("service_name", "email", "reservation_date")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_new_reservation(data: Mapping[str, Any]) -> None:
    """Raise ``ValueError`` when ``data`` cannot produce a reservation."""

    missing = [name for name in REQUIRED_FIELDS if _is_blank(data.get(name))]
    if missing:
        raise ValueError(f"Datos de reservación incompletos: {', '.join(missing)}")

    email = str(data["email"]).strip()
    if "@" not in email or email.startswith("@") or email.endswith("@"):
        raise ValueError("El correo electrónico no es válido")

    participants = data.get("participants")
    if not isinstance(participants, int) or isinstance(participants, bool) or participants < 1:
        raise ValueError("La reserva debe tener al menos un participante")

    validate_statuses(data)


def validate_statuses(data: Mapping[str, Any]) -> None:
    status = data.get("status")
    if status is not None and status not in RESERVATION_STATUSES:
        raise ValueError(f"Estado de reserva no válido: {status}")
    payment_status = data.get("payment_status")
    if payment_status is not None and payment_status not in PAYMENT_STATUSES:
        raise ValueError(f"Estado de pago no válido: {payment_status}")
    price = data.get("price")
    if price is not None:
        if not isinstance(price, (int, float)) or isinstance(price, bool):
            raise ValueError("El precio debe ser un número")
        if price < 0:
            raise ValueError("El precio no puede ser negativo")
    participants = data.get("participants")
    if participants is not None and (
        not isinstance(participants, int) or isinstance(participants, bool) or participants < 1
    ):
        raise ValueError("La reserva debe tener al menos un participante")


__all__ = ["REQUIRED_FIELDS", "validate_new_reservation", "validate_statuses"]
