"""Process-local notification feed that keeps working when storage does not."""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable

from tourguide.domain.entities import (
    NOTIFICATION_TYPES,
    PAYMENT_STATUS_FAILED,
    PAYMENT_STATUS_PAID,
    EmergencyNotification,
    Reservation,
)
from tourguide.utils import now_in_app_timezone

logger = logging.getLogger(__name__)

FeedListener = Callable[[list[EmergencyNotification]], None]

_PAYMENT_STATUS_TEXT = {
    "pending": "pendiente",
    "paid": "confirmado",
    "failed": "fallido",
}

_SEED_METADATA = {"emergency": True, "priority": "high"}


class EmergencyFeed:
    """In-memory list of :class:`EmergencyNotification` entries.

    Entries are kept newest first and are never evicted. Listeners receive a
    copy of the whole list whenever its content differs from the last list
    they were given. None of the public methods raise: unknown identifiers are
    ignored and listener errors are logged.
    """

    def __init__(
        self,
        *,
        seed: bool = True,
        clock: Callable[[], datetime] = now_in_app_timezone,
    ) -> None:
        self._clock = clock
        self._lock = threading.RLock()
        self._items: list[EmergencyNotification] = []
        self._listeners: list[FeedListener] = []
        self._last_notified: list[EmergencyNotification] | None = None
        if seed:
            self._seed()

    def _seed(self) -> None:
        created_at = self._clock()
        self._items = [
            EmergencyNotification(
                id="emergency-system",
                type="info",
                title="Sistema de Notificaciones",
                message=(
                    "El sistema de notificaciones está funcionando en modo de "
                    "emergencia. Todas las funcionalidades principales están "
                    "disponibles."
                ),
                is_read=False,
                created_at=created_at,
                metadata=dict(_SEED_METADATA),
            ),
            EmergencyNotification(
                id="emergency-app",
                type="success",
                title="Aplicación Estable",
                message=(
                    "La aplicación está funcionando correctamente. El frontend "
                    "público está protegido contra fallos."
                ),
                is_read=False,
                created_at=created_at,
                metadata=dict(_SEED_METADATA),
            ),
        ]

    def publish(
        self,
        type: str,
        title: str,
        message: str,
        metadata: dict[str, Any] | None = None,
        action_url: str | None = None,
    ) -> EmergencyNotification:
        """Prepend a new unread entry and notify listeners."""

        if type not in NOTIFICATION_TYPES:
            logger.warning("Unknown feed entry type %s; publishing as info", type)
            type = "info"
        entry = EmergencyNotification(
            id=f"emergency-{uuid.uuid4().hex}",
            type=type,
            title=title,
            message=message,
            is_read=False,
            created_at=self._clock(),
            metadata=dict(metadata or {}),
            action_url=action_url,
        )
        with self._lock:
            self._items.insert(0, entry)
        self._notify()
        return entry

    def publish_reservation(self, reservation: Reservation) -> EmergencyNotification:
        time = reservation.reservation_time or "hora por confirmar"
        return self.publish(
            "reservation",
            "Nueva Reservación",
            (
                f'{reservation.full_name} ha reservado "{reservation.service_name}" '
                f"para {reservation.reservation_date} a las {time}. "
                f"Participantes: {reservation.participants}"
            ),
            metadata={
                "reservation": True,
                "reservation_id": reservation.id,
                "user_name": reservation.full_name,
                "service_name": reservation.service_name,
                "date": reservation.reservation_date,
                "time": reservation.reservation_time,
                "participants": reservation.participants,
            },
        )

    def publish_payment(
        self, name: str, amount: float, status: str
    ) -> EmergencyNotification:
        status_text = _PAYMENT_STATUS_TEXT.get(status, status)
        if status == PAYMENT_STATUS_PAID:
            entry_type = "success"
        elif status == PAYMENT_STATUS_FAILED:
            entry_type = "error"
        else:
            entry_type = "info"
        return self.publish(
            entry_type,
            f"Pago {status_text.capitalize()}",
            f"Pago de ${amount:g} {status_text} para {name}",
            metadata={
                "payment": True,
                "user_name": name,
                "amount": amount,
                "status": status,
            },
        )

    def list(self) -> list[EmergencyNotification]:
        with self._lock:
            return list(self._items)

    def unread_count(self) -> int:
        with self._lock:
            return sum(1 for item in self._items if not item.is_read)

    def mark_read(self, notification_id: str) -> None:
        with self._lock:
            self._items = [
                replace(item, is_read=True) if item.id == notification_id else item
                for item in self._items
            ]
        self._notify()

    def mark_all_read(self) -> None:
        with self._lock:
            self._items = [replace(item, is_read=True) for item in self._items]
        self._notify()

    def delete(self, notification_id: str) -> None:
        with self._lock:
            self._items = [item for item in self._items if item.id != notification_id]
        self._notify()

    def subscribe(self, listener: FeedListener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that removes it."""

        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        with self._lock:
            current = list(self._items)
            if current == self._last_notified:
                return
            self._last_notified = current
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(list(current))
            except Exception:
                logger.exception("Emergency feed listener failed")


__all__ = ["EmergencyFeed", "FeedListener"]
