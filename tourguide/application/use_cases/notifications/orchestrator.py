"""Fan-out of reservation events to the notice store, email and the feed."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from anyio import to_thread

from tourguide.domain.entities import (
    PAYMENT_STATUS_PAID,
    PAYMENT_STATUS_PENDING,
    RESERVATION_STATUS_CONFIRMED,
    AdminNotice,
    DeliveryOutcome,
    Reservation,
)
from tourguide.infrastructure.email import TieredEmailDispatcher
from tourguide.infrastructure.notifications import (
    BackgroundTaskRunner,
    EmergencyFeed,
    NoEventLoopError,
)
from tourguide.infrastructure.repositories import AdminNoticeStore
from tourguide.utils import now_in_app_timezone

logger = logging.getLogger(__name__)

_STATUS_LABELS = {
    "pending": "pendiente",
    "confirmed": "confirmada",
    "cancelled": "cancelada",
    "completed": "completada",
}


class ReservationEventOrchestrator:
    """Schedule the side effects of reservation changes without waiting for them.

    Every side effect runs as its own background task and handles its own
    failures, so a broken provider never affects the others or the caller.
    """

    def __init__(
        self,
        *,
        dispatcher: TieredEmailDispatcher,
        feed: EmergencyFeed,
        notices: AdminNoticeStore,
        runner: BackgroundTaskRunner,
    ) -> None:
        self._dispatcher = dispatcher
        self._feed = feed
        self._notices = notices
        self._runner = runner

    def on_reservation_created(self, reservation: Reservation) -> None:
        self._publish_to_feed(reservation)
        self._spawn(
            "admin-notice",
            lambda: self._record_notice(
                AdminNotice(
                    id=None,
                    title="Nueva Reserva",
                    message=(
                        f"{reservation.full_name} reservó {reservation.service_name} "
                        f"para {reservation.reservation_date} "
                        f"({reservation.participants} participantes)"
                    ),
                    type="reservation",
                    metadata=_reservation_metadata(reservation),
                )
            ),
        )
        self._spawn(
            "customer-confirmation",
            lambda: self._deliver(
                "customer confirmation", reservation, self._dispatcher.send_confirmation
            ),
        )
        self._spawn(
            "operator-notice",
            lambda: self._deliver(
                "operator notice", reservation, self._dispatcher.send_admin_notice
            ),
        )

    def on_reservation_updated(self, reservation: Reservation, previous: Reservation) -> None:
        try:
            if reservation.status != previous.status:
                self._on_status_changed(reservation, previous)
            if reservation.payment_status != previous.payment_status:
                self._on_payment_status_changed(reservation)
        except Exception:
            logger.exception("Failed to schedule notifications for reservation %s", reservation.id)

    def _on_status_changed(self, reservation: Reservation, previous: Reservation) -> None:
        label = _STATUS_LABELS.get(reservation.status, reservation.status)
        self._spawn(
            "status-notice",
            lambda: self._record_notice(
                AdminNotice(
                    id=None,
                    title=f"Reserva {label}",
                    message=(
                        f"La reserva de {reservation.full_name} para "
                        f"{reservation.service_name} cambió de {previous.status} "
                        f"a {reservation.status}"
                    ),
                    type="reservation",
                    metadata={
                        **_reservation_metadata(reservation),
                        "previous_status": previous.status,
                    },
                )
            ),
        )

        if (
            reservation.status == RESERVATION_STATUS_CONFIRMED
            and reservation.payment_link
            and reservation.payment_status == PAYMENT_STATUS_PENDING
        ):
            send = self._dispatcher.send_payment_link
            description = "payment link"
        else:
            send = self._dispatcher.send_status_update
            description = "status update"
        self._spawn("status-email", lambda: self._deliver(description, reservation, send))

    def _on_payment_status_changed(self, reservation: Reservation) -> None:
        try:
            self._feed.publish_payment(
                reservation.full_name, reservation.total_amount, reservation.payment_status
            )
        except Exception:
            logger.exception("Failed to publish payment entry for %s", reservation.id)

        if reservation.payment_status == PAYMENT_STATUS_PAID:
            self._spawn(
                "payment-confirmation",
                lambda: self._deliver(
                    "payment confirmation",
                    reservation,
                    self._dispatcher.send_payment_confirmation,
                ),
            )

    def _spawn(self, name: str, factory: Callable[[], Awaitable[Any]]) -> None:
        try:
            self._runner.spawn(factory, name=name)
        except NoEventLoopError:
            logger.warning("No event loop available; skipped background task %s", name)
        except Exception:
            logger.exception("Could not schedule background task %s", name)

    def _publish_to_feed(self, reservation: Reservation) -> None:
        async def publish() -> None:
            self._feed.publish_reservation(reservation)

        try:
            self._runner.spawn(publish, name="feed-entry")
        except Exception as exc:
            # The feed must still see the reservation.
            if not isinstance(exc, NoEventLoopError):
                logger.exception("Could not schedule the feed entry for %s", reservation.id)
            try:
                self._feed.publish_reservation(reservation)
            except Exception:
                logger.exception("Failed to publish reservation %s to the feed", reservation.id)

    async def _record_notice(self, notice: AdminNotice) -> None:
        notice.created_at = notice.sent_at = now_in_app_timezone()
        try:
            await to_thread.run_sync(self._notices.insert, notice)
        except Exception:
            logger.exception("Could not store admin notice '%s'", notice.title)

    async def _deliver(
        self,
        label: str,
        reservation: Reservation,
        send: Callable[[Reservation], Awaitable[DeliveryOutcome]],
    ) -> None:
        try:
            outcome = await send(reservation)
        except Exception:
            logger.exception("Unexpected error sending %s for %s", label, reservation.id)
            return
        if outcome.success:
            logger.info(
                "Sent %s for reservation %s via %s",
                label,
                reservation.id,
                outcome.provider_used,
            )
        else:
            logger.error(
                "Could not send %s for reservation %s: %s",
                label,
                reservation.id,
                outcome.error,
            )


def _reservation_metadata(reservation: Reservation) -> dict[str, Any]:
    return {
        "reservation_id": reservation.id,
        "service_name": reservation.service_name,
        "customer_email": reservation.email,
        "reservation_date": reservation.reservation_date,
        "participants": reservation.participants,
    }


__all__ = ["ReservationEventOrchestrator"]
