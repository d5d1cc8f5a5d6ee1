"""Tiered email delivery with automatic fallback to a secondary channel."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from tourguide.config import Settings
from tourguide.domain.entities import (
    MESSAGE_KIND_ADMIN_NOTICE,
    MESSAGE_KIND_CONFIRMATION,
    MESSAGE_KIND_PAYMENT_LINK,
    DeliveryMessage,
    DeliveryOutcome,
    Reservation,
)

from . import templates
from .channels import DeliveryChannel

logger = logging.getLogger(__name__)

VALIDATION_ERROR = "VALIDATION_ERROR"
NO_PROVIDER = "none"


def _template_fields(reservation: Reservation, settings: Settings) -> dict[str, Any]:
    return {
        "reservation_id": reservation.id,
        "service_name": reservation.service_name,
        "full_name": reservation.full_name,
        "email": reservation.email,
        "phone": reservation.phone or "No proporcionado",
        "participants": reservation.participants,
        "reservation_date": reservation.reservation_date,
        "reservation_time": reservation.reservation_time or "Por confirmar",
        "special_requests": reservation.special_requests or "Ninguna",
        "admin_notes": reservation.admin_notes,
        "status": reservation.status,
        "price": reservation.price if reservation.price is not None else 0,
        "total_amount": f"{reservation.total_amount:.2f}",
        "payment_link": reservation.payment_link,
        "contact_email": settings.mail_reply_to,
    }


class TieredEmailDispatcher:
    """Send messages through an ordered list of channels.

    The first channel is the primary provider. When it reports a failure or
    raises, the same message is handed to the next channel exactly once.
    ``send`` always returns a :class:`DeliveryOutcome`; provider failures are
    never raised to the caller.
    """

    def __init__(self, channels: Sequence[DeliveryChannel], settings: Settings) -> None:
        if not channels:
            raise ValueError("At least one delivery channel is required")
        self._channels = list(channels)
        self._settings = settings

    @property
    def channels(self) -> list[DeliveryChannel]:
        return list(self._channels)

    async def send(self, message: DeliveryMessage) -> DeliveryOutcome:
        if not message.recipient or not message.recipient.strip():
            logger.warning("Refusing to send %s without a recipient", message.kind)
            return DeliveryOutcome(
                success=False,
                provider_used=NO_PROVIDER,
                fallback_used=False,
                error=f"{VALIDATION_ERROR}: El destinatario del email es obligatorio",
            )

        errors: list[str] = []
        for position, channel in enumerate(self._channels):
            fallback = position > 0
            try:
                result = await channel.deliver(message)
            except Exception as exc:
                logger.exception(
                    "Channel %s raised while sending %s to %s",
                    channel.name,
                    message.kind,
                    message.recipient,
                )
                errors.append(f"{channel.name}: {exc}")
                continue

            if result.success:
                if fallback:
                    logger.info(
                        "Delivered %s to %s through fallback channel %s",
                        message.kind,
                        message.recipient,
                        channel.name,
                    )
                return DeliveryOutcome(
                    success=True,
                    provider_used=channel.name,
                    fallback_used=fallback,
                    message_id=result.message_id,
                )

            logger.warning(
                "Channel %s failed to send %s to %s: %s",
                channel.name,
                message.kind,
                message.recipient,
                result.error,
            )
            errors.append(f"{channel.name}: {result.error or 'unknown error'}")

        error = "; ".join(errors)
        logger.error(
            "All delivery channels failed for %s to %s: %s",
            message.kind,
            message.recipient,
            error,
        )
        return DeliveryOutcome(
            success=False,
            provider_used=self._channels[-1].name,
            fallback_used=len(self._channels) > 1,
            error=error,
        )

    def _message(
        self,
        *,
        recipient: str,
        subject: str,
        html: str,
        kind: str,
        reply_to: str | None = None,
    ) -> DeliveryMessage:
        return DeliveryMessage(
            recipient=recipient,
            subject=subject,
            html=html,
            kind=kind,
            reply_to=reply_to or self._settings.mail_reply_to,
            sender=self._settings.default_sender,
            sender_name=self._settings.mail_from_name,
        )

    async def send_confirmation(self, reservation: Reservation) -> DeliveryOutcome:
        fields = _template_fields(reservation, self._settings)
        return await self.send(
            self._message(
                recipient=reservation.email,
                subject=f"Confirmación de Reserva - {reservation.service_name} | QR Tour Guide",
                html=templates.render(templates.RESERVATION_CONFIRMATION, title="¡Reserva Recibida!", **fields),
                kind=MESSAGE_KIND_CONFIRMATION,
            )
        )

    async def send_payment_link(self, reservation: Reservation) -> DeliveryOutcome:
        fields = _template_fields(reservation, self._settings)
        return await self.send(
            self._message(
                recipient=reservation.email,
                subject=f"Link de Pago - {reservation.service_name} | QR Tour Guide",
                html=templates.render(templates.PAYMENT_LINK, title="Link de Pago Disponible", **fields),
                kind=MESSAGE_KIND_PAYMENT_LINK,
            )
        )

    async def send_payment_confirmation(self, reservation: Reservation) -> DeliveryOutcome:
        fields = _template_fields(reservation, self._settings)
        return await self.send(
            self._message(
                recipient=reservation.email,
                subject=f"Pago Confirmado - {reservation.service_name} | QR Tour Guide",
                html=templates.render(templates.PAYMENT_CONFIRMATION, title="¡Pago Confirmado!", **fields),
                kind=MESSAGE_KIND_CONFIRMATION,
            )
        )

    async def send_status_update(self, reservation: Reservation) -> DeliveryOutcome:
        fields = _template_fields(reservation, self._settings)
        return await self.send(
            self._message(
                recipient=reservation.email,
                subject=f"Actualización de Reserva - {reservation.service_name} | QR Tour Guide",
                html=templates.render(
                    templates.status_template(reservation.status),
                    title="Actualización de tu Reserva",
                    **fields,
                ),
                kind=MESSAGE_KIND_CONFIRMATION,
            )
        )

    async def send_admin_notice(self, reservation: Reservation) -> DeliveryOutcome:
        fields = _template_fields(reservation, self._settings)
        return await self.send(
            self._message(
                recipient=self._settings.operator_email,
                subject=f"Nueva Reserva - {reservation.service_name} | {reservation.id}",
                html=templates.render(
                    templates.ADMIN_RESERVATION_NOTICE,
                    title="¡Nueva Reserva Recibida!",
                    **fields,
                ),
                kind=MESSAGE_KIND_ADMIN_NOTICE,
                reply_to=reservation.email,
            )
        )


__all__ = ["NO_PROVIDER", "TieredEmailDispatcher", "VALIDATION_ERROR"]
