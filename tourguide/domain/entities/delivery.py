"""Value objects exchanged with the email delivery channels."""

from __future__ import annotations

from dataclasses import dataclass

MESSAGE_KIND_CONFIRMATION = "confirmation"
MESSAGE_KIND_PAYMENT_LINK = "payment_link"
MESSAGE_KIND_ADMIN_NOTICE = "admin_notice"

MESSAGE_KINDS = (
    MESSAGE_KIND_CONFIRMATION,
    MESSAGE_KIND_PAYMENT_LINK,
    MESSAGE_KIND_ADMIN_NOTICE,
)


@dataclass(frozen=True)
class DeliveryMessage:
    """Email ready to be handed to a delivery channel."""

    recipient: str
    subject: str
    html: str
    kind: str
    reply_to: str | None = None
    sender: str | None = None
    sender_name: str | None = None


@dataclass(frozen=True)
class ChannelResult:
    """What a single provider reports after a delivery attempt."""

    success: bool
    message_id: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class DeliveryOutcome:
    """Final result of a tiered delivery."""

    success: bool
    provider_used: str
    fallback_used: bool
    error: str | None = None
    message_id: str | None = None


__all__ = [
    "ChannelResult",
    "DeliveryMessage",
    "DeliveryOutcome",
    "MESSAGE_KIND_ADMIN_NOTICE",
    "MESSAGE_KIND_CONFIRMATION",
    "MESSAGE_KIND_PAYMENT_LINK",
    "MESSAGE_KINDS",
]
