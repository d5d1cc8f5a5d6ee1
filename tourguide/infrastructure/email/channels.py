"""Abstract interface implemented by the email delivery providers."""

from __future__ import annotations

from abc import ABC, abstractmethod

from tourguide.domain.entities import ChannelResult, DeliveryMessage


class DeliveryChannel(ABC):
    """Capability to attempt the delivery of a single message."""

    #: Provider name reported in :class:`DeliveryOutcome.provider_used`.
    name: str = "channel"

    @abstractmethod
    async def deliver(self, message: DeliveryMessage) -> ChannelResult:
        """Attempt to deliver ``message``.

        Implementations report provider rejections through
        ``ChannelResult(success=False)``; unexpected errors may propagate and
        are handled by the dispatcher.
        """


__all__ = ["DeliveryChannel"]
