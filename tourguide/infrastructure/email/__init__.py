"""Email delivery channels and the tiered dispatcher."""

from .channels import DeliveryChannel
from .dispatcher import TieredEmailDispatcher
from .sendgrid_channel import SendGridChannel
from .smtp_channel import SmtpChannel

__all__ = [
    "DeliveryChannel",
    "SendGridChannel",
    "SmtpChannel",
    "TieredEmailDispatcher",
]
