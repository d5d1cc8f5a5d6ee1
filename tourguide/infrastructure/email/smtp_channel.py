"""Secondary delivery channel using a plain SMTP relay."""

from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from email.utils import formataddr, make_msgid

from anyio import to_thread

from tourguide.config import Settings
from tourguide.domain.entities import ChannelResult, DeliveryMessage

from .channels import DeliveryChannel

logger = logging.getLogger(__name__)


class SmtpChannel(DeliveryChannel):
    """Deliver messages through an SMTP server with optional STARTTLS."""

    name = "smtp"

    def __init__(self, settings: Settings) -> None:
        self._host = settings.smtp_host
        self._port = settings.smtp_port
        self._user = settings.smtp_user
        self._password = settings.smtp_password
        self._use_tls = settings.smtp_use_tls
        self._timeout = settings.smtp_timeout_seconds
        self._sender = settings.default_sender
        self._sender_name = settings.mail_from_name

    @property
    def configured(self) -> bool:
        return bool(self._host)

    async def deliver(self, message: DeliveryMessage) -> ChannelResult:
        if not self.configured:
            logger.info("SMTP host not configured; skipping secondary channel")
            return ChannelResult(success=False, error="SMTP no está configurado")
        return await to_thread.run_sync(self._send, message)

    def _build_message(self, message: DeliveryMessage) -> EmailMessage:
        email = EmailMessage()
        email["Subject"] = message.subject
        email["From"] = formataddr(
            (message.sender_name or self._sender_name, message.sender or self._sender)
        )
        email["To"] = message.recipient
        if message.reply_to:
            email["Reply-To"] = message.reply_to
        email["Message-ID"] = make_msgid(domain=(message.sender or self._sender).split("@")[-1])
        email.set_content("Este mensaje requiere un cliente de correo compatible con HTML.")
        email.add_alternative(message.html, subtype="html")
        return email

    def _send(self, message: DeliveryMessage) -> ChannelResult:
        email = self._build_message(message)
        try:
            with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as server:
                server.ehlo()
                if self._use_tls:
                    server.starttls()
                    server.ehlo()
                if self._user and self._password:
                    server.login(self._user, self._password)
                refused = server.send_message(email)
        except smtplib.SMTPAuthenticationError as exc:
            logger.error("SMTP authentication failed: %s", exc)
            return ChannelResult(success=False, error=f"SMTP authentication failed: {exc}")
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("SMTP delivery of %s failed: %s", message.kind, exc)
            return ChannelResult(success=False, error=f"SMTP error: {exc}")

        if refused:
            error = f"SMTP server refused recipients: {', '.join(refused)}"
            logger.error(error)
            return ChannelResult(success=False, error=error)

        return ChannelResult(success=True, message_id=email["Message-ID"])


__all__ = ["SmtpChannel"]
