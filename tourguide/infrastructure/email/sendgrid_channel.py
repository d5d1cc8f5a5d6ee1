"""Primary delivery channel backed by the SendGrid Web API."""

from __future__ import annotations

import json
import logging
from typing import Any

from anyio import to_thread
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import From, Mail, ReplyTo

from tourguide.config import Settings
from tourguide.domain.entities import ChannelResult, DeliveryMessage

from .channels import DeliveryChannel

logger = logging.getLogger(__name__)


def _describe_failure(status_code: Any, body: Any) -> str:
    """Summarize a SendGrid rejection as ``SendGrid status <code>: <errors>``."""

    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        body = body.strip()
        try:
            body = json.loads(body) if body else None
        except json.JSONDecodeError:
            pass

    details = None
    if isinstance(body, dict):
        errors = body.get("errors")
        reasons = [
            f"{error['message']} (field: {error['field']})"
            if error.get("field")
            else str(error["message"])
            for error in (errors if isinstance(errors, list) else [])
            if isinstance(error, dict) and error.get("message")
        ]
        details = "; ".join(reasons) or json.dumps(body, default=str)
    elif isinstance(body, list):
        details = "; ".join(str(item) for item in body) or None
    elif isinstance(body, str):
        details = body

    if status_code:
        prefix = f"SendGrid status {status_code}"
        return f"{prefix}: {details}" if details else prefix
    return f"SendGrid error: {details}" if details else "SendGrid request failed"


def _header(headers: Any, name: str) -> str | None:
    if headers is None:
        return None
    getter = getattr(headers, "get", None)
    if getter is None:
        return None
    value = getter(name)
    return str(value) if value else None


class SendGridChannel(DeliveryChannel):
    """Deliver messages through the SendGrid REST API."""

    name = "sendgrid"

    def __init__(self, settings: Settings) -> None:
        self._api_key = settings.sendgrid_api_key
        self._sender = settings.sendgrid_sender
        self._sender_name = settings.mail_from_name

    @property
    def configured(self) -> bool:
        return bool(self._api_key and self._sender)

    async def deliver(self, message: DeliveryMessage) -> ChannelResult:
        if not self.configured:
            logger.info("SendGrid configuration incomplete; skipping primary channel")
            return ChannelResult(success=False, error="SendGrid no está configurado")
        return await to_thread.run_sync(self._send, message)

    def _build_mail(self, message: DeliveryMessage) -> Mail:
        mail = Mail(
            from_email=From(
                message.sender or self._sender,
                message.sender_name or self._sender_name,
            ),
            to_emails=message.recipient,
            subject=message.subject,
            html_content=message.html,
        )
        if message.reply_to:
            mail.reply_to = ReplyTo(message.reply_to)
        return mail

    def _send(self, message: DeliveryMessage) -> ChannelResult:
        mail = self._build_mail(message)
        try:
            client = SendGridAPIClient(self._api_key)
            response = client.send(mail)
        except Exception as exc:
            error = _describe_failure(
                getattr(exc, "status_code", None), getattr(exc, "body", None)
            )
            logger.error("SendGrid API request failed for %s: %s", message.kind, error)
            return ChannelResult(success=False, error=error)

        status_code = getattr(response, "status_code", None)
        if not isinstance(status_code, int) or not 200 <= status_code < 300:
            error = _describe_failure(status_code, getattr(response, "body", None))
            logger.error("SendGrid API responded with an error: %s", error)
            return ChannelResult(success=False, error=error)

        return ChannelResult(
            success=True,
            message_id=_header(getattr(response, "headers", None), "X-Message-Id"),
        )


__all__ = ["SendGridChannel"]
