"""HTML bodies for the transactional emails.

Templates use ``{{field}}`` placeholders. :func:`render` replaces each
placeholder with the HTML escaped value and leaves unknown placeholders empty.
"""

from __future__ import annotations

import html
import re
from typing import Any

_PLACEHOLDER = re.compile(r"\{\{\s*([a-zA-Z_][a-zA-Z0-9_]*)\s*\}\}")

_LAYOUT = """<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8">
    <title>{{title}} - QR Tour Guide</title>
    <style>
      body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px; }
      .header { background: %(header)s; color: white; padding: 30px; text-align: center; border-radius: 10px 10px 0 0; }
      .content { background: #f9f9f9; padding: 30px; border-radius: 0 0 10px 10px; }
      .highlight { background: #e3f2fd; padding: 15px; border-radius: 5px; margin: 20px 0; border-left: 4px solid #2196f3; }
      .footer { text-align: center; margin-top: 30px; color: #666; font-size: 12px; }
      .button { display: inline-block; background: #4caf50; color: white; padding: 12px 24px; text-decoration: none; border-radius: 5px; margin: 10px 0; }
    </style>
  </head>
  <body>
    <div class="header">
      <h1>{{title}}</h1>
    </div>
    <div class="content">
%(body)s
      <p>Saludos,<br><strong>El equipo de QR Tour Guide</strong></p>
    </div>
    <div class="footer">
      <p>Este email fue enviado automáticamente desde QR Tour Guide</p>
      <p>Para contacto directo: {{contact_email}}</p>
    </div>
  </body>
</html>
"""

_DETAILS = """      <div class="highlight">
        <h3>Detalles de la Reserva</h3>
        <p><strong>ID de Reserva:</strong> {{reservation_id}}</p>
        <p><strong>Excursión:</strong> {{service_name}}</p>
        <p><strong>Fecha:</strong> {{reservation_date}}</p>
        <p><strong>Hora:</strong> {{reservation_time}}</p>
        <p><strong>Participantes:</strong> {{participants}}</p>
      </div>"""


def _layout(header: str, body: str) -> str:
    return _LAYOUT % {"header": header, "body": body}


RESERVATION_CONFIRMATION = _layout(
    "linear-gradient(135deg, #667eea 0%, #764ba2 100%)",
    f"""      <h2>Hola {{{{full_name}}}},</h2>
      <p>Hemos recibido tu reserva. Aquí tienes todos los detalles:</p>
{_DETAILS}
      <p>Si necesitas modificar tu reserva responde a este email.</p>
      <ul>
        <li>Llega 15 minutos antes de la hora programada</li>
        <li>Trae tu teléfono móvil para escanear los códigos QR</li>
      </ul>""",
)

PAYMENT_LINK = _layout(
    "linear-gradient(135deg, #ff6b6b 0%, #ee5a24 100%)",
    f"""      <h2>Hola {{{{full_name}}}},</h2>
      <p>Tu reserva está lista. Ahora puedes completar el pago de forma segura:</p>
{_DETAILS}
      <h3>Total a Pagar: ${{{{total_amount}}}} USD</h3>
      <p>Precio por persona: ${{{{price}}}} USD</p>
      <a href="{{{{payment_link}}}}" class="button">Pagar Ahora</a>
      <p><strong>Importante:</strong> una vez completado el pago recibirás un email de confirmación.</p>""",
)

PAYMENT_CONFIRMATION = _layout(
    "linear-gradient(135deg, #4caf50 0%, #2e7d32 100%)",
    f"""      <h2>Hola {{{{full_name}}}},</h2>
      <p>Tu pago ha sido procesado exitosamente. Tu reserva está garantizada.</p>
{_DETAILS}
      <p><strong>Total Pagado:</strong> ${{{{total_amount}}}} USD</p>
      <p>Guarda este email como comprobante de tu pago y reserva.</p>""",
)

ADMIN_RESERVATION_NOTICE = _layout(
    "linear-gradient(135deg, #ff6b6b 0%, #ee5a24 100%)",
    f"""      <h2>Acción requerida</h2>
      <p>Se ha recibido una nueva reserva que requiere tu atención y confirmación.</p>
{_DETAILS}
      <div class="highlight">
        <h3>Información del Cliente</h3>
        <p><strong>Nombre:</strong> {{{{full_name}}}}</p>
        <p><strong>Email:</strong> {{{{email}}}}</p>
        <p><strong>Teléfono:</strong> {{{{phone}}}}</p>
        <p><strong>Solicitudes especiales:</strong> {{{{special_requests}}}}</p>
        <p>Puedes responder directamente a este email para contactar al cliente.</p>
      </div>""",
)

STATUS_CONFIRMED = _layout(
    "linear-gradient(135deg, #4caf50 0%, #2e7d32 100%)",
    f"""      <h2>Hola {{{{full_name}}}},</h2>
      <p>¡Tu reserva ha sido confirmada!</p>
{_DETAILS}
      <p>{{{{admin_notes}}}}</p>""",
)

STATUS_CANCELLED = _layout(
    "linear-gradient(135deg, #9e9e9e 0%, #616161 100%)",
    f"""      <h2>Hola {{{{full_name}}}},</h2>
      <p>Lamentamos informarte que tu reserva ha sido cancelada.</p>
{_DETAILS}
      <p>{{{{admin_notes}}}}</p>
      <p>Si tienes preguntas responde a este email y te ayudaremos.</p>""",
)

STATUS_COMPLETED = _layout(
    "linear-gradient(135deg, #667eea 0%, #764ba2 100%)",
    f"""      <h2>Hola {{{{full_name}}}},</h2>
      <p>¡Gracias por visitarnos! Tu experiencia ha sido completada.</p>
{_DETAILS}
      <p>Nos encantaría conocer tu opinión sobre el tour.</p>""",
)

STATUS_GENERIC = _layout(
    "linear-gradient(135deg, #667eea 0%, #764ba2 100%)",
    f"""      <h2>Hola {{{{full_name}}}},</h2>
      <p>El estado de tu reserva ha cambiado a: <strong>{{{{status}}}}</strong>.</p>
{_DETAILS}
      <p>{{{{admin_notes}}}}</p>""",
)

STATUS_TEMPLATES = {
    "confirmed": STATUS_CONFIRMED,
    "cancelled": STATUS_CANCELLED,
    "completed": STATUS_COMPLETED,
}


def render(template: str, **fields: Any) -> str:
    """Substitute ``{{name}}`` placeholders with escaped ``fields`` values."""

    def replace(match: re.Match[str]) -> str:
        value = fields.get(match.group(1))
        if value is None:
            return ""
        return html.escape(str(value), quote=True)

    return _PLACEHOLDER.sub(replace, template)


def status_template(status: str) -> str:
    return STATUS_TEMPLATES.get(status, STATUS_GENERIC)


__all__ = [
    "ADMIN_RESERVATION_NOTICE",
    "PAYMENT_CONFIRMATION",
    "PAYMENT_LINK",
    "RESERVATION_CONFIRMATION",
    "STATUS_GENERIC",
    "STATUS_TEMPLATES",
    "render",
    "status_template",
]
