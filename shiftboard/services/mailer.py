from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from email.utils import formataddr
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..config import get_settings

logger = logging.getLogger(__name__)
templates_dir = Path(__file__).resolve().parents[1] / "templates" / "email"
_env = Environment(
    loader=FileSystemLoader(str(templates_dir)),
    undefined=StrictUndefined,
    trim_blocks=True,
    lstrip_blocks=True,
)


def render_email(template_name: str, context: dict) -> str:
    return _env.get_template(template_name).render(**context)


def _send_email(recipient: str, subject: str, body: str) -> None:
    settings = get_settings()
    if not settings.smtp_host or not settings.smtp_from:
        logger.warning("SMTP not configured; printing email to log.")
        logger.info("Email to %s | %s\n%s", recipient, subject, body)
        return

    message = EmailMessage()
    message["Subject"] = subject
    message["From"] = formataddr(
        (settings.smtp_from_name or settings.app_name, settings.smtp_from)
    )
    message["To"] = recipient
    message.set_content(body)

    try:
        smtp_class = smtplib.SMTP_SSL if settings.smtp_use_ssl else smtplib.SMTP
        with smtp_class(settings.smtp_host, settings.smtp_port, timeout=15) as smtp:
            if settings.smtp_use_tls and not settings.smtp_use_ssl:
                smtp.starttls()
            if settings.smtp_username:
                smtp.login(settings.smtp_username, settings.smtp_password or "")
            smtp.send_message(message)
    except Exception as exc:  # pragma: no cover - network failures
        logger.error("Failed to send email to %s: %s", recipient, exc)
        raise


def send_schedule_email(recipient: str, context: dict) -> None:
    subject = f"Your schedule at {context['restaurant_name']}: {context['schedule_start']} - {context['schedule_end']}"
    body = render_email("schedule_notification.txt", context)
    _send_email(recipient, subject, body)
