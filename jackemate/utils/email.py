from __future__ import annotations

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import make_msgid
from typing import Optional

from jackemate.config import settings

logger = logging.getLogger(__name__)


def is_email_enabled() -> bool:
    """Return True when email notifications are configured and enabled."""
    if not settings.EMAIL_NOTIFICATIONS_ENABLED:
        return False
    if not settings.SMTP_SERVER:
        return False
    if not settings.EMAIL_FROM:
        return False
    return True


def send_email(
    *,
    to_email: str,
    subject: str,
    body_text: str,
    body_html: Optional[str] = None,
) -> Optional[str]:
    """
    Send an email using SMTP settings.

    Returns the Message-ID on success. Failures are logged and None is returned.
    """
    if not is_email_enabled():
        return None

    smtp_server = settings.SMTP_SERVER
    from_email = settings.EMAIL_FROM

    message_id = make_msgid(domain=from_email.split("@")[-1])
    msg = MIMEMultipart("alternative")
    msg["From"] = f"JackeMate <{from_email}>"
    msg["To"] = to_email
    msg["Subject"] = subject
    msg["Message-ID"] = message_id
    msg.attach(MIMEText(body_text, "plain", "utf-8"))
    if body_html:
        msg.attach(MIMEText(body_html, "html", "utf-8"))

    username = settings.SMTP_USERNAME or from_email
    password = settings.EMAIL_PASSWORD or ""

    try:
        if settings.SMTP_USE_SSL:
            server = smtplib.SMTP_SSL(
                smtp_server,
                settings.SMTP_PORT,
                timeout=settings.SMTP_TIMEOUT_SECONDS,
            )
        else:
            server = smtplib.SMTP(
                smtp_server,
                settings.SMTP_PORT,
                timeout=settings.SMTP_TIMEOUT_SECONDS,
            )

        with server:
            if settings.SMTP_USE_TLS and not settings.SMTP_USE_SSL:
                server.starttls()
            if password:
                server.login(username, password)
            server.sendmail(from_email, [to_email], msg.as_string())
        return message_id
    except (smtplib.SMTPException, OSError) as exc:
        logger.warning("Email send failed for '%s': %s", to_email, exc)
        return None
