"""
DevCamper API — Transactional Email
====================================

Plain-text mail over SMTP with aiosmtplib. Only the password-reset flow
sends mail today. Delivery failures surface as EmailDeliveryError so the
caller can roll back whatever it prepared for the message.
"""

import logging
from email.message import EmailMessage

import aiosmtplib

from devcamper.config import Settings
from devcamper.exceptions import EmailDeliveryError

logger = logging.getLogger(__name__)

SMTP_TIMEOUT = 15


class EmailService:
    def __init__(self, settings: Settings):
        self._host = settings.smtp_host
        self._port = settings.smtp_port
        self._username = settings.smtp_email or None
        self._password = settings.smtp_password or None
        self._sender = f"{settings.from_name} <{settings.from_email}>"

    async def send(self, to: str, subject: str, text: str) -> None:
        message = EmailMessage()
        message["From"] = self._sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content(text)

        try:
            await aiosmtplib.send(
                message,
                hostname=self._host,
                port=self._port,
                username=self._username,
                password=self._password,
                timeout=SMTP_TIMEOUT,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error("Failed to send '%s' to %s: %s", subject, to, e)
            raise EmailDeliveryError(context={"smtp_error": str(e)})

        logger.info("Email '%s' sent to %s", subject, to)
