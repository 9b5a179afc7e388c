"""Outbound email delivery.

Two backends are available:
- console: logs messages with structlog instead of sending them
- smtp: delivers through an SMTP server with optional STARTTLS
"""

import asyncio
import smtplib
from dataclasses import dataclass
from email.mime.text import MIMEText
from typing import Annotated

import structlog
from fastapi import Depends, Request

from login_service.config import Settings


logger = structlog.get_logger()


class EmailDeliveryError(Exception):
    """Raised when a message could not be handed to the mail server."""


@dataclass(frozen=True)
class OutgoingEmail:
    """A plain-text email message."""

    to: str
    subject: str
    body: str


class EmailSender:
    """Base class for email backends."""

    async def send(self, message: OutgoingEmail) -> None:
        """Deliver a message.

        Raises:
            EmailDeliveryError: If the message could not be delivered
        """
        raise NotImplementedError


class ConsoleEmailSender(EmailSender):
    """Writes messages to the log. Used in development and tests."""

    async def send(self, message: OutgoingEmail) -> None:
        logger.info(
            "email_sent",
            backend="console",
            to=message.to,
            subject=message.subject,
            body=message.body,
        )


class SmtpEmailSender(EmailSender):
    """Delivers messages through an SMTP server."""

    def __init__(
        self,
        host: str,
        port: int,
        from_address: str,
        from_name: str,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        timeout: float = 10.0,
    ) -> None:
        self.host = host
        self.port = port
        self.from_address = from_address
        self.from_name = from_name
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    def _build_message(self, message: OutgoingEmail) -> MIMEText:
        msg = MIMEText(message.body, "plain", "utf-8")
        msg["Subject"] = message.subject
        msg["From"] = f"{self.from_name} <{self.from_address}>"
        msg["To"] = message.to
        return msg

    def _deliver(self, message: OutgoingEmail) -> None:
        msg = self._build_message(message)
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            if self.use_tls:
                server.starttls()
            if self.username and self.password:
                server.login(self.username, self.password)
            server.send_message(msg)

    async def send(self, message: OutgoingEmail) -> None:
        """Send a message without blocking the event loop.

        Raises:
            EmailDeliveryError: On any SMTP or connection failure
        """
        try:
            await asyncio.to_thread(self._deliver, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("email_delivery_failed", to=message.to, error=str(e))
            raise EmailDeliveryError(str(e)) from e

        logger.info("email_sent", backend="smtp", to=message.to)


def build_email_sender(settings: Settings) -> EmailSender:
    """Create the email backend selected by the settings."""
    if settings.email_backend == "smtp":
        return SmtpEmailSender(
            host=settings.smtp_host,
            port=settings.smtp_port,
            from_address=settings.email_from_address,
            from_name=settings.email_from_name,
            username=settings.smtp_username,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
        )
    return ConsoleEmailSender()


def get_email_sender(request: Request) -> EmailSender:
    """Get the application's email backend."""
    return request.app.state.email_sender


# Type alias for dependency injection
Mailer = Annotated[EmailSender, Depends(get_email_sender)]
