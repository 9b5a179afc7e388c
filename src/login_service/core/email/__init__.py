"""Email delivery backends."""

from login_service.core.email.sender import (
    ConsoleEmailSender,
    EmailDeliveryError,
    EmailSender,
    Mailer,
    OutgoingEmail,
    SmtpEmailSender,
    build_email_sender,
    get_email_sender,
)


__all__ = [
    "ConsoleEmailSender",
    "EmailDeliveryError",
    "EmailSender",
    "Mailer",
    "OutgoingEmail",
    "SmtpEmailSender",
    "build_email_sender",
    "get_email_sender",
]
