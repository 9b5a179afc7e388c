"""Logging module with structured logging and request tracking."""

from login_service.core.logging.middleware import RequestLoggingMiddleware
from login_service.core.logging.configure import configure_logging


__all__ = [
    "RequestLoggingMiddleware",
    "configure_logging",
]
