"""Database layer - session management, base models, and mixins."""

from login_service.core.database.base import (
    Base,
    CreatedAtMixin,
    TimestampMixin,
    UUIDMixin,
)
from login_service.core.database.session import (
    create_engine,
    create_session_factory,
    get_db,
)


__all__ = [
    "Base",
    "CreatedAtMixin",
    "TimestampMixin",
    "UUIDMixin",
    "create_engine",
    "create_session_factory",
    "get_db",
]
