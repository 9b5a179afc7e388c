"""Account and token database models."""

from uuid import UUID

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from login_service.core.constants import (
    MAX_EMAIL_LENGTH,
    MAX_USERNAME_LENGTH,
    SHA256_HEX_LENGTH,
    TOKEN_JTI_LENGTH,
)
from login_service.core.database.base import (
    Base,
    CreatedAtMixin,
    TimestampMixin,
    UUIDMixin,
)


class Account(Base, UUIDMixin, TimestampMixin):
    """An account holder that can log in with username and password.

    Attributes:
        username: Unique login name, stored lowercased
        password_hash: Bcrypt digest of the password
        email: Optional address used for password reset, stored lowercased
    """

    __tablename__ = "accounts"

    username: Mapped[str] = mapped_column(
        String(MAX_USERNAME_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    password_hash: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    email: Mapped[str | None] = mapped_column(
        String(MAX_EMAIL_LENGTH),
        nullable=True,
        unique=True,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Account(id={self.id}, username={self.username})>"


class RefreshToken(Base, UUIDMixin, CreatedAtMixin):
    """Refresh token issued at login.

    Only the SHA-256 hash of the token value is stored. A token is valid
    for as long as its row exists; revocation deletes the row.

    Attributes:
        account_id: The account this token belongs to
        token_hash: SHA-256 hash of the refresh token
    """

    __tablename__ = "refresh_tokens"

    account_id: Mapped[UUID] = mapped_column(
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    token_hash: Mapped[str] = mapped_column(
        String(SHA256_HEX_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<RefreshToken(id={self.id}, account_id={self.account_id})>"


class ConsumedResetToken(Base, UUIDMixin, CreatedAtMixin):
    """A password-reset token that has already been used.

    Attributes:
        jti: The token identifier claim of the consumed token
        account_id: The account whose password was reset
    """

    __tablename__ = "consumed_reset_tokens"

    jti: Mapped[str] = mapped_column(
        String(TOKEN_JTI_LENGTH * 2),
        nullable=False,
        unique=True,
        index=True,
    )
    account_id: Mapped[UUID] = mapped_column(
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<ConsumedResetToken(jti={self.jti}, account_id={self.account_id})>"
