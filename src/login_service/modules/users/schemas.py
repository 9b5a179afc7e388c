"""Pydantic schemas for account operations."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from login_service.core.constants import (
    DEFAULT_PAGE_SIZE,
    FORBIDDEN_USERNAME_CHARS,
    MAX_PAGE_SIZE,
    MAX_PASSWORD_LENGTH,
    MAX_USERNAME_LENGTH,
    MIN_PASSWORD_LENGTH,
)


# ============================================================
# Input Validation
# ============================================================


def validate_username(username: str | None) -> str:
    """Validate and normalize a username.

    Args:
        username: The requested username

    Returns:
        The stripped, lowercased username

    Raises:
        ValueError: If the username is missing, too long, or contains
            forbidden characters
    """
    normalized = (username or "").strip().lower()
    if not normalized:
        raise ValueError("Username is required")
    if len(normalized) > MAX_USERNAME_LENGTH:
        raise ValueError(
            f"Username must be at most {MAX_USERNAME_LENGTH} characters long"
        )
    if any(char in normalized for char in FORBIDDEN_USERNAME_CHARS):
        forbidden = " ".join(FORBIDDEN_USERNAME_CHARS)
        raise ValueError(f"Username must not contain any of: {forbidden}")
    return normalized


def validate_password(password: str | None) -> str:
    """Validate a new password.

    Args:
        password: The requested password

    Returns:
        The password, unchanged

    Raises:
        ValueError: If the password is missing or its length is out of range
    """
    if not password:
        raise ValueError("Password is required")
    if not MIN_PASSWORD_LENGTH <= len(password) <= MAX_PASSWORD_LENGTH:
        raise ValueError(
            f"Password must be between {MIN_PASSWORD_LENGTH} and "
            f"{MAX_PASSWORD_LENGTH} characters long"
        )
    return password


# ============================================================
# Account Schemas
# ============================================================


class AccountResponse(BaseModel):
    """Schema for account response data."""

    id: UUID
    username: str
    email: EmailStr | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PageRef(BaseModel):
    """Reference to a neighbouring page of a listing."""

    page: int
    limit: int


class AccountListResponse(BaseModel):
    """Schema for a page of accounts."""

    items: list[AccountResponse]
    total: int
    total_pages: int
    next: PageRef | None = None
    previous: PageRef | None = None


class AccountListParams(BaseModel):
    """Query parameters for listing accounts."""

    filter: str | None = Field(None, max_length=MAX_USERNAME_LENGTH)
    page: int | None = Field(None, ge=1)
    limit: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)


# ============================================================
# Authentication Schemas
# ============================================================


class LoginRequest(BaseModel):
    """Schema for username/password login."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    """Schema for authentication token response."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Access token expiration in seconds")


class RefreshTokenRequest(BaseModel):
    """Schema for refreshing or revoking a refresh token."""

    refresh_token: str = Field(..., min_length=1)


# ============================================================
# Registration Schemas
# ============================================================


class RegisterRequest(BaseModel):
    """Schema for account registration."""

    username: str = Field(..., max_length=MAX_USERNAME_LENGTH)
    password: str
    email: EmailStr | None = None

    @field_validator("username")
    @classmethod
    def username_rules(cls, v: str) -> str:
        """Validate and normalize the username."""
        return validate_username(v)

    @field_validator("password")
    @classmethod
    def password_rules(cls, v: str) -> str:
        """Validate password length."""
        return validate_password(v)


class RegisterResponse(BaseModel):
    """Schema for registration response."""

    id: UUID


# ============================================================
# Password Schemas
# ============================================================


class PasswordChangeRequest(BaseModel):
    """Schema for changing a password while logged in."""

    current_password: str = Field(..., min_length=1)
    new_password: str
    new_password_confirm: str

    @field_validator("new_password")
    @classmethod
    def password_rules(cls, v: str) -> str:
        """Validate password length."""
        return validate_password(v)


class PasswordResetRequest(BaseModel):
    """Schema for requesting a password-reset email."""

    email: EmailStr


class PasswordResetConfirm(BaseModel):
    """Schema for setting a new password with a reset token."""

    new_password: str

    @field_validator("new_password")
    @classmethod
    def password_rules(cls, v: str) -> str:
        """Validate password length."""
        return validate_password(v)
