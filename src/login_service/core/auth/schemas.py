"""Authentication schemas for token handling."""

from pydantic import BaseModel


class AccessTokenClaims(BaseModel):
    """Verified claims of an access token.

    Attributes:
        sub: The account identifier
        username: The account's username at issue time
    """

    sub: str
    username: str | None = None


class PasswordResetClaims(BaseModel):
    """Verified claims of a password-reset token.

    Attributes:
        sub: The account identifier
        jti: Unique token identifier, used to enforce single use
    """

    sub: str
    jti: str


class Identity(BaseModel):
    """The authenticated caller of a request."""

    sub: str
    username: str | None = None


class TokenPair(BaseModel):
    """A pair of access and refresh tokens.

    Attributes:
        access_token: Short-lived RS256 token for API access
        refresh_token: Opaque token for getting new access tokens
        token_type: Always "bearer"
        expires_in: Access token expiration in seconds
    """

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int
