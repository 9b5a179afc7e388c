"""Token issuance, verification and revocation.

Three token classes are managed here:
- Access tokens: RS256, short-lived, stateless
- Refresh tokens: opaque random values, stored hashed, valid until revoked
- Password-reset tokens: RS256 with their own key pair, single use
"""

from uuid import UUID

import structlog
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError

from login_service.core.auth.backend import TokenSigner, generate_refresh_token, hash_token
from login_service.core.auth.schemas import AccessTokenClaims, PasswordResetClaims
from login_service.core.errors import InvalidTokenError, NotFoundError
from login_service.modules.users.models import Account, ConsumedResetToken, RefreshToken
from login_service.modules.users.repos import (
    ConsumedResetTokenRepository,
    RefreshTokenRepository,
)


logger = structlog.get_logger()


class TokenService:
    """Issues and verifies access, refresh and password-reset tokens."""

    def __init__(
        self,
        access_signer: TokenSigner,
        reset_signer: TokenSigner,
        refresh_tokens: RefreshTokenRepository,
        consumed_reset_tokens: ConsumedResetTokenRepository,
    ) -> None:
        self.access_signer = access_signer
        self.reset_signer = reset_signer
        self.refresh_tokens = refresh_tokens
        self.consumed_reset_tokens = consumed_reset_tokens

    @property
    def access_token_lifetime_seconds(self) -> int:
        """Access token lifetime, as reported to clients."""
        return int(self.access_signer.lifetime.total_seconds())

    # ============================================================
    # Access Tokens
    # ============================================================

    def issue_access_token(self, account: Account) -> str:
        """Create an access token for an account."""
        return self.access_signer.issue(
            {"sub": str(account.id), "username": account.username}
        )

    def verify_access_token(self, token: str) -> AccessTokenClaims:
        """Verify an access token.

        Raises:
            InvalidTokenError: If the token is not a valid access token
        """
        claims = self.access_signer.verify(token)
        try:
            return AccessTokenClaims.model_validate(claims)
        except PydanticValidationError as e:
            raise InvalidTokenError() from e

    # ============================================================
    # Refresh Tokens
    # ============================================================

    async def issue_refresh_token(self, account: Account) -> str:
        """Create and store a refresh token for an account.

        Returns:
            The token value; only its hash is persisted
        """
        value = generate_refresh_token()
        await self.refresh_tokens.create(
            RefreshToken(account_id=account.id, token_hash=hash_token(value))
        )
        logger.info("refresh_token_issued", account_id=str(account.id))
        return value

    async def verify_refresh_token(self, value: str) -> RefreshToken:
        """Look up a refresh token that has not been revoked.

        Raises:
            InvalidTokenError: If the value is unknown or revoked
        """
        stored = await self.refresh_tokens.get_by_hash(hash_token(value))
        if stored is None:
            raise InvalidTokenError()
        return stored

    async def revoke_refresh_token(self, value: str) -> None:
        """Revoke a refresh token.

        Raises:
            NotFoundError: If there is nothing to revoke
        """
        deleted = await self.refresh_tokens.delete_by_hash(hash_token(value))
        if not deleted:
            raise NotFoundError("Refresh token not found", resource="refresh_token")
        logger.info("refresh_token_revoked")

    async def revoke_all_refresh_tokens(self, account_id: UUID) -> int:
        """Revoke every refresh token of an account.

        Returns:
            Number of tokens revoked
        """
        count = await self.refresh_tokens.delete_all_for_account(account_id)
        logger.info("refresh_tokens_revoked", account_id=str(account_id), count=count)
        return count

    # ============================================================
    # Password-Reset Tokens
    # ============================================================

    def issue_password_reset_token(self, account: Account) -> str:
        """Create a password-reset token for an account."""
        return self.reset_signer.issue({"sub": str(account.id)})

    def verify_password_reset_token(self, token: str) -> PasswordResetClaims:
        """Verify a password-reset token without consuming it.

        Raises:
            InvalidTokenError: If the token is not a valid reset token
        """
        claims = self.reset_signer.verify(token)
        try:
            return PasswordResetClaims.model_validate(claims)
        except PydanticValidationError as e:
            raise InvalidTokenError() from e

    async def consume_password_reset_token(self, token: str) -> PasswordResetClaims:
        """Verify a password-reset token and mark it as used.

        Raises:
            InvalidTokenError: If the token is invalid or was already used
        """
        claims = self.verify_password_reset_token(token)
        if await self.consumed_reset_tokens.exists(claims.jti):
            logger.warning("password_reset_token_replayed", account_id=claims.sub)
            raise InvalidTokenError()

        try:
            account_id = UUID(claims.sub)
        except ValueError as e:
            raise InvalidTokenError() from e

        try:
            await self.consumed_reset_tokens.create(
                ConsumedResetToken(jti=claims.jti, account_id=account_id)
            )
        except IntegrityError as e:
            raise InvalidTokenError() from e
        return claims
