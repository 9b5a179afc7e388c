"""Tests for TokenService."""

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from login_service.core.auth.backend import TokenKeyPair, TokenSigner, hash_token
from login_service.core.auth.tokens import TokenService
from login_service.core.errors import InvalidTokenError, NotFoundError
from login_service.modules.users.models import Account
from login_service.modules.users.repos import (
    ConsumedResetTokenRepository,
    RefreshTokenRepository,
)


pytestmark = pytest.mark.unit


class Clock:
    def __init__(self) -> None:
        self.now = datetime.now(UTC)

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def service(
    db: AsyncSession,
    access_keys: TokenKeyPair,
    reset_keys: TokenKeyPair,
    clock: Clock,
) -> TokenService:
    return TokenService(
        access_signer=TokenSigner(
            access_keys, timedelta(minutes=15), "access", clock=clock
        ),
        reset_signer=TokenSigner(
            reset_keys, timedelta(minutes=10), "password_reset", clock=clock
        ),
        refresh_tokens=RefreshTokenRepository(db),
        consumed_reset_tokens=ConsumedResetTokenRepository(db),
    )


class TestAccessTokens:
    """Tests for access token issue and verification."""

    def test_round_trip(self, service: TokenService, account: Account):
        """A fresh access token verifies to the account's id and username."""
        claims = service.verify_access_token(service.issue_access_token(account))

        assert claims.sub == str(account.id)
        assert claims.username == "alice"

    def test_expires_after_lifetime(
        self, service: TokenService, account: Account, clock: Clock
    ):
        """Access tokens stop verifying after the configured lifetime."""
        token = service.issue_access_token(account)
        clock.now += timedelta(minutes=15)

        with pytest.raises(InvalidTokenError):
            service.verify_access_token(token)

    def test_reset_token_not_accepted_as_access(
        self, service: TokenService, account: Account
    ):
        """A password-reset token is never an access token."""
        with pytest.raises(InvalidTokenError):
            service.verify_access_token(service.issue_password_reset_token(account))

    def test_lifetime_seconds(self, service: TokenService):
        """The reported lifetime matches the signer."""
        assert service.access_token_lifetime_seconds == 900


class TestRefreshTokens:
    """Tests for refresh token storage and revocation."""

    async def test_issue_stores_only_hash(
        self, service: TokenService, account: Account, db: AsyncSession
    ):
        """The stored record holds the hash, not the value."""
        value = await service.issue_refresh_token(account)

        stored = await RefreshTokenRepository(db).get_by_hash(hash_token(value))
        assert stored is not None
        assert stored.account_id == account.id
        assert stored.token_hash != value

    async def test_verify_returns_record(self, service: TokenService, account: Account):
        """A live refresh token verifies to its record."""
        value = await service.issue_refresh_token(account)

        record = await service.verify_refresh_token(value)

        assert record.account_id == account.id

    async def test_unknown_value_rejected(self, service: TokenService):
        """An unknown refresh token is invalid."""
        with pytest.raises(InvalidTokenError):
            await service.verify_refresh_token("never-issued")

    async def test_revoke_twice(self, service: TokenService, account: Account):
        """The second revoke reports NotFound and the token stays dead."""
        value = await service.issue_refresh_token(account)

        await service.revoke_refresh_token(value)
        with pytest.raises(NotFoundError):
            await service.revoke_refresh_token(value)
        with pytest.raises(InvalidTokenError):
            await service.verify_refresh_token(value)

    async def test_refresh_tokens_do_not_expire(
        self, service: TokenService, account: Account, clock: Clock
    ):
        """Only revocation ends a refresh token."""
        value = await service.issue_refresh_token(account)
        clock.now += timedelta(days=365)

        assert (await service.verify_refresh_token(value)).account_id == account.id

    async def test_revoke_all(
        self, service: TokenService, account: Account, other_account: Account
    ):
        """revoke_all only touches the given account's tokens."""
        first = await service.issue_refresh_token(account)
        second = await service.issue_refresh_token(account)
        others = await service.issue_refresh_token(other_account)

        revoked = await service.revoke_all_refresh_tokens(account.id)

        assert revoked == 2
        for value in (first, second):
            with pytest.raises(InvalidTokenError):
                await service.verify_refresh_token(value)
        assert (await service.verify_refresh_token(others)).account_id == other_account.id


class TestPasswordResetTokens:
    """Tests for password-reset tokens."""

    def test_round_trip(self, service: TokenService, account: Account):
        """A reset token verifies to its subject."""
        claims = service.verify_password_reset_token(
            service.issue_password_reset_token(account)
        )

        assert claims.sub == str(account.id)
        assert claims.jti

    def test_access_token_not_accepted_as_reset(
        self, service: TokenService, account: Account
    ):
        """An access token is never a reset token."""
        with pytest.raises(InvalidTokenError):
            service.verify_password_reset_token(service.issue_access_token(account))

    def test_expires_after_lifetime(
        self, service: TokenService, account: Account, clock: Clock
    ):
        """Reset tokens have their own, shorter lifetime."""
        token = service.issue_password_reset_token(account)
        clock.now += timedelta(minutes=10)

        with pytest.raises(InvalidTokenError):
            service.verify_password_reset_token(token)

    async def test_consume_is_single_use(self, service: TokenService, account: Account):
        """A consumed reset token cannot be used again."""
        token = service.issue_password_reset_token(account)

        claims = await service.consume_password_reset_token(token)
        assert claims.sub == str(account.id)

        with pytest.raises(InvalidTokenError):
            await service.consume_password_reset_token(token)

    async def test_consume_keeps_other_tokens_valid(
        self, service: TokenService, account: Account
    ):
        """Consuming one token leaves a newer one usable."""
        first = service.issue_password_reset_token(account)
        second = service.issue_password_reset_token(account)

        await service.consume_password_reset_token(first)

        assert (await service.consume_password_reset_token(second)).sub == str(account.id)
