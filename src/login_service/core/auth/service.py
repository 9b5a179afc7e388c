"""Account service for registration, login, token and password management."""

from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends
from sqlalchemy.exc import IntegrityError

from login_service.api.dependencies import DBSession
from login_service.core.auth.authenticator import CredentialAuthenticator
from login_service.core.auth.dependencies import Hasher, TokenSvc
from login_service.core.auth.schemas import TokenPair
from login_service.core.email import EmailDeliveryError, Mailer, OutgoingEmail
from login_service.core.errors import (
    ConflictError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotFoundError,
    ServiceUnavailableError,
    ValidationError,
)
from login_service.modules.users.models import Account
from login_service.modules.users.repos import AccountRepo
from login_service.modules.users.schemas import validate_password, validate_username


logger = structlog.get_logger()

RESET_EMAIL_SUBJECT = "Restore Password"


def _field_error(field: str, message: str) -> ValidationError:
    return ValidationError(
        "Request validation failed",
        errors=[{"field": field, "message": message}],
    )


def _check_password(password: str | None, field: str = "password") -> str:
    try:
        return validate_password(password)
    except ValueError as e:
        raise _field_error(field, str(e)) from e


class AccountService:
    """Service for account authentication operations.

    Handles registration, login, token refresh and logout, password
    change, and the password-reset flow.
    """

    def __init__(
        self,
        db: DBSession,
        accounts: AccountRepo,
        hasher: Hasher,
        tokens: TokenSvc,
        mailer: Mailer,
    ) -> None:
        self.db = db
        self.accounts = accounts
        self.hasher = hasher
        self.tokens = tokens
        self.mailer = mailer
        self.authenticator = CredentialAuthenticator(accounts, hasher)

    async def register(
        self,
        username: str | None,
        password: str | None,
        email: str | None = None,
    ) -> Account:
        """Register a new account.

        Args:
            username: Requested username, stored lowercased
            password: Plain text password
            email: Optional email address for password resets

        Returns:
            The created account

        Raises:
            ValidationError: If the username or password is missing or invalid
            ConflictError: If the username or email is already taken
        """
        try:
            normalized = validate_username(username)
        except ValueError as e:
            raise _field_error("username", str(e)) from e
        password = _check_password(password)
        normalized_email = email.strip().lower() if email else None

        if await self.accounts.get_by_username(normalized):
            raise ConflictError("Username already registered")
        if normalized_email and await self.accounts.get_by_email(normalized_email):
            raise ConflictError("Email already registered")

        account = Account(
            username=normalized,
            password_hash=self.hasher.hash(password),
            email=normalized_email,
        )
        try:
            account = await self.accounts.create(account)
        except IntegrityError as e:
            # Lost a race against a concurrent registration
            await self.db.rollback()
            raise ConflictError("Username already registered") from e

        logger.info("account_registered", account_id=str(account.id))
        return account

    async def login(self, username: str, password: str) -> TokenPair:
        """Authenticate with username and password.

        Args:
            username: Username in any case
            password: Plain text password

        Returns:
            Access and refresh tokens

        Raises:
            InvalidCredentialsError: If the credentials do not authenticate
        """
        account = await self.authenticator.authenticate(username, password)
        tokens = await self._create_tokens(account)
        logger.info("login_succeeded", account_id=str(account.id))
        return tokens

    async def refresh(self, refresh_token: str) -> TokenPair:
        """Exchange a refresh token for a new token pair.

        The presented refresh token is revoked and a new one is issued.

        Args:
            refresh_token: The refresh token

        Returns:
            New token pair

        Raises:
            InvalidTokenError: If the refresh token is unknown, revoked, or its
                account no longer exists
        """
        stored = await self.tokens.verify_refresh_token(refresh_token)

        try:
            await self.tokens.revoke_refresh_token(refresh_token)
        except NotFoundError as e:
            # Revoked concurrently after the lookup
            raise InvalidTokenError() from e

        account = await self.accounts.get_by_id(stored.account_id)
        if not account:
            raise InvalidTokenError()

        return await self._create_tokens(account)

    async def logout(self, refresh_token: str) -> None:
        """Logout by revoking the refresh token.

        Args:
            refresh_token: The refresh token to revoke

        Raises:
            NotFoundError: If the token is unknown or already revoked
        """
        await self.tokens.revoke_refresh_token(refresh_token)

    async def change_password(
        self,
        account_id: UUID | str,
        current_password: str,
        new_password: str,
        new_password_confirm: str,
    ) -> None:
        """Change an account's password.

        All of the account's refresh tokens are revoked afterwards.

        Args:
            account_id: The account's UUID
            current_password: The password in use
            new_password: The replacement password
            new_password_confirm: Must equal new_password

        Raises:
            ValidationError: If the new password is invalid or not confirmed
            NotFoundError: If the account does not exist
            InvalidCredentialsError: If current_password is wrong
        """
        new_password = _check_password(new_password, field="new_password")
        if new_password != new_password_confirm:
            raise _field_error("new_password_confirm", "Passwords do not match")

        account = await self._get_account(account_id)
        if not self.hasher.verify(current_password, account.password_hash):
            raise InvalidCredentialsError("Current password is incorrect")

        await self._set_password(account, new_password)
        logger.info("password_changed", account_id=str(account.id))

    async def request_password_reset(self, email: str) -> None:
        """Email a password-reset token to the account holder.

        Args:
            email: The account's email address

        Raises:
            NotFoundError: If no account has this email
            ServiceUnavailableError: If the email could not be sent
        """
        account = await self.accounts.get_by_email(email.strip())
        if not account or not account.email:
            raise NotFoundError("No account with this email", resource="account")

        reset_token = self.tokens.issue_password_reset_token(account)
        message = OutgoingEmail(
            to=account.email,
            subject=RESET_EMAIL_SUBJECT,
            body=f"This is your reset token: {reset_token}",
        )
        try:
            await self.mailer.send(message)
        except EmailDeliveryError as e:
            raise ServiceUnavailableError("Could not send the reset email") from e

        logger.info("password_reset_requested", account_id=str(account.id))

    async def reset_password(self, reset_token: str, new_password: str) -> None:
        """Set a new password using a password-reset token.

        The token is consumed and all refresh tokens are revoked.

        Args:
            reset_token: Token received by email
            new_password: The replacement password

        Raises:
            ValidationError: If the new password is invalid
            InvalidTokenError: If the token is invalid, already used, or its
                account no longer exists
        """
        new_password = _check_password(new_password, field="new_password")
        claims = await self.tokens.consume_password_reset_token(reset_token)

        account = await self.accounts.get_by_id(UUID(claims.sub))
        if not account:
            raise InvalidTokenError()

        await self._set_password(account, new_password)
        logger.info("password_reset_completed", account_id=str(account.id))

    async def _get_account(self, account_id: UUID | str) -> Account:
        try:
            parsed_id = account_id if isinstance(account_id, UUID) else UUID(account_id)
        except ValueError as e:
            raise NotFoundError("Account not found", resource="account") from e

        account = await self.accounts.get_by_id(parsed_id)
        if not account:
            raise NotFoundError(
                "Account not found", resource="account", resource_id=str(account_id)
            )
        return account

    async def _set_password(self, account: Account, new_password: str) -> None:
        account.password_hash = self.hasher.hash(new_password)
        await self.accounts.update(account)
        await self.tokens.revoke_all_refresh_tokens(account.id)

    async def _create_tokens(self, account: Account) -> TokenPair:
        """Create a new token pair for an account.

        Args:
            account: The account to create tokens for

        Returns:
            TokenPair with access and refresh tokens
        """
        return TokenPair(
            access_token=self.tokens.issue_access_token(account),
            refresh_token=await self.tokens.issue_refresh_token(account),
            expires_in=self.tokens.access_token_lifetime_seconds,
        )


# Type alias for dependency injection
AccountSvc = Annotated[AccountService, Depends(AccountService)]
