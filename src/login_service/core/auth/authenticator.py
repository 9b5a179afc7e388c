"""Credential authentication against the account directory."""

import structlog

from login_service.core.auth.backend import PasswordHasher
from login_service.core.errors import InvalidCredentialsError
from login_service.modules.users.models import Account
from login_service.modules.users.repos import AccountRepository


logger = structlog.get_logger()


class CredentialAuthenticator:
    """Checks a username and password pair.

    An unknown username and a wrong password fail in the same way, and
    both paths pay for one bcrypt verification, so callers cannot tell
    whether an account exists.
    """

    def __init__(self, accounts: AccountRepository, hasher: PasswordHasher) -> None:
        self.accounts = accounts
        self.hasher = hasher

    async def authenticate(self, username: str, password: str) -> Account:
        """Authenticate credentials.

        Args:
            username: Username in any case
            password: Plain text password

        Returns:
            The matching account

        Raises:
            InvalidCredentialsError: If the account is unknown or the
                password does not match
        """
        account = await self.accounts.get_by_username(username.strip().lower())

        if account is None:
            self.hasher.verify(password, self.hasher.placeholder_digest)
            logger.info("login_failed", reason="unknown_account")
            raise InvalidCredentialsError()

        if not self.hasher.verify(password, account.password_hash):
            logger.info("login_failed", reason="password_mismatch")
            raise InvalidCredentialsError()

        return account
