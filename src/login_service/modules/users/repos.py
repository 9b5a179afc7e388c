"""Account and token repositories for database operations."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends
from sqlalchemy import delete, func, select

from login_service.api.dependencies import DBSession
from login_service.modules.users.models import Account, ConsumedResetToken, RefreshToken


class AccountRepository:
    """Repository for Account database operations.

    This is the account directory: lookups by username, id and email,
    CRUD, and the username-substring listing query. Usernames and emails
    are compared in their lowercased form.
    """

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, account: Account) -> Account:
        """Create a new account.

        Args:
            account: Account instance to create

        Returns:
            The created account with ID populated

        Raises:
            sqlalchemy.exc.IntegrityError: If the username or email is taken
        """
        self.session.add(account)
        await self.session.flush()
        await self.session.refresh(account)
        return account

    async def get_by_id(self, account_id: UUID) -> Account | None:
        """Get an account by ID.

        Args:
            account_id: The account's UUID

        Returns:
            Account if found, None otherwise
        """
        stmt = select(Account).where(Account.id == account_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> Account | None:
        """Get an account by username.

        Args:
            username: The username, in any case

        Returns:
            Account if found, None otherwise
        """
        stmt = select(Account).where(Account.username == username.lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Account | None:
        """Get an account by email address.

        Args:
            email: The email address, in any case

        Returns:
            Account if found, None otherwise
        """
        stmt = select(Account).where(Account.email == email.lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def query_username_substring(
        self,
        substring: str | None,
        offset: int,
        limit: int,
    ) -> tuple[list[Account], int]:
        """List accounts sorted by username, optionally filtered.

        Args:
            substring: Case-insensitive username fragment, or None for all
            offset: Number of matching accounts to skip
            limit: Maximum number of accounts to return

        Returns:
            Tuple of (accounts, total matching count)
        """
        count_stmt = select(func.count()).select_from(Account)
        stmt = select(Account)
        if substring:
            condition = Account.username.contains(substring.lower(), autoescape=True)
            count_stmt = count_stmt.where(condition)
            stmt = stmt.where(condition)

        count_result = await self.session.execute(count_stmt)
        total = count_result.scalar_one()

        stmt = stmt.order_by(Account.username.asc()).offset(offset).limit(limit)
        result = await self.session.execute(stmt)
        accounts = list(result.scalars().all())

        return accounts, total

    async def update(self, account: Account) -> Account:
        """Update an account.

        Args:
            account: Account instance with updated fields

        Returns:
            The updated account
        """
        await self.session.flush()
        await self.session.refresh(account)
        return account

    async def delete(self, account: Account) -> None:
        """Delete an account.

        Args:
            account: Account instance to delete
        """
        await self.session.delete(account)
        await self.session.flush()


class RefreshTokenRepository:
    """Repository for RefreshToken database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, token: RefreshToken) -> RefreshToken:
        """Create a new refresh token.

        Args:
            token: RefreshToken instance to create

        Returns:
            The created token
        """
        self.session.add(token)
        await self.session.flush()
        await self.session.refresh(token)
        return token

    async def get_by_hash(self, token_hash: str) -> RefreshToken | None:
        """Get a refresh token by its hash.

        Args:
            token_hash: SHA-256 hash of the token

        Returns:
            RefreshToken if found, None otherwise
        """
        stmt = select(RefreshToken).where(RefreshToken.token_hash == token_hash)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def delete_by_hash(self, token_hash: str) -> bool:
        """Delete a refresh token.

        Args:
            token_hash: SHA-256 hash of the token

        Returns:
            True if a token was deleted, False if none matched
        """
        stmt = delete(RefreshToken).where(RefreshToken.token_hash == token_hash)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def delete_all_for_account(self, account_id: UUID) -> int:
        """Delete all refresh tokens for an account.

        Args:
            account_id: The account's UUID

        Returns:
            Number of tokens deleted
        """
        stmt = delete(RefreshToken).where(RefreshToken.account_id == account_id)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount


class ConsumedResetTokenRepository:
    """Repository for ConsumedResetToken database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def exists(self, jti: str) -> bool:
        """Check whether a reset token identifier has been consumed.

        Args:
            jti: The token identifier

        Returns:
            True if the token was already used
        """
        stmt = select(func.count()).select_from(ConsumedResetToken).where(
            ConsumedResetToken.jti == jti
        )
        result = await self.session.execute(stmt)
        return result.scalar_one() > 0

    async def create(self, record: ConsumedResetToken) -> ConsumedResetToken:
        """Record a consumed reset token.

        Args:
            record: ConsumedResetToken instance to create

        Returns:
            The created record

        Raises:
            sqlalchemy.exc.IntegrityError: If the jti was recorded concurrently
        """
        self.session.add(record)
        await self.session.flush()
        return record

    async def delete_all_for_account(self, account_id: UUID) -> int:
        """Delete all consumed reset token records for an account.

        Args:
            account_id: The account's UUID

        Returns:
            Number of records deleted
        """
        stmt = delete(ConsumedResetToken).where(
            ConsumedResetToken.account_id == account_id
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount


# Type aliases for dependency injection
AccountRepo = Annotated[AccountRepository, Depends(AccountRepository)]
RefreshTokenRepo = Annotated[RefreshTokenRepository, Depends(RefreshTokenRepository)]
ConsumedResetTokenRepo = Annotated[
    ConsumedResetTokenRepository, Depends(ConsumedResetTokenRepository)
]
