"""User service for account reads, deletion and listing."""

import math
from dataclasses import dataclass
from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends

from login_service.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from login_service.core.errors import NotFoundError, ValidationError
from login_service.modules.users.models import Account
from login_service.modules.users.repos import (
    AccountRepo,
    ConsumedResetTokenRepo,
    RefreshTokenRepo,
)
from login_service.modules.users.schemas import PageRef


logger = structlog.get_logger()


@dataclass
class AccountPage:
    """One page of an account listing."""

    items: list[Account]
    total: int
    total_pages: int
    next: PageRef | None = None
    previous: PageRef | None = None


class UserService:
    """Service for account management operations.

    Contains business logic for reading, deleting and listing accounts.
    """

    def __init__(
        self,
        repo: AccountRepo,
        refresh_tokens: RefreshTokenRepo,
        consumed_reset_tokens: ConsumedResetTokenRepo,
    ) -> None:
        self.repo = repo
        self.refresh_tokens = refresh_tokens
        self.consumed_reset_tokens = consumed_reset_tokens

    async def get_account(self, account_id: UUID | str) -> Account:
        """Get an account by ID.

        Args:
            account_id: The account's UUID, or its string form

        Returns:
            The account

        Raises:
            NotFoundError: If the account does not exist or the ID is malformed
        """
        try:
            parsed_id = account_id if isinstance(account_id, UUID) else UUID(account_id)
        except ValueError as e:
            raise NotFoundError(
                "Account not found",
                resource="account",
                resource_id=str(account_id),
            ) from e

        account = await self.repo.get_by_id(parsed_id)
        if not account:
            raise NotFoundError(
                "Account not found",
                resource="account",
                resource_id=str(account_id),
            )
        return account

    async def delete_account(self, account_id: UUID | str) -> None:
        """Delete an account together with its tokens.

        Args:
            account_id: The account's UUID, or its string form

        Raises:
            NotFoundError: If the account does not exist
        """
        account = await self.get_account(account_id)
        await self.refresh_tokens.delete_all_for_account(account.id)
        await self.consumed_reset_tokens.delete_all_for_account(account.id)
        await self.repo.delete(account)
        logger.info("account_deleted", account_id=str(account.id))

    async def list_accounts(
        self,
        filter: str | None = None,  # noqa: A002
        page: int | None = None,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> AccountPage:
        """List accounts sorted by username.

        Args:
            filter: Case-insensitive username fragment
            page: 1-based page number; None means the first page
            limit: Page size, at most MAX_PAGE_SIZE

        Returns:
            The requested page with links to its neighbours

        Raises:
            ValidationError: If page or limit is not a positive integer
        """
        if page is not None and page < 1:
            raise ValidationError(
                "Invalid page", errors=[{"field": "page", "message": "Must be >= 1"}]
            )
        if limit < 1:
            raise ValidationError(
                "Invalid limit", errors=[{"field": "limit", "message": "Must be >= 1"}]
            )

        current = page or 1
        limit = min(limit, MAX_PAGE_SIZE)
        offset = (current - 1) * limit

        items, total = await self.repo.query_username_substring(
            filter or None, offset=offset, limit=limit
        )

        return AccountPage(
            items=items,
            total=total,
            total_pages=max(1, math.ceil(total / limit)),
            next=PageRef(page=current + 1, limit=limit)
            if offset + limit < total
            else None,
            previous=PageRef(page=current - 1, limit=limit) if current > 1 else None,
        )


# Type alias for dependency injection
UserSvc = Annotated[UserService, Depends(UserService)]
