"""Account listing and management routes."""

from typing import Annotated

from fastapi import APIRouter, Query, status

from login_service.core.auth.dependencies import CurrentIdentity, OwnerIdentity
from login_service.modules.users.schemas import (
    AccountListParams,
    AccountListResponse,
    AccountResponse,
)
from login_service.modules.users.services import UserSvc


router = APIRouter(prefix="/users", tags=["users"])


@router.get(
    "",
    response_model=AccountListResponse,
    summary="List accounts",
    description="Paginated account listing sorted by username, optionally filtered by a username fragment.",
)
async def list_accounts(
    _identity: CurrentIdentity,
    params: Annotated[AccountListParams, Query()],
    service: UserSvc,
) -> AccountListResponse:
    """List accounts."""
    result = await service.list_accounts(
        filter=params.filter,
        page=params.page,
        limit=params.limit,
    )
    return AccountListResponse(
        items=[AccountResponse.model_validate(item) for item in result.items],
        total=result.total,
        total_pages=result.total_pages,
        next=result.next,
        previous=result.previous,
    )


@router.get(
    "/{account_id}",
    response_model=AccountResponse,
    summary="Get account",
    description="Returns an account. Callers may only read their own account.",
)
async def get_account(
    account_id: str,
    _identity: OwnerIdentity,
    service: UserSvc,
) -> AccountResponse:
    """Get an account by ID."""
    account = await service.get_account(account_id)
    return AccountResponse.model_validate(account)


@router.delete(
    "/{account_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete account",
    description="Deletes an account and revokes its refresh tokens. Callers may only delete their own account.",
)
async def delete_account(
    account_id: str,
    _identity: OwnerIdentity,
    service: UserSvc,
) -> None:
    """Delete an account."""
    await service.delete_account(account_id)
