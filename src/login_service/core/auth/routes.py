"""Authentication API routes.

Provides endpoints for:
- Account registration
- Login/logout
- Token refresh
- Password reset
- Owner-only account profile and password change
"""

from fastapi import APIRouter, status

from login_service.core.auth.dependencies import OwnerIdentity, ResetToken
from login_service.core.auth.service import AccountSvc
from login_service.modules.users.schemas import (
    AccountResponse,
    LoginRequest,
    PasswordChangeRequest,
    PasswordResetConfirm,
    PasswordResetRequest,
    RefreshTokenRequest,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
)
from login_service.modules.users.services import UserSvc


router = APIRouter(prefix="/auth", tags=["auth"])
account_router = APIRouter(prefix="/account", tags=["account"])


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register new account",
    description="Creates a new account. Usernames are case-insensitive and must be unique.",
)
async def register(
    data: RegisterRequest,
    service: AccountSvc,
) -> RegisterResponse:
    """Register a new account."""
    account = await service.register(
        username=data.username,
        password=data.password,
        email=data.email,
    )
    return RegisterResponse(id=account.id)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login with username and password",
    description="Authenticate with username and password to receive access and refresh tokens.",
)
async def login(
    data: LoginRequest,
    service: AccountSvc,
) -> TokenResponse:
    """Login with username and password."""
    tokens = await service.login(username=data.username, password=data.password)

    return TokenResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        expires_in=tokens.expires_in,
    )


@router.post(
    "/refresh",
    response_model=TokenResponse,
    summary="Refresh access token",
    description="Use a refresh token to obtain a new access token. The old refresh token is revoked.",
)
async def refresh_token(
    data: RefreshTokenRequest,
    service: AccountSvc,
) -> TokenResponse:
    """Refresh the access token."""
    tokens = await service.refresh(data.refresh_token)

    return TokenResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        expires_in=tokens.expires_in,
    )


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Logout",
    description="Revoke the refresh token to logout from the current session.",
)
async def logout(
    data: RefreshTokenRequest,
    service: AccountSvc,
) -> None:
    """Logout by revoking the refresh token."""
    await service.logout(data.refresh_token)


@router.post(
    "/password-reset",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Request password reset",
    description="Emails a short-lived password-reset token to the account's address.",
)
async def request_password_reset(
    data: PasswordResetRequest,
    service: AccountSvc,
) -> None:
    """Send a password-reset token by email."""
    await service.request_password_reset(data.email)


@router.post(
    "/password-reset/confirm",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Reset password",
    description="Sets a new password. The reset token is sent as a bearer credential and can be used once.",
)
async def reset_password(
    data: PasswordResetConfirm,
    reset_token: ResetToken,
    service: AccountSvc,
) -> None:
    """Reset the password with a reset token."""
    await service.reset_password(reset_token, data.new_password)


@account_router.get(
    "/{account_id}",
    response_model=AccountResponse,
    summary="Get own profile",
    description="Returns the caller's own account profile.",
)
async def get_profile(
    account_id: str,
    _identity: OwnerIdentity,
    users: UserSvc,
) -> AccountResponse:
    """Get the caller's profile."""
    account = await users.get_account(account_id)
    return AccountResponse.model_validate(account)


@account_router.patch(
    "/{account_id}/password",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Change password",
    description="Changes the caller's password and revokes all of its refresh tokens.",
)
async def change_password(
    account_id: str,
    data: PasswordChangeRequest,
    _identity: OwnerIdentity,
    service: AccountSvc,
) -> None:
    """Change the caller's password."""
    await service.change_password(
        account_id,
        current_password=data.current_password,
        new_password=data.new_password,
        new_password_confirm=data.new_password_confirm,
    )
