"""FastAPI dependencies for authentication.

This module provides FastAPI dependency injection functions for:
- The password hasher and token service
- Authenticating the caller from the Authorization header
- Restricting a route to the owner of the account in its path
- Reading a password-reset token from the Authorization header
"""

from typing import Annotated

import structlog
from fastapi import Depends, Header, Request

from login_service.core.auth.backend import PasswordHasher
from login_service.core.auth.gate import AuthorizationGate, split_bearer
from login_service.core.auth.schemas import Identity
from login_service.core.auth.tokens import TokenService
from login_service.modules.users.repos import ConsumedResetTokenRepo, RefreshTokenRepo


def get_password_hasher(request: Request) -> PasswordHasher:
    """Get the application's password hasher."""
    return request.app.state.password_hasher


Hasher = Annotated[PasswordHasher, Depends(get_password_hasher)]


def get_token_service(
    request: Request,
    refresh_tokens: RefreshTokenRepo,
    consumed_reset_tokens: ConsumedResetTokenRepo,
) -> TokenService:
    """Build a token service bound to the request's database session."""
    return TokenService(
        access_signer=request.app.state.access_signer,
        reset_signer=request.app.state.reset_signer,
        refresh_tokens=refresh_tokens,
        consumed_reset_tokens=consumed_reset_tokens,
    )


TokenSvc = Annotated[TokenService, Depends(get_token_service)]


def get_authorization_gate(tokens: TokenSvc) -> AuthorizationGate:
    """Get the authorization gate for the request."""
    return AuthorizationGate(tokens)


Gate = Annotated[AuthorizationGate, Depends(get_authorization_gate)]


async def get_current_identity(
    request: Request,
    gate: Gate,
    authorization: Annotated[str | None, Header()] = None,
) -> Identity:
    """Authenticate the caller from the Authorization header.

    Args:
        request: The incoming request
        gate: Authorization gate
        authorization: Raw Authorization header

    Returns:
        The caller's identity

    Raises:
        UnauthorizedError: If the caller is not authenticated
    """
    identity = gate.authenticate(authorization)

    request.state.identity = identity
    request.state.account_id = identity.sub
    structlog.contextvars.bind_contextvars(account_id=identity.sub)

    return identity


CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]


async def get_owner_identity(
    account_id: str,
    identity: CurrentIdentity,
    gate: Gate,
) -> Identity:
    """Authenticate the caller and require that it owns ``account_id``.

    Raises:
        UnauthorizedError: If the caller is not authenticated
        ForbiddenError: If the caller is not the account owner
    """
    gate.authorize_owner(identity, account_id)
    return identity


OwnerIdentity = Annotated[Identity, Depends(get_owner_identity)]


async def get_reset_token(
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    """Read a password-reset token presented as a bearer credential.

    Raises:
        UnauthorizedError: If no bearer credential is present
    """
    return split_bearer(authorization)


ResetToken = Annotated[str, Depends(get_reset_token)]
