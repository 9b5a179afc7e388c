"""Authentication module for credentials, tokens and request authorization."""

from login_service.core.auth.authenticator import CredentialAuthenticator
from login_service.core.auth.backend import (
    PasswordHasher,
    TokenKeyPair,
    TokenSigner,
    generate_key_pair,
    generate_refresh_token,
    hash_token,
    load_key_pair,
)
from login_service.core.auth.dependencies import (
    CurrentIdentity,
    OwnerIdentity,
    ResetToken,
    TokenSvc,
)
from login_service.core.auth.gate import AuthorizationGate
from login_service.core.auth.keys import KeyConfigurationError, build_signers
from login_service.core.auth.middleware import (
    RequestIdMiddleware,
    SecurityHeadersMiddleware,
)
from login_service.core.auth.routes import account_router
from login_service.core.auth.routes import router as auth_router
from login_service.core.auth.schemas import Identity, TokenPair
from login_service.core.auth.service import AccountService
from login_service.core.auth.tokens import TokenService


__all__ = [
    # Services
    "AccountService",
    "AuthorizationGate",
    "CredentialAuthenticator",
    # Dependencies
    "CurrentIdentity",
    # Schemas
    "Identity",
    # Configuration
    "KeyConfigurationError",
    "OwnerIdentity",
    # Primitives
    "PasswordHasher",
    # Middleware
    "RequestIdMiddleware",
    "ResetToken",
    "SecurityHeadersMiddleware",
    "TokenKeyPair",
    "TokenPair",
    "TokenService",
    "TokenSigner",
    "TokenSvc",
    # Routers
    "account_router",
    "auth_router",
    "build_signers",
    "generate_key_pair",
    "generate_refresh_token",
    "hash_token",
    "load_key_pair",
]
