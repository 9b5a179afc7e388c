"""Signing key configuration for the token classes."""

from datetime import timedelta

import structlog

from login_service.config import Settings
from login_service.core.auth.backend import (
    TokenKeyPair,
    TokenSigner,
    generate_key_pair,
    load_key_pair,
)
from login_service.core.constants import ACCESS_TOKEN_TYPE, PASSWORD_RESET_TOKEN_TYPE


logger = structlog.get_logger()


class KeyConfigurationError(RuntimeError):
    """Raised when signing keys are missing or unusable at startup."""


def _resolve_key_pair(
    settings: Settings,
    name: str,
    private_key: str | None,
    public_key: str | None,
) -> TokenKeyPair:
    if private_key and public_key:
        try:
            return load_key_pair(private_key, public_key)
        except ValueError as e:
            raise KeyConfigurationError(f"Invalid {name} signing keys: {e}") from e

    if private_key or public_key:
        raise KeyConfigurationError(
            f"Both the private and public {name} keys must be configured"
        )

    if settings.is_production:
        raise KeyConfigurationError(f"Missing {name} signing keys")

    # Tokens signed with these keys do not survive a restart
    logger.warning("ephemeral_signing_keys_generated", token_class=name)
    return generate_key_pair()


def build_signers(settings: Settings) -> tuple[TokenSigner, TokenSigner]:
    """Create the access and password-reset token signers.

    Keys come from the settings as base64-encoded PEM. Outside production,
    missing keys are replaced by freshly generated ones.

    Args:
        settings: Application settings

    Returns:
        Tuple of (access_signer, reset_signer)

    Raises:
        KeyConfigurationError: If keys are missing in production, malformed,
            or shared between the two token classes
    """
    access_keys = _resolve_key_pair(
        settings,
        ACCESS_TOKEN_TYPE,
        settings.access_token_private_key,
        settings.access_token_public_key,
    )
    reset_keys = _resolve_key_pair(
        settings,
        PASSWORD_RESET_TOKEN_TYPE,
        settings.password_reset_private_key,
        settings.password_reset_public_key,
    )

    if access_keys.public_key.strip() == reset_keys.public_key.strip():
        raise KeyConfigurationError(
            "Access and password-reset tokens must use different key pairs"
        )

    access_signer = TokenSigner(
        access_keys,
        lifetime=timedelta(minutes=settings.access_token_expire_minutes),
        token_type=ACCESS_TOKEN_TYPE,
    )
    reset_signer = TokenSigner(
        reset_keys,
        lifetime=timedelta(minutes=settings.password_reset_token_expire_minutes),
        token_type=PASSWORD_RESET_TOKEN_TYPE,
    )
    return access_signer, reset_signer
