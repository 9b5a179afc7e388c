"""Authentication backend for password hashing and token signing.

This module provides the cryptographic primitives used by the auth layer:
- Password hashing with bcrypt (PasswordHasher)
- RS256 token signing and verification (TokenSigner)
- RSA key pair loading and generation
- Refresh token generation and hashing for storage
"""

import base64
import binascii
import hashlib
import secrets
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from functools import cached_property
from typing import Any

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from jose import JWTError, jwt
from passlib.context import CryptContext

from login_service.core.constants import (
    BCRYPT_ROUNDS,
    REFRESH_TOKEN_BYTES,
    RSA_KEY_SIZE,
    TOKEN_ALGORITHM,
    TOKEN_JTI_LENGTH,
)
from login_service.core.errors import InvalidTokenError


Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)


# ============================================================
# Password Hashing
# ============================================================


class PasswordHasher:
    """One-way salted password hashing using bcrypt.

    Every call to ``hash`` uses a fresh random salt. Verification is
    delegated to bcrypt, which compares digests in constant time.
    """

    def __init__(self, rounds: int = BCRYPT_ROUNDS) -> None:
        self.rounds = rounds
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Bcrypt hash of the password
        """
        return self._context.hash(password)

    def verify(self, password: str, digest: str | None) -> bool:
        """Verify a password against its hash.

        Args:
            password: Plain text password to verify
            digest: Bcrypt hash to verify against; may be missing or malformed

        Returns:
            True if password matches, False otherwise (including when the
            digest is missing or cannot be parsed)
        """
        if not digest:
            return False
        try:
            return self._context.verify(password, digest)
        except (ValueError, TypeError):
            return False

    @cached_property
    def placeholder_digest(self) -> str:
        """A digest of a random secret, for equal-cost failed lookups."""
        return self.hash(secrets.token_urlsafe(16))


# ============================================================
# Signing Keys
# ============================================================


@dataclass(frozen=True)
class TokenKeyPair:
    """PEM-encoded RSA key pair for one token class."""

    private_key: str
    public_key: str


def decode_key(encoded: str) -> str:
    """Decode a base64-encoded PEM key.

    Args:
        encoded: Base64 text of a PEM document

    Returns:
        The PEM document

    Raises:
        ValueError: If the value is not base64-encoded PEM
    """
    try:
        pem = base64.b64decode(encoded, validate=True).decode("ascii")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise ValueError("Signing key must be base64-encoded PEM") from e
    if "-----BEGIN" not in pem:
        raise ValueError("Signing key must be base64-encoded PEM")
    return pem


def encode_key(pem: str) -> str:
    """Base64-encode a PEM key for use in environment variables."""
    return base64.b64encode(pem.encode("ascii")).decode("ascii")


def load_key_pair(private_key: str, public_key: str) -> TokenKeyPair:
    """Build a key pair from base64-encoded PEM values.

    Args:
        private_key: Base64-encoded PEM private key
        public_key: Base64-encoded PEM public key

    Returns:
        The decoded key pair
    """
    return TokenKeyPair(
        private_key=decode_key(private_key),
        public_key=decode_key(public_key),
    )


def generate_key_pair(key_size: int = RSA_KEY_SIZE) -> TokenKeyPair:
    """Generate a fresh RSA key pair.

    Args:
        key_size: RSA modulus size in bits

    Returns:
        PEM-encoded key pair
    """
    private = rsa.generate_private_key(public_exponent=65537, key_size=key_size)
    private_pem = private.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    public_pem = private.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return TokenKeyPair(
        private_key=private_pem.decode("ascii"),
        public_key=public_pem.decode("ascii"),
    )


# ============================================================
# Token Signing
# ============================================================


class TokenSigner:
    """Signs and verifies RS256 tokens for a single token class.

    A signer is bound to one key pair, one lifetime and one ``type`` claim.
    Tokens from another class fail verification because they are signed
    with a different key and carry a different type.
    """

    algorithm = TOKEN_ALGORITHM

    def __init__(
        self,
        keys: TokenKeyPair,
        lifetime: timedelta,
        token_type: str,
        clock: Clock = utc_now,
    ) -> None:
        if lifetime <= timedelta(0):
            raise ValueError("Token lifetime must be positive")
        self._keys = keys
        self.lifetime = lifetime
        self.token_type = token_type
        self._clock = clock

    def issue(self, claims: dict[str, Any]) -> str:
        """Sign a token carrying the given claims.

        ``type``, ``iat``, ``exp`` and ``jti`` are set by the signer.

        Args:
            claims: Claims to include (must contain ``sub``)

        Returns:
            Compact signed token
        """
        issued_at = int(self._clock().timestamp())
        to_encode = dict(claims)
        to_encode.update(
            {
                "type": self.token_type,
                "iat": issued_at,
                "exp": issued_at + int(self.lifetime.total_seconds()),
                "jti": secrets.token_urlsafe(TOKEN_JTI_LENGTH),
            }
        )
        return jwt.encode(to_encode, self._keys.private_key, algorithm=self.algorithm)

    def verify(self, token: str) -> dict[str, Any]:
        """Verify a token and return its claims.

        Args:
            token: Compact signed token

        Returns:
            The verified claims

        Raises:
            InvalidTokenError: On any signature, structure, type or
                validity-window failure
        """
        try:
            claims = jwt.decode(
                token,
                self._keys.public_key,
                algorithms=[self.algorithm],
                options={
                    # Validity window is checked below against our clock.
                    # require_* would re-enable jose's wall-clock checks.
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                    "verify_aud": False,
                },
            )
        except (JWTError, ValueError, TypeError) as e:
            raise InvalidTokenError() from e

        if claims.get("type") != self.token_type:
            raise InvalidTokenError()

        issued_at = claims.get("iat")
        expires_at = claims.get("exp")
        if not _is_timestamp(issued_at) or not _is_timestamp(expires_at):
            raise InvalidTokenError()

        now = self._clock().timestamp()
        if not issued_at <= now < expires_at:
            raise InvalidTokenError()

        if not isinstance(claims.get("sub"), str) or not claims["sub"]:
            raise InvalidTokenError()

        return claims


def _is_timestamp(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


# ============================================================
# Refresh Token Utilities
# ============================================================


def generate_refresh_token() -> str:
    """Generate an opaque, high-entropy refresh token value."""
    return secrets.token_urlsafe(REFRESH_TOKEN_BYTES)


def hash_token(token: str) -> str:
    """Hash a token for secure storage.

    Uses SHA-256 to hash tokens before storing in the database.
    This prevents token theft if the database is compromised.

    Args:
        token: The token to hash

    Returns:
        SHA-256 hash of the token
    """
    return hashlib.sha256(token.encode()).hexdigest()
