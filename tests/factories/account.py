"""Account factories for tests."""

from uuid import uuid4

from polyfactory.factories.pydantic_factory import ModelFactory
from polyfactory.factories.sqlalchemy_factory import SQLAlchemyFactory

from login_service.modules.users.models import Account, RefreshToken
from login_service.modules.users.schemas import RegisterRequest


class AccountFactory(SQLAlchemyFactory[Account]):
    """Factory for creating test Account instances."""

    __model__ = Account

    @classmethod
    def username(cls) -> str:
        """Generate a unique lowercase username."""
        return f"user-{uuid4().hex[:8]}"

    @classmethod
    def email(cls) -> str:
        """Generate a unique email."""
        return f"user-{uuid4().hex[:8]}@example.com"

    @classmethod
    def password_hash(cls) -> str:
        """Generate a value that is not a valid bcrypt digest."""
        return "not-a-bcrypt-digest"


class RegisterRequestFactory(ModelFactory[RegisterRequest]):
    """Factory for creating RegisterRequest schemas."""

    __model__ = RegisterRequest

    @classmethod
    def username(cls) -> str:
        """Generate a unique username."""
        return f"user-{uuid4().hex[:8]}"

    @classmethod
    def password(cls) -> str:
        """Generate a password of valid length."""
        return "testpassword123"

    @classmethod
    def email(cls) -> str:
        """Generate a unique email."""
        return f"user-{uuid4().hex[:8]}@example.com"


class RefreshTokenFactory(SQLAlchemyFactory[RefreshToken]):
    """Factory for creating test RefreshToken instances."""

    __model__ = RefreshToken

    @classmethod
    def account_id(cls):
        """Generate an account ID."""
        return uuid4()

    @classmethod
    def token_hash(cls) -> str:
        """Generate a token hash."""
        return uuid4().hex * 2  # 64 chars like SHA-256
