"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from login_service.config import Settings
from login_service.core.auth.backend import (
    PasswordHasher,
    TokenKeyPair,
    encode_key,
    generate_key_pair,
)
from login_service.core.database import Base, create_session_factory, get_db
from login_service.core.email import EmailSender, OutgoingEmail
from login_service.main import create_app
from login_service.modules.users.models import Account
from tests.factories.account import AccountFactory


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "correct-horse-battery"


class RecordingEmailSender(EmailSender):
    """Email backend that keeps sent messages in memory."""

    def __init__(self) -> None:
        self.outbox: list[OutgoingEmail] = []

    async def send(self, message: OutgoingEmail) -> None:
        self.outbox.append(message)


# ============================================================
# Keys and Settings
# ============================================================


@pytest.fixture(scope="session")
def access_keys() -> TokenKeyPair:
    """RSA key pair for access tokens, generated once per session."""
    return generate_key_pair()


@pytest.fixture(scope="session")
def reset_keys() -> TokenKeyPair:
    """RSA key pair for password-reset tokens, generated once per session."""
    return generate_key_pair()


@pytest.fixture
def settings(access_keys: TokenKeyPair, reset_keys: TokenKeyPair) -> Settings:
    """Settings for an isolated test application."""
    return Settings(
        _env_file=None,
        environment="test",
        database_url=TEST_DATABASE_URL,
        database_auto_create=False,
        bcrypt_rounds=4,
        access_token_private_key=encode_key(access_keys.private_key),
        access_token_public_key=encode_key(access_keys.public_key),
        password_reset_private_key=encode_key(reset_keys.private_key),
        password_reset_public_key=encode_key(reset_keys.public_key),
    )


@pytest.fixture
def hasher() -> PasswordHasher:
    """Fast password hasher for tests."""
    return PasswordHasher(rounds=4)


# ============================================================
# Database
# ============================================================


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an in-memory test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a database session for tests."""
    session_factory = create_session_factory(engine)
    async with session_factory() as session:
        yield session


# ============================================================
# Application
# ============================================================


@pytest.fixture
def outbox() -> RecordingEmailSender:
    """In-memory email backend."""
    return RecordingEmailSender()


@pytest.fixture
async def app(
    settings: Settings,
    db: AsyncSession,
    outbox: RecordingEmailSender,
) -> AsyncGenerator[FastAPI, None]:
    """Create test application instance."""
    application = create_app(settings)
    application.state.email_sender = outbox

    # Override database dependency
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    application.dependency_overrides[get_db] = override_get_db

    yield application

    application.dependency_overrides.clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


# ============================================================
# Account Fixtures
# ============================================================


@pytest.fixture
async def account(db: AsyncSession, hasher: PasswordHasher) -> Account:
    """Create a persisted account whose password is TEST_PASSWORD."""
    account = AccountFactory.build(
        username="alice",
        email="alice@example.com",
        password_hash=hasher.hash(TEST_PASSWORD),
    )
    db.add(account)
    await db.flush()
    await db.refresh(account)
    return account


@pytest.fixture
async def other_account(db: AsyncSession, hasher: PasswordHasher) -> Account:
    """Create a second persisted account."""
    account = AccountFactory.build(
        username="bob",
        email="bob@example.com",
        password_hash=hasher.hash(TEST_PASSWORD),
    )
    db.add(account)
    await db.flush()
    await db.refresh(account)
    return account


@pytest.fixture
def auth_headers(app: FastAPI, account: Account) -> dict[str, str]:
    """Authorization headers with a valid access token for ``account``."""
    token = app.state.access_signer.issue(
        {"sub": str(account.id), "username": account.username}
    )
    return {"Authorization": f"Bearer {token}"}
