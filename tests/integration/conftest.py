"""Integration test fixtures for database and HTTP client operations.

Each test gets its own SQLite database file (aiosqlite) with the schema
created from model metadata. The HTTP app is wired to that database and to
a recording notification sender through dependency overrides.
"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from sqlmodel import SQLModel

import src.marketplace_auth.models  # noqa: F401 - registers tables on the metadata
from src.marketplace_auth.api.dependencies import (
    get_db_session,
    get_notification_sender,
    get_password_hasher,
    get_token_issuer,
)
from src.marketplace_auth.core.db import create_engine_from_url, get_session
from src.marketplace_auth.core.security import PasswordHasher, TokenIssuer
from src.marketplace_auth.main import create_app
from src.marketplace_auth.repositories import (
    EmailVerificationRepository,
    PasswordResetRepository,
    UserRepository,
)
from src.marketplace_auth.services import (
    AccountService,
    AuthService,
    EphemeralTokenService,
    UserService,
)
from tests.helpers import RecordingNotificationSender


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine]:
    """Create a fresh SQLite database with all tables."""
    test_engine = create_engine_from_url(f"sqlite+aiosqlite:///{tmp_path / 'auth.db'}")
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Provide an async session for database operations.

    The session does NOT auto-commit. Tests must call `await session.commit()`
    to make changes visible to the HTTP client, which uses its own sessions.
    """
    async with get_session(engine) as session:
        yield session


@pytest.fixture
def notifier() -> RecordingNotificationSender:
    return RecordingNotificationSender()


@pytest.fixture
def account_service(db_session: AsyncSession) -> AccountService:
    return AccountService(UserRepository(db_session), db_session)


@pytest.fixture
def token_service(db_session: AsyncSession) -> EphemeralTokenService:
    return EphemeralTokenService(
        EmailVerificationRepository(db_session),
        PasswordResetRepository(db_session),
    )


@pytest.fixture
def auth_service(
    db_session: AsyncSession,
    account_service: AccountService,
    token_service: EphemeralTokenService,
    hasher: PasswordHasher,
    issuer: TokenIssuer,
    notifier: RecordingNotificationSender,
) -> AuthService:
    return AuthService(db_session, account_service, token_service, hasher, issuer, notifier)


@pytest.fixture
def user_service(
    db_session: AsyncSession, account_service: AccountService, hasher: PasswordHasher
) -> UserService:
    return UserService(account_service, db_session, hasher)


@pytest.fixture
async def client(
    engine: AsyncEngine,
    notifier: RecordingNotificationSender,
    hasher: PasswordHasher,
    issuer: TokenIssuer,
) -> AsyncGenerator[AsyncClient]:
    """HTTP client for the app, bound to the test database and recording sender."""
    app = create_app()

    async def _test_session() -> AsyncGenerator[AsyncSession]:
        async with get_session(engine) as session:
            yield session

    app.dependency_overrides[get_db_session] = _test_session
    app.dependency_overrides[get_notification_sender] = lambda: notifier
    app.dependency_overrides[get_password_hasher] = lambda: hasher
    app.dependency_overrides[get_token_issuer] = lambda: issuer

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
