"""Pytest fixtures for timesheet tracker tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tests.factories import add_user
from timesheet_tracker.api.app import create_app
from timesheet_tracker.config import Settings
from timesheet_tracker.database import create_engine, create_session_factory, init_db
from timesheet_tracker.models import Role, User

# Use in-memory SQLite for tests (with async support)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def settings() -> Settings:
    """Settings with a fixed secret and cheap password hashing."""
    return Settings(
        database_url=TEST_DATABASE_URL,
        jwt_secret="test-secret-key-that-is-long-enough-for-hs256",
        jwt_algorithm="HS256",
        token_lifetime_hours=5,
        bcrypt_rounds=4,
        cors_origins=("*",),
        host="127.0.0.1",
        port=8000,
        debug=False,
        log_level="DEBUG",
    )


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Fresh in-memory database per test."""
    engine = create_engine(TEST_DATABASE_URL)
    await init_db(engine)
    yield create_session_factory(engine)
    await engine.dispose()


@pytest_asyncio.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(
    settings: Settings,
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    app = create_app(settings=settings, session_factory=session_factory)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def team(session: AsyncSession) -> dict[str, User]:
    """Two managers. Bob and Alice report to Sarah, Carol reports to Mike,
    Dave reports to nobody."""
    sarah = await add_user(session, "manager@company.com", "Sarah Manager", Role.MANAGER)
    mike = await add_user(session, "manager2@company.com", "Mike Manager", Role.MANAGER)
    bob = await add_user(session, "bob@x.com", "Bob Employee", Role.EMPLOYEE, sarah)
    alice = await add_user(session, "alice@x.com", "Alice Employee", Role.EMPLOYEE, sarah)
    carol = await add_user(session, "carol@x.com", "Carol Employee", Role.EMPLOYEE, mike)
    dave = await add_user(session, "dave@x.com", "Dave Orphan", Role.EMPLOYEE)
    await session.commit()
    return {
        "sarah": sarah,
        "mike": mike,
        "bob": bob,
        "alice": alice,
        "carol": carol,
        "dave": dave,
    }
