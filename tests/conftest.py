# File: tests/conftest.py
"""Pytest configuration and fixtures."""

import os
from datetime import datetime, timedelta

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from taskflow.core.db import Base, get_db
from taskflow.core.security import hash_password
from taskflow.main import create_app

# Import all models so create_all sees every table
from taskflow.models.activity import Activity  # noqa: F401
from taskflow.models.pomodoro_session import PomodoroSession  # noqa: F401
from taskflow.models.task import Task  # noqa: F401
from taskflow.models.user import User  # noqa: F401
from tests.factories import UserFactory

# In-memory SQLite by default; point at Postgres with TEST_DATABASE_URL
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite://")


def make_test_engine():
    """Engine for the test database. SQLite memory DBs need one shared connection."""
    if TEST_DATABASE_URL.startswith("sqlite"):
        return create_async_engine(
            TEST_DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_async_engine(TEST_DATABASE_URL, echo=False)


class FakeClock:
    """Controllable naive-UTC clock for the session store."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2026, 1, 5, 9, 0, 0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now += timedelta(seconds=seconds)
        return self.now


@pytest.fixture
def clock(monkeypatch) -> FakeClock:
    """Freeze the store's notion of now; move it with clock.advance()."""
    fake = FakeClock()
    monkeypatch.setattr("taskflow.core.pomodoro.now_utc", fake)
    return fake


@pytest_asyncio.fixture(scope="function")
async def db_session():
    """Create fresh DB session for each test."""
    engine = make_test_engine()
    async_session_maker = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session_maker() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a test user with a real password hash."""
    return await UserFactory.create(
        db_session,
        email="testclient@example.com",
        name="Test Client",
        hashed_password=hash_password("testpass123"),
    )


@pytest_asyncio.fixture
async def client(db_session, test_user):
    """Create async test client with overridden DB and auth dependencies."""
    from taskflow.api.auth import get_current_user

    app = create_app()

    async def override_get_db():
        yield db_session

    async def override_get_current_user():
        return test_user

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = override_get_current_user

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        # Attach for test access
        ac.test_user = test_user
        ac.db_session = db_session
        yield ac


@pytest_asyncio.fixture
async def unauthenticated_client(db_session: AsyncSession):
    """AsyncClient with the real auth dependency (session cookie)."""
    app = create_app()

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        ac.db_session = db_session
        yield ac
