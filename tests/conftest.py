"""
Pytest configuration and shared fixtures for all tests.
"""
from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.pool import StaticPool

from app.core.security import create_access_token
from app.db.models import User
from app.db.session import Database
from app.main import create_app
from app.repositories.user_repo import get_or_create_user


TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture
async def database() -> AsyncGenerator[Database, None]:
    """In-memory store shared by every connection of one test."""
    db = Database(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await db.connect()
    yield db
    await db.dispose()


@pytest.fixture
async def db_session(database) -> AsyncGenerator[AsyncSession, None]:
    """Create a new database session for a test."""
    async with database.sessionmaker() as session:
        yield session


@pytest.fixture
async def test_user(db_session) -> User:
    return await get_or_create_user(db_session, "owner@example.com")


@pytest.fixture
async def another_user(db_session) -> User:
    """Second user for multi-user tests."""
    return await get_or_create_user(db_session, "other@example.com")


@pytest.fixture
def auth_headers(test_user) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(test_user.id)}"}


@pytest.fixture
def other_auth_headers(another_user) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(another_user.id)}"}


@pytest.fixture
def app(database):
    return create_app(database=database)


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Test client talking to the app in-process."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
