"""
Test configuration and fixtures for pytest.

Every test gets a fresh in-memory SQLite database (aiosqlite) wired into the
app through ``dependency_overrides``, and an httpx client that talks to the
ASGI app directly.
"""

import os

# Settings are read at import time, so the environment must be ready first.
os.environ.setdefault("SECRET_KEY", "fitsphere-test-secret")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from typing import AsyncGenerator, Dict

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.models import Plan, User  # noqa: F401  registers the tables on Base.metadata
from app.db.async_session import get_async_db
from app.db.base_class import Base
from app.main import app
from tests.api_helpers import bearer, signup_user
from tests.utils_jwt import generate_test_jwt

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def async_engine():
    """Create an async engine with all tables; one database per test."""
    engine = create_async_engine(
        TEST_DB_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(async_engine) -> async_sessionmaker:
    return async_sessionmaker(
        bind=async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def async_db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """A session for arranging and inspecting rows directly."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def async_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Create a client for the app with the test database override."""

    async def override_get_async_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_db] = override_get_async_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    # Clear dependency overrides
    app.dependency_overrides = {}


@pytest_asyncio.fixture
async def registered_user(async_client) -> Dict:
    """A signed-up user: the signup body (``token`` and ``user``)."""
    return await signup_user(
        async_client,
        age=30,
        weight=70,
        height=175,
        gender="male",
        goal="muscle_gain",
        activity_level="active",
    )


@pytest.fixture
def auth_header(registered_user) -> Dict[str, str]:
    """Return an Authorization header with the signup token."""
    return bearer(registered_user["token"])


@pytest.fixture
def plan_payload() -> Dict:
    return {
        "goal": "muscle_gain",
        "age": 30,
        "weight": 70,
        "height": 175,
        "gender": "male",
        "activityLevel": "active",
    }


@pytest.fixture
def forged_token():
    """Factory for tokens signed with the test secret."""
    return generate_test_jwt
