"""Pytest configuration and fixtures for backend tests.

Database Handling:
- Uses TEST_DATABASE_URL when set (e.g. a PostgreSQL test database)
- Otherwise each test gets a fresh in-memory SQLite database (aiosqlite)
"""

import os
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

# Test admin credentials
TEST_ADMIN_USERNAME = "testadmin"
TEST_ADMIN_EMAIL = "admin@gameads.io"
TEST_ADMIN_PASSWORD = "Test@Password123"

SQLITE_MEMORY_URL = "sqlite+aiosqlite://"

# Set test environment variables before importing app modules
os.environ["DATABASE_URL"] = os.environ.get("TEST_DATABASE_URL", SQLITE_MEMORY_URL)
os.environ["JWT_SECRET_KEY"] = "test-secret-key-" + "0" * 48
os.environ["ADMIN_USERNAME"] = TEST_ADMIN_USERNAME
os.environ["ADMIN_EMAIL"] = TEST_ADMIN_EMAIL
os.environ["ADMIN_PASSWORD"] = TEST_ADMIN_PASSWORD
os.environ["LOGIN_MAX_ATTEMPTS"] = "3"
os.environ["SESSION_INACTIVITY_TIMEOUT_MINUTES"] = "15"


def _test_database_url() -> str:
    return os.environ["DATABASE_URL"]


# --- Database Fixtures ---


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create a database engine with all tables for one test."""
    from gameads.core.database import Base
    from gameads import models  # noqa: F401

    url = _test_database_url()
    if url.startswith("sqlite"):
        # One shared connection, otherwise every checkout sees an empty database
        engine = create_async_engine(
            url,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    else:
        engine = create_async_engine(url, poolclass=NullPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for testing."""
    async_session = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture(scope="function")
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client with database override."""
    from gameads.core.database import get_db
    from gameads.main import app

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# --- Admin Account Helpers ---


@pytest.fixture
def admin_account_factory(db_session):
    """Factory for creating the admin account row directly."""
    from gameads.models.admin_account import PASSWORD_SCHEME_ARGON2, AdminAccount
    from gameads.services.credential_store import hash_password

    async def _create_admin_account(
        username: str = TEST_ADMIN_USERNAME,
        email: str = TEST_ADMIN_EMAIL,
        password: str = TEST_ADMIN_PASSWORD,
        password_scheme: str = PASSWORD_SCHEME_ARGON2,
        **kwargs,
    ) -> AdminAccount:
        stored = hash_password(password) if password_scheme == PASSWORD_SCHEME_ARGON2 else password
        account = AdminAccount(
            username=username,
            email=email,
            password_hash=stored,
            password_scheme=password_scheme,
            **kwargs,
        )
        db_session.add(account)
        await db_session.commit()
        await db_session.refresh(account)
        return account

    return _create_admin_account


@pytest_asyncio.fixture
async def admin_account(admin_account_factory):
    """Create the test admin account."""
    return await admin_account_factory()


@pytest_asyncio.fixture
async def logged_in(async_client, admin_account) -> dict:
    """Log in through the API and return the response body."""
    response = await async_client.post(
        "/api/auth/login",
        json={"email": TEST_ADMIN_EMAIL, "password": TEST_ADMIN_PASSWORD},
    )
    assert response.status_code == 200, response.text
    return response.json()


@pytest_asyncio.fixture
async def admin_headers(logged_in) -> dict[str, str]:
    """Headers with JWT token for authenticated requests."""
    return {"Authorization": f"Bearer {logged_in['token']}"}


# --- Pytest Hooks for Auto-Marking ---


def pytest_collection_modifyitems(config, items):
    """Mark tests as 'integration' when they use database fixtures, else 'unit'."""
    integration_fixtures = {"db_session", "db_engine", "async_client"}

    for item in items:
        if any(mark.name in ("unit", "integration") for mark in item.iter_markers()):
            continue

        if hasattr(item, "fixturenames") and integration_fixtures & set(item.fixturenames):
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)
