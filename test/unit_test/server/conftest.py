from typing import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel.pool import StaticPool

from warden.core.database.utils import create_all

# Use in-memory SQLite for testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_PASSWORD = "Sup3r$ecret"


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh in-memory database engine for each test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(test_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(name="session")
async def session_fixture(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Create a new session for each test."""
    async with session_maker() as session:
        yield session


async def refresh_csrf(client: AsyncClient) -> str:
    """Fetch the session's CSRF token and send it on every following request."""
    response = await client.get("/api/csrf-token")
    token = response.json()["csrf_token"]
    client.headers["X-CSRF-Token"] = token
    return token


async def register_and_login(client: AsyncClient, username: str, password: str = TEST_PASSWORD) -> dict:
    response = await client.post(
        "/api/auth/register",
        json={"username": username, "password": password, "email": f"{username}@example.com"},
    )
    assert response.status_code == 201, response.text
    response = await client.post("/api/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    # Login starts a new session, so the CSRF token must be fetched afterwards
    await refresh_csrf(client)
    return response.json()


@pytest_asyncio.fixture(name="anon_client")
async def anon_client_fixture(session_maker) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client with the database dependency overridden."""
    from warden.core.database import get_session
    from warden.server.main import app

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_session] = get_session_override

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture(name="client")
async def client_fixture(anon_client: AsyncClient) -> AsyncClient:
    """Client logged in as a regular user with a valid CSRF header."""
    await register_and_login(anon_client, "alice")
    return anon_client


@pytest_asyncio.fixture(name="admin_client")
async def admin_client_fixture(anon_client: AsyncClient, session_maker) -> AsyncClient:
    """Client logged in as an administrator."""
    from warden.core.database.repositories import UserRepository

    await anon_client.post(
        "/api/auth/register",
        json={"username": "root", "password": TEST_PASSWORD, "email": "root@example.com"},
    )
    async with session_maker() as session:
        repo = UserRepository(session)
        user = await repo.get_by_username("root")
        user.is_admin = True
        await repo.update(user)

    await anon_client.post("/api/auth/login", json={"username": "root", "password": TEST_PASSWORD})
    await refresh_csrf(anon_client)
    return anon_client


@pytest_asyncio.fixture
async def login_as(anon_client: AsyncClient):
    """Return a coroutine that switches ``anon_client`` to a new account."""

    async def _login_as(username: str) -> dict:
        await anon_client.post("/api/auth/logout")
        return await register_and_login(anon_client, username)

    return _login_as
