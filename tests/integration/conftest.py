"""
Shared fixtures for integration tests.

Integration tests run the real account and session services against a
fresh in-memory sqlite database and call the API through an
httpx AsyncClient bound to the ASGI app. Only GitHub itself is mocked.

IMPORTANT: All integration tests in this project MUST:
1. Use async tests with @pytest.mark.asyncio
2. Use the `client` fixture (AsyncClient) - NOT TestClient
3. Prefix all routes with API_PREFIX (/api)
"""

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.auth.account.service import AccountService
from app.auth.dependencies import get_account_service, get_github_flow
from app.auth.github.config import OAuthFlowConfig
from app.auth.github.flow import create_github_flow
from app.auth.session.service import SessionService
from app.core.database import Base
from app.main import app
from app.tokens import get_token_service

# Using aiosqlite for async SQLite support
SQLALCHEMY_TEST_URL = "sqlite+aiosqlite:///:memory:"

# All API routes are prefixed with this. Use it in your tests!
API_PREFIX = "/api"


@pytest_asyncio.fixture(scope="function")
async def session_factory():
    """
    Session factory bound to a fresh in-memory database.

    Tables are created before the test and dropped afterwards; nothing
    persists between tests.
    """
    engine = create_async_engine(
        SQLALCHEMY_TEST_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def test_db(session_factory):
    """AsyncSession for arranging and asserting database state."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def account_service(session_factory):
    return AccountService(session_factory)


@pytest_asyncio.fixture
async def session_service(session_factory):
    return SessionService(session_factory)


@pytest_asyncio.fixture
async def github_flow_config(account_service, session_service):
    """Enabled GitHub flow wired to the real services and the test database."""
    return OAuthFlowConfig(
        public_uri="https://app.example.com",
        tokens=get_token_service(),
        accounts=account_service,
        sessions=session_service,
        client_id="test-client-id",
        client_secret="test-client-secret",
    )


@pytest_asyncio.fixture
async def client(github_flow_config, account_service):
    """
    Async test client with the login flow bound to the test database.

    Usage:
        response = await client.get(f"{API_PREFIX}/oauth/github")
    """
    flow = create_github_flow(github_flow_config)

    app.dependency_overrides[get_github_flow] = lambda: flow
    app.dependency_overrides[get_account_service] = lambda: account_service

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="https://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
