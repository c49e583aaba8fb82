from collections.abc import AsyncIterator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from employee_api.db.session import Base, get_db
from employee_api.main import app

# Fixtures in other modules (like tests/seeds.py) are only visible to pytest
# when registered as plugins here.
pytest_plugins = ["tests.seeds"]

# In-memory SQLite shared across the test's connections through a single pooled connection.
TEST_DATABASE_URL = "sqlite+aiosqlite://"

engine = create_async_engine(
    TEST_DATABASE_URL,
    poolclass=StaticPool,
    connect_args={"check_same_thread": False},
)
async_session = async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def db() -> AsyncIterator[AsyncSession]:
    """Create tables and yield a session, then drop tables after test."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


def _client(raise_app_exceptions: bool = True) -> AsyncClient:
    return AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=raise_app_exceptions),
        base_url="http://test",
    )


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncIterator[AsyncClient]:
    """HTTP client that uses the test database session."""

    async def override_get_db() -> AsyncIterator[AsyncSession]:
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with _client() as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def lenient_client(client: AsyncClient) -> AsyncIterator[AsyncClient]:
    """Client that returns the 500 response instead of re-raising the server error.

    Starlette re-raises unhandled exceptions after the catch-all handler has
    sent its response; ASGITransport would surface that as a test failure.
    """
    async with _client(raise_app_exceptions=False) as lenient:
        yield lenient
