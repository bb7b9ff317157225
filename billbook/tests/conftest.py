"""
Centralized Test Configuration.
"""

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from billbook.app.main import app
from billbook.app.db.session import get_db, Base
from billbook.app.db.store import SqlAlchemyStore
from billbook.app.core.identity import RequestContext
from billbook.app.core.jwt import create_access_token
from billbook.app.domain.records.service import RecordsService

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture(autouse=True)
def apply_overrides(session_factory):
    """Route every request's session to the test database."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield
    app.dependency_overrides = {}


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# Shared session for fixture data creation and direct assertions
@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def service(session_factory):
    """Records service on its own session, for domain-level tests."""
    async with session_factory() as session:
        yield RecordsService(SqlAlchemyStore(session))


def auth_headers(user_id: str, username: str = None) -> dict:
    token = create_access_token(data={"sub": username or user_id, "user_id": user_id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def alice():
    """Headers for the first tenant."""
    return auth_headers("user-alice", "alice")


@pytest.fixture
def bob():
    """Headers for the second tenant, used for cross-tenant checks."""
    return auth_headers("user-bob", "bob")


@pytest.fixture
def alice_ctx():
    return RequestContext.for_user("user-alice", "alice")


@pytest.fixture
def bob_ctx():
    return RequestContext.for_user("user-bob", "bob")


@pytest.fixture
def rows(session_factory):
    """Fetch rows through a fresh session so assertions never see cached state."""
    from sqlalchemy import select

    async def _rows(model, **filters):
        async with session_factory() as session:
            result = await session.execute(select(model).filter_by(**filters))
            return list(result.scalars().all())

    return _rows
