"""Pytest fixtures for mutenancy integration tests."""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import mutenancy.models  # noqa: F401
import mutenancy.modules.tenancy  # noqa: F401
from mutenancy.config import settings
from mutenancy.database.base import Base
from mutenancy.models.context import Context
from mutenancy.models.enums import ContextLevel
from mutenancy.models.tenant import Tenant
from mutenancy.models.user import User
from mutenancy.modules.context.cache import context_cache

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine with the full schema, one per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def async_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture(autouse=True)
def _reset_context_cache():
    context_cache.reset()
    yield
    context_cache.reset()


@pytest.fixture
def multitenancy(monkeypatch):
    """Switch the tenant feature on for the duration of a test."""
    monkeypatch.setattr(settings, "multitenancy_enabled", True)


@pytest_asyncio.fixture
async def acme(async_session: AsyncSession) -> Tenant:
    """Tenant 7 owning category 50, with member user 100 and a system context."""
    tenant = Tenant(id=7, name="Acme Shipping", idnumber="acme", categoryid=50, archived=False)
    async_session.add_all([
        tenant,
        User(id=100, username="jdoe", tenantid=7),
        Context(id=1, contextlevel=ContextLevel.SYSTEM, instanceid=0, path="/1", depth=1),
    ])
    await async_session.flush()
    return tenant
