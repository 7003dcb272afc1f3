"""
Shared test fixtures
"""
import pytest
import pytest_asyncio
from datetime import datetime
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from promosync.core.clock import FrozenClock
from promosync.db.base import Base
from promosync.services.persistence import InMemoryPersistence
import promosync.models  # noqa: F401


@pytest_asyncio.fixture
async def async_db_session():
    """Fresh in-memory SQLite database per test"""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def clock():
    """Clock pinned to Saturday 2024-06-15 12:00 UTC"""
    return FrozenClock(datetime(2024, 6, 15, 12, 0, 0))


@pytest.fixture
def memory_store():
    return InMemoryPersistence()
