"""
Engine and session factory for the workspace store
"""
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool, StaticPool
import re
import ssl

from promosync.core.config import settings


is_sqlite = "sqlite" in settings.DATABASE_URL

database_url = settings.DATABASE_URL
if database_url.startswith("postgresql://"):
    database_url = database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    # asyncpg takes ssl as a connect arg, not a URL parameter
    if "sslmode=" in database_url:
        database_url = re.sub(r'[\?&]sslmode=[^&]*', '', database_url)
        database_url = database_url.rstrip('?&')

if is_sqlite:
    engine = create_async_engine(
        database_url,
        echo=settings.DB_ECHO,
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
else:
    ssl_context = ssl.create_default_context()
    if not settings.DB_SSL_VERIFY:
        ssl_context.check_hostname = False
        ssl_context.verify_mode = ssl.CERT_NONE

    engine = create_async_engine(
        database_url,
        echo=settings.DB_ECHO,
        future=True,
        pool_pre_ping=True,
        poolclass=NullPool,
        connect_args={"ssl": ssl_context},
    )

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False
)


async def get_db() -> AsyncSession:
    """
    Dependency for getting async database sessions

    Yields:
        AsyncSession: Database session
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
