# oauth_server/adapters/outbound/persistence/database.py

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from oauth_server.adapters.configuration.config import settings

# Configure logger
logger = logging.getLogger(__name__)


def engine_options(database_url: str) -> Dict[str, Any]:
    """
    Engine keyword arguments for the given URL.

    SQLite (used for tests and local runs) does not accept the pool sizing options.
    """
    if database_url.startswith("sqlite"):
        return {"echo": settings.DATABASE_ECHO, "future": True}

    return {
        "echo": settings.DATABASE_ECHO,
        "future": True,
        "pool_size": 20,
        "max_overflow": 10,
        "pool_timeout": 30,
        "pool_recycle": 1800,
        "pool_pre_ping": True,
    }


def create_engine_and_sessionmaker(database_url: str):
    """
    Create the async engine and its session factory.

    Returns:
        Tuple of (AsyncEngine, async_sessionmaker)
    """
    engine = create_async_engine(database_url, **engine_options(database_url))
    session_factory = async_sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        expire_on_commit=False,
    )
    return engine, session_factory


logger.info(f"Connecting to database: {settings.DATABASE_URL.split('@')[-1]}")

try:
    engine: AsyncEngine
    engine, AsyncSessionLocal = create_engine_and_sessionmaker(settings.DATABASE_URL)
    logger.info("Async database connection configured successfully")

except SQLAlchemyError as e:
    logger.error(f"Error connecting to database: {str(e)}")
    raise


@asynccontextmanager
async def get_db_context() -> AsyncGenerator[AsyncSession, None]:
    """
    Provides an async context for database operations,
    ensuring the session is closed at the end.

    Yields:
        AsyncSession: SQLAlchemy async session

    Example:
        ```python
        async with get_db_context() as db:
            deleted = await AccessTokenRepository(db).purge_expired_tokens()
        ```
    """
    session = AsyncSessionLocal()
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency injection for use with FastAPI.

    Yields:
        AsyncSession: SQLAlchemy async session
    """
    async with get_db_context() as session:
        yield session
