"""
Database Connection and Session Management

This module owns everything the app needs from SQLAlchemy's async engine:
- the engine itself, built from DATABASE_URL (asyncpg or aiosqlite)
- the session factory and the FastAPI dependency that hands sessions out
- table creation at startup and the connectivity check used by /api/health
"""

import logging

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from whispers.config import settings
from whispers.models import Base

logger = logging.getLogger(__name__)


def engine_options(url: str) -> dict:
    """
    Engine keyword arguments for a database URL.

    Server databases drop idle connections, so pooled connections are
    checked before use. SQLite files need no such check.
    """
    if url.startswith("sqlite"):
        return {}
    return {"pool_pre_ping": True}


engine = create_async_engine(settings.DATABASE_URL, echo=False, **engine_options(settings.DATABASE_URL))


# expire_on_commit=False: loaded posts stay readable after commit, async
# sessions can't lazily refresh them
AsyncSessionLocal = sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False
)


async def get_db():
    """
    Database session dependency for FastAPI routes.

    Usage in FastAPI routes:
        @router.get("/posts")
        async def route(db: AsyncSession = Depends(get_db)):
            whispers = await list_published(db)

    The session is closed when the request ends, even on errors.
    """
    async with AsyncSessionLocal() as session:
        yield session


async def init_models(bind: AsyncEngine = engine) -> None:
    """Create the users and posts tables if they don't exist yet."""
    async with bind.begin() as conn:
        # run_sync() executes synchronous SQLAlchemy code in async context
        await conn.run_sync(Base.metadata.create_all)


async def ping(db: AsyncSession) -> bool:
    """
    Check that the database answers a trivial query.

    Returns:
        False (after logging a warning) when the query fails
    """
    try:
        await db.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.warning(f"Database did not answer: {e}")
        return False
