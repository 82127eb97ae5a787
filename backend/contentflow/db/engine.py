"""
Database engine configuration for contentflow.

Provides async SQLAlchemy engine with SQLite WAL mode,
crash-safe PRAGMA configuration, and session management.
"""
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from contentflow.config import settings


def configure_sqlite_pragmas(dbapi_conn, connection_record):
    """
    Configure SQLite PRAGMA settings for crash safety and concurrency.

    - WAL mode: readers do not block the single writer
    - FULL synchronous: a committed transition survives a crash
    - Busy timeout: wait up to 5s for the write lock instead of failing
    """
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=FULL")
    cursor.execute("PRAGMA busy_timeout=5000")
    cursor.close()


def build_engine(database_url: str, **kwargs) -> AsyncEngine:
    """Create an async engine, registering SQLite pragmas when applicable."""
    new_engine = create_async_engine(database_url, echo=False, **kwargs)
    if new_engine.dialect.name == "sqlite":
        # CRITICAL: Use engine.sync_engine for aiosqlite compatibility
        event.listens_for(new_engine.sync_engine, "connect")(configure_sqlite_pragmas)
    return new_engine


def build_sessionmaker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False keeps loaded attributes usable after commit
    return async_sessionmaker(
        bind,
        expire_on_commit=False,
        class_=AsyncSession,
    )


engine = build_engine(settings.storage.database_url)

async_session = build_sessionmaker(engine)


async def get_session():
    """
    Dependency injection function for async sessions.

    Yields an async session and ensures proper cleanup.
    """
    async with async_session() as session:
        yield session


async def shutdown():
    """Dispose of engine and close all connections."""
    await engine.dispose()
