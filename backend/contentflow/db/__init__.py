"""
Database module for contentflow.

Provides async SQLAlchemy engine with SQLite WAL mode,
session management, and schema initialization.
"""
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from contentflow.db.engine import (
    async_session,
    build_engine,
    build_sessionmaker,
    engine,
    get_session,
    shutdown,
)
from contentflow.db.models import Base, ContentJob

logger = logging.getLogger(__name__)


async def init_database(bind: Optional[AsyncEngine] = None):
    """Initialize database schema on first run (idempotent)."""
    target = bind or engine
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.debug(f"Database schema ready on {target.url.render_as_string(hide_password=True)}")


__all__ = [
    "Base",
    "ContentJob",
    "engine",
    "async_session",
    "build_engine",
    "build_sessionmaker",
    "get_session",
    "shutdown",
    "init_database",
]
