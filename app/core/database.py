"""
Database configuration with SQLAlchemy async support.
Uses SQLite for development, easily switchable to PostgreSQL for production.
"""

import logging
from pathlib import Path
from typing import AsyncIterator, Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import Pool

from app.core.config import get_settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


def _set_sqlite_pragma(dbapi_connection, connection_record):
    """Enable SQLite foreign keys."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(
    database_url: str,
    timeout: float = 5.0,
    echo: bool = False,
    poolclass: Optional[type[Pool]] = None,
) -> AsyncEngine:
    """
    Create an async engine.

    ``timeout`` bounds connection establishment; a timed-out call surfaces
    as a generic 500 through the global exception handler.
    """
    kwargs = {"echo": echo, "connect_args": {"timeout": timeout}}
    if poolclass is not None:
        kwargs["poolclass"] = poolclass

    engine = create_async_engine(database_url, **kwargs)

    if engine.dialect.name == "sqlite":
        db_path = engine.url.database
        if db_path and db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        event.listen(engine.sync_engine, "connect", _set_sqlite_pragma)

    return engine


def build_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


_settings = get_settings()
engine = build_engine(
    _settings.database_url,
    timeout=_settings.database_timeout,
    echo=_settings.sql_debug,
)
async_session_maker = build_session_maker(engine)


async def get_db() -> AsyncIterator[AsyncSession]:
    """Dependency for getting database sessions."""
    async with async_session_maker() as session:
        yield session


async def create_tables(target: AsyncEngine) -> None:
    # Model modules must be imported so their tables are registered
    import app.models  # noqa: F401

    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def init_db():
    """Initialize the database tables."""
    await create_tables(engine)
    logger.info("Database initialized (%s)", engine.url.render_as_string(hide_password=True))


async def close_db():
    """Close database connections."""
    await engine.dispose()
