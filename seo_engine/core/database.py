"""Async SQLAlchemy database setup."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from seo_engine.config import settings

logger = logging.getLogger(__name__)


def _engine_kwargs(database_url: str) -> dict[str, Any]:
    kwargs: dict[str, Any] = {"echo": settings.database_echo}
    if database_url.startswith("sqlite"):
        return kwargs
    kwargs.update(
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_pre_ping=True,
        pool_recycle=300,
    )
    return kwargs


def _enable_sqlite_transactions(target: AsyncEngine) -> None:
    """Let SQLAlchemy emit BEGIN itself so SAVEPOINTs nest inside one transaction.

    The sqlite3 driver otherwise defers BEGIN until the first DML statement,
    which turns the first RELEASE SAVEPOINT into a commit.
    """

    @event.listens_for(target.sync_engine, "connect")
    def _disable_driver_transactions(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(target.sync_engine, "begin")
    def _emit_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN")


def create_engine_for(database_url: str, **overrides: Any) -> AsyncEngine:
    """Create an async engine with pool options suited to the backend."""
    new_engine = create_async_engine(database_url, **{**_engine_kwargs(database_url), **overrides})
    if new_engine.dialect.name == "sqlite":
        _enable_sqlite_transactions(new_engine)
    return new_engine


engine = create_engine_for(settings.database_url)

# Session factory
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session for dependency injection."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            logger.warning(f"Database session error: {repr(e)}, rolling back")
            await session.rollback()
            raise


@asynccontextmanager
async def get_session_context(
    *,
    commit_on_exit: bool = True,
) -> AsyncGenerator[AsyncSession, None]:
    """Get database session as context manager for non-DI usage."""
    async with async_session_maker() as session:
        try:
            yield session
            if commit_on_exit:
                await session.commit()
        except Exception as e:
            logger.warning(f"Database session error: {repr(e)}, rolling back")
            await session.rollback()
            raise


def _ensure_sqlite_directory(database_url: str | URL) -> None:
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite" or url.database in (None, "", ":memory:"):
        return
    Path(url.database).parent.mkdir(parents=True, exist_ok=True)


async def init_db(target: AsyncEngine | None = None) -> None:
    """Initialize database (create tables if needed)."""
    logger.info("Initializing database tables")
    from seo_engine.models.base import Base

    target = target or engine
    _ensure_sqlite_directory(target.url)
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Close database connections."""
    logger.info("Closing database connections")
    await engine.dispose()
