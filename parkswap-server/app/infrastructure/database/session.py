"""Engine and session factory shared by requests, the expiry sweeper and tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.core.config import DatabaseSettings, get_settings
from app.infrastructure.database.base import Base

_engine: AsyncEngine | None = None
AsyncSessionFactory: async_sessionmaker[AsyncSession] | None = None


def engine_options(database: DatabaseSettings, debug: bool = False) -> dict[str, Any]:
    """Keyword arguments for ``create_async_engine`` suited to the configured backend."""
    options: dict[str, Any] = {"echo": database.echo or debug}
    if make_url(database.url).get_backend_name() == "sqlite":
        # aiosqlite hands the connection to a worker thread.
        options["connect_args"] = {"check_same_thread": False}
        return options

    options["pool_pre_ping"] = True
    if database.pool_size is not None:
        options["pool_size"] = database.pool_size
    if database.max_overflow is not None:
        options["max_overflow"] = database.max_overflow
    return options


def use_explicit_sqlite_transactions(engine: AsyncEngine) -> AsyncEngine:
    """Let SQLAlchemy emit BEGIN itself on SQLite.

    The sqlite3 driver only opens a transaction before DML, so a SAVEPOINT
    issued after plain SELECTs would run (and be released) in autocommit.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


def create_engine_from_settings(database: DatabaseSettings, debug: bool = False) -> AsyncEngine:
    engine = create_async_engine(database.url, **engine_options(database, debug))
    if make_url(database.url).get_backend_name() == "sqlite":
        use_explicit_sqlite_transactions(engine)
    return engine


def get_engine() -> AsyncEngine:
    global _engine, AsyncSessionFactory
    if _engine is None:
        settings = get_settings()
        _engine = create_engine_from_settings(settings.database, settings.debug)
        AsyncSessionFactory = async_sessionmaker(bind=_engine, class_=AsyncSession, expire_on_commit=False)
    return _engine


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """One unit of work: committed when the block exits cleanly, rolled back otherwise."""
    get_engine()
    assert AsyncSessionFactory is not None
    async with AsyncSessionFactory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with session_scope() as session:
        yield session


async def init_db() -> None:
    """Create missing tables; Alembic owns schema changes after that."""
    from app.db import models  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    global _engine, AsyncSessionFactory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    AsyncSessionFactory = None
