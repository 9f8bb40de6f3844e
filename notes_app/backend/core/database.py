"""
Database Configuration.

SQLAlchemy async engine and session management.

One Database instance is created by the app factory and lives for the
whole process. Its engine owns the bounded connection pool that every
request draws from; sessions hand their connection back when closed.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from notes_app.backend.core.config_schema import DatabaseSchema
from notes_app.backend.core.logging import get_logger

logger = get_logger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine_for(url: str, database: DatabaseSchema | None = None) -> AsyncEngine:
    """
    Create an async SQLAlchemy engine.

    Pool sizing comes from database.yaml. SQLite has no server-side pool,
    so the pool arguments are skipped for it.
    """
    if url.startswith("sqlite"):
        engine = create_async_engine(url, echo=bool(database and database.echo))
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    kwargs: dict[str, Any] = {"pool_pre_ping": True}
    if database is not None:
        kwargs.update(
            pool_size=database.pool_size,
            max_overflow=database.max_overflow,
            pool_timeout=database.pool_timeout,
            pool_recycle=database.pool_recycle,
            echo=database.echo,
        )
    return create_async_engine(url, **kwargs)


class Database:
    """Engine plus session factory for one process."""

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self.session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_url(cls, url: str, database: DatabaseSchema | None = None) -> "Database":
        engine = create_engine_for(url, database)
        logger.debug("Database engine created", extra={"dialect": engine.dialect.name})
        return cls(engine)

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Unit of work: commit on success, roll back on error.

        The connection is returned to the pool when the block exits,
        whichever way it exits.
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def dispose(self) -> None:
        """Close every pooled connection."""
        await self.engine.dispose()


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that provides a database session.

    Usage in endpoints:
        @router.get("/items")
        async def get_items(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
