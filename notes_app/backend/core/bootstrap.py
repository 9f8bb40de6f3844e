"""
Schema Bootstrap.

Creates the users and notes tables with their indexes if they are absent.
Idempotent; run once at process startup (app lifespan or
`run.py --action init-db`), never from request handling.
Managed deployments use the Alembic migrations instead.
"""

from sqlalchemy.ext.asyncio import AsyncEngine

from notes_app.backend.core.logging import get_logger
from notes_app.backend.models.base import Base
from notes_app.backend.models.note import Note
from notes_app.backend.models.user import User

logger = get_logger(__name__)

MANAGED_TABLES = (User.__table__, Note.__table__)


async def ensure_schema(engine: AsyncEngine) -> None:
    """Create missing tables and indexes; existing ones are left alone."""
    async with engine.begin() as conn:
        await conn.run_sync(
            Base.metadata.create_all,
            tables=list(MANAGED_TABLES),
            checkfirst=True,
        )
    logger.info(
        "Database schema ensured",
        extra={
            "dialect": engine.dialect.name,
            "tables": [table.name for table in MANAGED_TABLES],
        },
    )
