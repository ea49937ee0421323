"""
Create database tables from ORM models.

Usage:
    python -m docfeedback.boundary.db.create_tables

Dependencies: sqlalchemy, docfeedback.boundary.db
System role: Schema initialisation for development and first deploys
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from docfeedback.boundary.db.base import Base
from docfeedback.boundary.db.connection import get_async_engine
from docfeedback.boundary.db.models import FeedbackJobModel  # noqa: F401  (registers table)
from docfeedback.observability import configure_logging

logger = logging.getLogger(__name__)


async def create_all_tables(engine: AsyncEngine | None = None) -> None:
    """Create every registered table that does not exist yet."""
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(
        f"{__name__}:create_all_tables - Tables ready",
        extra={"tables": sorted(Base.metadata.tables)},
    )


async def drop_all_tables(engine: AsyncEngine | None = None) -> None:
    """Drop every registered table. Destructive; development only."""
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.warning(f"{__name__}:drop_all_tables - All tables dropped")


if __name__ == "__main__":
    configure_logging()
    asyncio.run(create_all_tables())
