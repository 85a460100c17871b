"""
Database connection and session management.
Uses SQLAlchemy async (aiosqlite by default, asyncpg for Postgres).
Schema changes are applied through the Alembic revisions in
`jamoneria/migrations` once at startup.
"""

import logging
from pathlib import Path
from typing import AsyncGenerator, Optional

from alembic import command
from alembic.config import Config
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from jamoneria.config import settings

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"


def create_engine_from_settings() -> AsyncEngine:
    """Create the async engine for the configured DATABASE_URL."""
    url = settings.database_url

    if url.startswith("sqlite"):
        return create_async_engine(url, echo=settings.debug)

    return create_async_engine(
        url,
        echo=settings.debug,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
    )


engine = create_engine_from_settings()

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency to get database session."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def alembic_config() -> Config:
    """Alembic config pointing at the migrations shipped with the package."""
    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_DIR))
    return config


def _upgrade_to_head(connection: Connection) -> None:
    config = alembic_config()
    config.attributes["connection"] = connection
    command.upgrade(config, "head")


async def init_db(db_engine: Optional[AsyncEngine] = None) -> None:
    """Apply pending migrations. Safe to run on every startup."""
    db_engine = db_engine or engine

    async with db_engine.begin() as conn:
        await conn.run_sync(_upgrade_to_head)

    logger.info("Database schema is up to date")


async def close_db() -> None:
    """Close database connections."""
    await engine.dispose()
