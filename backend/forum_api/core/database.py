"""
Database engine and session management.

Async SQLAlchemy engine built from settings, with a session
dependency for request handlers.
"""

from datetime import datetime, timezone
from typing import AsyncGenerator

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from forum_api.core.config import settings


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


def utcnow() -> datetime:
    """Naive UTC timestamp for DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


# Integer primary keys are int4 on PostgreSQL
MAX_ID = 2**31 - 1


def is_valid_id(value: int) -> bool:
    """Whether value can be the primary key of a stored row."""
    return 0 < value <= MAX_ID


def _engine_options(url: str) -> dict:
    options: dict = {"echo": settings.database_echo}
    # In-memory SQLite uses StaticPool, which rejects sizing arguments
    if not url.startswith("sqlite"):
        options["pool_size"] = settings.database_pool_size
        options["max_overflow"] = settings.database_max_overflow
        options["pool_pre_ping"] = True
    return options


engine = create_async_engine(
    settings.database_url,
    **_engine_options(settings.database_url),
)

async_session_maker = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a database session for the duration of a request."""
    async with async_session_maker() as session:
        yield session


async def init_db() -> None:
    """Create all tables."""
    # Register models on the metadata
    from forum_api.models import forum, user  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.debug(f"Database schema ready ({engine.url.get_backend_name()})")


async def drop_db() -> None:
    """Drop all tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def close_db() -> None:
    """Dispose of the connection pool."""
    await engine.dispose()
