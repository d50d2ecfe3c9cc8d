"""Database connection and session management.

Provides the async SQLAlchemy engine and session factory that back the
contact document store.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


def create_engine(database_url: str) -> AsyncEngine:
    """Create the async engine for a database URL."""
    if database_url.startswith("sqlite"):
        # SQLite async requires aiosqlite
        database_url = database_url.replace("sqlite://", "sqlite+aiosqlite://")
        return create_async_engine(database_url, echo=False)

    # PostgreSQL with asyncpg
    if database_url.startswith("postgresql://"):
        database_url = database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return create_async_engine(
        database_url,
        echo=False,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Async session factory bound to an engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_db(db_engine: AsyncEngine) -> None:
    """Initialize database tables.

    Creates all tables defined in models if they don't exist.
    """
    # Models must be registered on Base.metadata before create_all
    from api.db import models  # noqa: F401

    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
