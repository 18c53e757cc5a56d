"""
Database Connection Manager.
Handles asynchronous connections to the artifact database using SQLAlchemy.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from config.settings import settings
from src.database.models import Base


def build_engine(database_url: Optional[str] = None) -> AsyncEngine:
    """
    Create an async engine.
    URL defaults to settings.database_url (aiosqlite or asyncpg).
    """
    return create_async_engine(
        database_url or settings.database_url,
        echo=settings.database_echo,
        future=True,
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Create a session factory bound to `engine`."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False  # Keeps loaded attributes usable after commit
    )


async def init_db(engine: AsyncEngine):
    """
    Initialize the database by creating all tables defined in models.py.
    This is called during application startup.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@asynccontextmanager
async def get_db(session_factory: async_sessionmaker) -> AsyncIterator[AsyncSession]:
    """
    Provides a session scope around a series of operations.
    Usage:
        async with get_db(factory) as db:
            result = await db.execute(...)
    Rolls back on error and always closes the session.
    """
    session = session_factory()
    try:
        yield session
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


async def get_session(request: Request) -> AsyncIterator[AsyncSession]:
    """FastAPI dependency: one session per request from the app's factory."""
    async with get_db(request.app.state.session_factory) as session:
        yield session
