"""
Database configuration and session management.
Uses async SQLAlchemy with the aiosqlite driver for the local profile store.
"""
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine
)
from sqlmodel import SQLModel
from typemotion.config import settings


def build_engine(database_url: str) -> AsyncEngine:
    """Create an async engine for the given URL."""
    return create_async_engine(
        database_url,
        echo=False,
        pool_pre_ping=True,
    )


def build_session_maker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory for creating async sessions."""
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False
    )


engine = build_engine(settings.database_url)
async_session_maker = build_session_maker(engine)


async def init_db(bind: AsyncEngine = engine) -> None:
    """
    Initialize database tables.

    The profile store is a single local table, so it is created on startup.
    """
    # Register table metadata
    from typemotion.models import UserProfile  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def close_db() -> None:
    """
    Close database connections.

    Call this during application shutdown.
    """
    await engine.dispose()


@asynccontextmanager
async def get_session_context(
    session_maker: async_sessionmaker[AsyncSession] = async_session_maker,
) -> AsyncGenerator[AsyncSession, None]:
    """
    Context manager for getting database sessions.

    Usage outside of FastAPI (e.g., during startup):
        async with get_session_context() as session:
            profile = await profile_crud.get(session)
    """
    async with session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def check_db_connection() -> bool:
    """
    Check if database is reachable.

    Returns True if connection succeeds, False otherwise.
    Used by health check endpoint.
    """
    try:
        async with async_session_maker() as session:
            await session.execute(text("SELECT 1"))
            return True
    except Exception:
        return False
