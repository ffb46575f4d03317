"""
UserHub Backend — Database Engine & Session Management
========================================================

What:  Async SQLAlchemy engine factory, session factory, declarative base and
       the transactional session scope used by repositories.
How:   The composition root calls build_engine() / build_session_factory()
       once at startup and hands the session factory to the repository.
       Nothing in this module is created at import time.

Connection Pooling Strategy (server databases):
    pool_size:        Persistent connections for normal load
    max_overflow:     Temporary connections for traffic spikes
    pool_pre_ping:    Validates connections before use (catches stale connections)
    pool_recycle=3600: Recycles connections every hour

    SQLite URLs skip these options; SQLAlchemy picks a suitable pool itself.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM entities.

    Shares a single metadata object, which Alembic reads for --autogenerate.
    """
    pass


# ── Engine & Session Factories ────────────────────────────────────────────
def build_engine(
    database_url: str,
    pool_size: int = 20,
    max_overflow: int = 10,
    pool_pre_ping: bool = True,
    echo: bool = False,
) -> AsyncEngine:
    """
    Create the async engine for the given URL.

    Pool options are only passed for server databases; SQLite's default
    pools reject them.
    """
    options = {"echo": echo}
    if not database_url.startswith("sqlite"):
        options.update(
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=pool_pre_ping,
            pool_recycle=3600,
        )
    engine = create_async_engine(database_url, **options)
    logger.info("Database engine created for %s", engine.url.render_as_string(hide_password=True))
    return engine


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Session factory bound to the engine.

    expire_on_commit=False: entities returned by a repository stay readable
    after their session has been closed.
    """
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


# ── Session Scope ─────────────────────────────────────────────────────────
@asynccontextmanager
async def session_scope(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """
    One session, one transaction.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the repository operation
        3. On success: commits the transaction
        4. On error: rolls back, then re-raises
        5. Always: closes the session (returns the connection to the pool)
    """
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def create_schema(engine: AsyncEngine) -> None:
    """Create all tables known to Base.metadata that do not exist yet."""
    # Entities must be imported so they register with Base.metadata
    from userhub.data_access import entities  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ensured")


async def dispose_engine(engine: AsyncEngine) -> None:
    """Gracefully closes all connections in the pool (application shutdown)."""
    await engine.dispose()
    logger.info("Database engine disposed")
