#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Page store connection.

The wiki keeps every page in one ``pages`` table.  The default store is a
SQLite file next to the working directory; any async SQLAlchemy URL works.
``init_db`` is called once from the app lifespan (or the import script),
request handlers get their session from ``get_db``.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from collections.abc import AsyncGenerator
from pathlib import Path

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from .config import get_settings


# -----------------------------------------------------------------------------

class Base(DeclarativeBase):
    pass


# -----------------------------------------------------------------------------

def make_engine(url: str | None = None, echo: bool | None = None) -> AsyncEngine:
    """Engine for the page store at *url* (default ``Settings.database_url``).

    For a SQLite file store the parent directory is created so a fresh
    checkout can start without any setup.  Rendering runs in worker threads,
    hence ``check_same_thread`` is off for SQLite.
    """
    settings = get_settings()
    db_url  = make_url(url or settings.database_url)
    db_echo = echo if echo is not None else settings.db_echo

    connect_args: dict = {}
    if db_url.get_backend_name() == "sqlite":
        connect_args["check_same_thread"] = False
        if db_url.database and db_url.database != ":memory:":
            Path(db_url.database).parent.mkdir(parents=True, exist_ok=True)

    return create_async_engine(db_url, echo=db_echo, connect_args=connect_args)


# -----------------------------------------------------------------------------

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def init_db(url: str | None = None, echo: bool | None = None) -> None:
    """Open the page store.  Call once at startup."""
    global _engine, _session_factory
    _engine = make_engine(url, echo)
    _session_factory = async_sessionmaker(_engine, expire_on_commit=False)


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    if _session_factory is None:
        init_db()
    return _session_factory


# -----------------------------------------------------------------------------

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request, committed on success."""
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def create_all_tables(engine: AsyncEngine | None = None) -> None:
    """Create the ``pages`` table if it is missing."""
    # Registers Page on Base.metadata.
    from taskwiki.models import Page  # noqa: F401

    if engine is None:
        get_session_factory()
        engine = _engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# -----------------------------------------------------------------------------
