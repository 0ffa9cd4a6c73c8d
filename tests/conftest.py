#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Pytest fixtures for TaskWiki tests.
Uses an in-memory SQLite database so no external services are needed.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from taskwiki.core.config import Settings
from taskwiki.core.database import Base, create_all_tables, get_db, make_engine
from taskwiki.main import create_app
from taskwiki.services.aggregator import FetchFailure
from taskwiki.services.pages import PageSnapshot


# -----------------------------------------------------------------------------

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


# -----------------------------------------------------------------------------
# Pipeline fixtures
# -----------------------------------------------------------------------------

class StubFetcher:
    """Serves canned bodies by URL; unknown URLs fail like a dead link."""

    def __init__(self, bodies: dict[str, str] | None = None) -> None:
        self.bodies = dict(bodies or {})
        self.calls: list[str] = []

    def __call__(self, url: str) -> str:
        self.calls.append(url)
        if url not in self.bodies:
            raise FetchFailure(f"{url}: connection refused")
        return self.bodies[url]


@pytest.fixture
def settings() -> Settings:
    return Settings(environment="testing", base_url="")


def snapshot(**pages: str) -> PageSnapshot:
    return PageSnapshot(pages)


# -----------------------------------------------------------------------------
# Database / HTTP fixtures
# -----------------------------------------------------------------------------

@pytest_asyncio.fixture(scope="function")
async def db_engine():
    engine = make_engine(TEST_DB_URL, echo=False)
    await create_all_tables(engine)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session_factory(db_engine):
    """Shared sessionmaker — both client and db_session use this."""
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(scope="function")
async def db_session(db_session_factory):
    """Direct DB session for test setup."""
    async with db_session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(db_engine, db_session_factory):
    """HTTP test client wired to an isolated in-memory DB."""
    async def override_get_db():
        async with db_session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app = create_app()
    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# -----------------------------------------------------------------------------
