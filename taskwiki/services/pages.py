#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Page service
============
Create / read / update / delete for wiki pages, keyed by page name.

The render pipeline is synchronous, so a request first loads a read-only
``PageSnapshot`` of the store and hands that to the renderer.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
import re
from typing import Iterator, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskwiki.models import Page

log = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

class PageNotFound(LookupError):
    """No page is stored under the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Page '{self.name}' not found"


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def titleize(name: str) -> str:
    """Split a WikiWord into words: ``ProjectWidgets`` → ``Project Widgets``."""
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1 \2", name)
    return re.sub(r"([a-z\d])([A-Z])", r"\1 \2", name)


# -----------------------------------------------------------------------------

class PageSnapshot:
    """Read-only, in-memory view of the page store for one render."""

    def __init__(self, pages: dict[str, str] | None = None) -> None:
        self._pages = dict(pages or {})

    def find(self, name: str) -> str:
        try:
            return self._pages[name]
        except KeyError:
            raise PageNotFound(name) from None

    def list_all(self) -> list[tuple[str, str]]:
        return sorted(self._pages.items(), key=lambda item: item[0].lower())

    def __contains__(self, name: str) -> bool:
        return name in self._pages

    def __iter__(self) -> Iterator[str]:
        return iter(self._pages)

    def __len__(self) -> int:
        return len(self._pages)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# CRUD
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

async def find_page_or_none(db: AsyncSession, name: str) -> Optional[Page]:
    result = await db.execute(select(Page).where(Page.name == name))
    return result.scalar_one_or_none()


async def find_page(db: AsyncSession, name: str) -> Page:
    page = await find_page_or_none(db, name)
    if page is None:
        raise PageNotFound(name)
    return page


# -----------------------------------------------------------------------------

async def save_page(db: AsyncSession, name: str, content: str) -> Page:
    """Create *name* or replace its content.  Unchanged content is not rewritten."""
    page = await find_page_or_none(db, name)
    if page is None:
        page = Page(name=name, content=content)
        db.add(page)
        log.info("Created %s", name)
    elif page.content != content:
        page.content = content
        log.info("Edited %s", name)
    await db.flush()
    await db.refresh(page)
    return page


# -----------------------------------------------------------------------------

async def remove_page(db: AsyncSession, name: str) -> None:
    page = await find_page(db, name)
    await db.delete(page)
    await db.flush()
    log.info("Removed %s", name)


# -----------------------------------------------------------------------------

async def list_pages(db: AsyncSession) -> list[Page]:
    """All pages in ascending case-insensitive name order."""
    result = await db.execute(select(Page).order_by(func.lower(Page.name)))
    return list(result.scalars().all())


# -----------------------------------------------------------------------------

async def load_snapshot(db: AsyncSession) -> PageSnapshot:
    result = await db.execute(select(Page.name, Page.content))
    return PageSnapshot({name: content for name, content in result.all()})


# -----------------------------------------------------------------------------
