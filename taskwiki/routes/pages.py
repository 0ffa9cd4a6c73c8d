#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Pages router
============
GET    /api/v1/pages               — list pages
GET    /api/v1/pages/{name}        — get page (rendered)
GET    /api/v1/pages/{name}/raw    — get raw source
PUT    /api/v1/pages/{name}        — create or replace content
DELETE /api/v1/pages/{name}        — delete page
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from fastapi import APIRouter, Depends, Path, Query, Response
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from taskwiki.core.config import get_settings
from taskwiki.core.database import get_db
from taskwiki.models import Page
from taskwiki.schemas import OKResponse, PageResponse, PageSave, PageSummary, PAGE_NAME_PATTERN
from taskwiki.services import pages as page_svc
from taskwiki.services.renderer import render_page


# -----------------------------------------------------------------------------

router = APIRouter(prefix="/pages", tags=["pages"])


# -----------------------------------------------------------------------------

async def rendered_html(db: AsyncSession, name: str, content: str) -> str:
    """Render *content* against a snapshot of the store, off the event loop."""
    snapshot = await page_svc.load_snapshot(db)
    return await run_in_threadpool(render_page, name, content, snapshot, get_settings())


def _page_response(page: Page, rendered: str | None) -> PageResponse:
    return PageResponse(
        id=page.id,
        name=page.name,
        title=page_svc.titleize(page.name),
        content=page.content,
        rendered=rendered,
        created_at=page.created_at,
        updated_at=page.updated_at,
    )


# ── List ─────────────────────────────────────────────────────────────────────

@router.get("", response_model=list[PageSummary])
async def list_pages(db: AsyncSession = Depends(get_db)):
    return [
        PageSummary(id=p.id, name=p.name, title=page_svc.titleize(p.name), updated_at=p.updated_at)
        for p in await page_svc.list_pages(db)
    ]


# ── Read ──────────────────────────────────────────────────────────────────────

@router.get("/{name}", response_model=PageResponse)
async def get_page(
    name: str,
    render_html: bool = Query(True, alias="render"),
    db: AsyncSession  = Depends(get_db),
):
    page = await page_svc.find_page(db, name)
    rendered = await rendered_html(db, page.name, page.content) if render_html else None
    return _page_response(page, rendered)


# ── Raw source ────────────────────────────────────────────────────────────────

@router.get("/{name}/raw")
async def get_page_raw(name: str, db: AsyncSession = Depends(get_db)):
    """Return the page source as plain text."""
    page = await page_svc.find_page(db, name)
    return Response(content=page.content, media_type="text/plain; charset=utf-8")


# ── Save ──────────────────────────────────────────────────────────────────────

@router.put("/{name}", response_model=PageResponse)
async def save_page(
    data: PageSave,
    name: str        = Path(..., max_length=255, pattern=PAGE_NAME_PATTERN),
    db: AsyncSession = Depends(get_db),
):
    page = await page_svc.save_page(db, name, data.content)
    return _page_response(page, await rendered_html(db, page.name, page.content))


# ── Delete ────────────────────────────────────────────────────────────────────

@router.delete("/{name}", response_model=OKResponse)
async def delete_page(name: str, db: AsyncSession = Depends(get_db)):
    await page_svc.remove_page(db, name)
    return OKResponse(message=f"Page '{name}' deleted")


# -----------------------------------------------------------------------------
