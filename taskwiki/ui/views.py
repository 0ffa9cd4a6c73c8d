#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Jinja2 UI views (server-rendered HTML pages)
============================================
GET  /              — redirect to the homepage
GET  /_list         — all pages
GET  /{name}        — view a page (unknown pages open the editor)
GET  /{name}.txt    — raw page source
GET  /e/{name}      — edit form
POST /e/{name}      — save edits
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import re
from pathlib import Path

from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncSession

from taskwiki.core.config import get_settings
from taskwiki.core.database import get_db
from taskwiki.routes.pages import rendered_html
from taskwiki.schemas import PAGE_NAME_PATTERN
from taskwiki.services import pages as page_svc


# -----------------------------------------------------------------------------

router = APIRouter(tags=["ui"])
templates = Jinja2Templates(directory=str(Path(__file__).parent.parent / "templates"))
templates.env.filters["titleize"] = page_svc.titleize

_NAME_RE = re.compile(PAGE_NAME_PATTERN)


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def _ctx(**extra) -> dict:
    settings = get_settings()
    return {
        "site_name": settings.site_name,
        "homepage": settings.homepage,
        "app_version": settings.app_version,
        **extra,
    }


def _check_name(name: str) -> None:
    if not _NAME_RE.match(name):
        raise HTTPException(status_code=404, detail=f"Invalid page name '{name}'")


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Home / listing
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@router.get("/")
async def home():
    return RedirectResponse(url=f"/{get_settings().homepage}", status_code=302)


@router.get("/_list", response_class=HTMLResponse)
async def list_view(request: Request, db: AsyncSession = Depends(get_db)):
    pages = await page_svc.list_pages(db)
    return templates.TemplateResponse(request, "list.html", _ctx(pages=pages))


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Edit
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@router.get("/e/{name}", response_class=HTMLResponse)
async def edit_view(request: Request, name: str, db: AsyncSession = Depends(get_db)):
    _check_name(name)
    page = await page_svc.find_page_or_none(db, name)
    return templates.TemplateResponse(
        request, "edit.html", _ctx(name=name, body=page.content if page else ""),
    )


@router.post("/e/{name}")
async def edit_submit(
    request: Request,
    name: str,
    body: str        = Form(""),
    db: AsyncSession = Depends(get_db),
):
    _check_name(name)
    page = await page_svc.save_page(db, name, body)
    # In-place editors post with XHR and expect the fresh HTML back.
    if request.headers.get("x-requested-with", "").lower() == "xmlhttprequest":
        return HTMLResponse(await rendered_html(db, page.name, page.content))
    return RedirectResponse(url=f"/{name}", status_code=303)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# View
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@router.get("/{name}.txt", response_class=PlainTextResponse)
async def raw_view(name: str, db: AsyncSession = Depends(get_db)):
    page = await page_svc.find_page_or_none(db, name)
    if page is None:
        raise HTTPException(status_code=404, detail=f"Unknown page {name}")
    return PlainTextResponse(page.content)


@router.get("/{name}", response_class=HTMLResponse)
async def page_view(request: Request, name: str, db: AsyncSession = Depends(get_db)):
    page = await page_svc.find_page_or_none(db, name)
    if page is None:
        return RedirectResponse(url=f"/e/{name}", status_code=302)
    html = await rendered_html(db, page.name, page.content)
    return templates.TemplateResponse(
        request, "show.html", _ctx(name=page.name, content=html),
    )


# -----------------------------------------------------------------------------
