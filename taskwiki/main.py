#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
TaskWiki — FastAPI application factory
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from taskwiki.core.config import get_settings
from taskwiki.core.database import create_all_tables, init_db
from taskwiki.routes import pages, render
from taskwiki.services.pages import PageNotFound
from taskwiki.ui import views

log = logging.getLogger(__name__)


HOMEPAGE_CONTENT = (
    "# Welcome to TaskWiki\n\n"
    "Pages are Markdown.  Lines starting with a task keyword become tasks:\n\n"
    "TODO project:Wiki write the first real page\n"
    "DONE install TaskWiki\n\n"
    "## Collecting tasks\n\n"
    "`INCLUDE project:Wiki` lists every task on ProjectWiki, "
    "`INCLUDE wiki:all` the tasks of every page.\n"
)


# -----------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle."""
    init_db()
    await create_all_tables()   # safe: CREATE TABLE IF NOT EXISTS
    await _seed_defaults()
    yield


# -----------------------------------------------------------------------------

async def _seed_defaults() -> None:
    """Create the homepage if the store is empty."""
    from taskwiki.core.database import get_session_factory
    from taskwiki.services import pages as page_svc

    settings = get_settings()
    factory = get_session_factory()

    async with factory() as session:
        try:
            if await page_svc.find_page_or_none(session, settings.homepage) is None:
                await page_svc.save_page(session, settings.homepage, HOMEPAGE_CONTENT)
                await session.commit()
        except Exception:
            log.exception("Could not seed %s", settings.homepage)
            await session.rollback()


# -----------------------------------------------------------------------------

def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="A git-wiki style wiki with embedded task lists.",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan,
    )

    # ── API routers ───────────────────────────────────────────────────────

    prefix = "/api/v1"

    app.include_router(pages.router,  prefix=prefix)
    app.include_router(render.router, prefix=prefix)

    # ── Health check ──────────────────────────────────────────────────────

    @app.get("/api/health", tags=["system"])
    async def health():
        return {
            "status": "ok",
            "app": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
        }

    # ── UI (Jinja2) router, after the API: /{name} matches any segment ────

    app.include_router(views.router)

    # ── Global exception handlers ─────────────────────────────────────────

    @app.exception_handler(PageNotFound)
    async def page_not_found(request: Request, exc: PageNotFound):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": str(exc)},
        )

    @app.exception_handler(404)
    async def not_found(request: Request, exc):
        if request.url.path.startswith("/api/"):
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content={"detail": getattr(exc, "detail", "Not found")},
            )
        return views.templates.TemplateResponse(
            request,
            "error.html",
            {"site_name": settings.site_name, "homepage": settings.homepage,
             "message": "The page you requested could not be found."},
            status_code=404,
        )

    return app


# -----------------------------------------------------------------------------

app = create_app()


# -----------------------------------------------------------------------------
