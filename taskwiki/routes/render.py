#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Render endpoint — live preview for the editor.

POST /api/v1/render   {"content": "...", "name": "PageName"}
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskwiki.core.database import get_db
from taskwiki.routes.pages import rendered_html
from taskwiki.schemas import RenderRequest, RenderResponse


# -----------------------------------------------------------------------------

router = APIRouter(prefix="/render", tags=["render"])


# -----------------------------------------------------------------------------

@router.post("", response_model=RenderResponse)
async def render_preview(data: RenderRequest, db: AsyncSession = Depends(get_db)):
    """Return rendered HTML for unsaved content, as if it were page *name*."""
    html = await rendered_html(db, data.name, data.content)
    return RenderResponse(html=html, name=data.name)


# -----------------------------------------------------------------------------
