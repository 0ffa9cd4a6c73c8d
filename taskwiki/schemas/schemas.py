#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Pydantic v2 schemas for request validation and response serialisation.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


# Page names travel as a single URL path segment.
PAGE_NAME_PATTERN = r"^[\w-]+$"


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Shared
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class OKResponse(BaseModel):
    ok: bool = True
    message: str = "success"


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Pages
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class PageSave(BaseModel):
    content: str = Field(..., max_length=10_000_000)


# -----------------------------------------------------------------------------

class PageResponse(BaseModel):
    id: str
    name: str
    title: str
    content: str
    rendered: Optional[str]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


# -----------------------------------------------------------------------------

class PageSummary(BaseModel):
    """Lightweight listing item — no content body."""
    id: str
    name: str
    title: str
    updated_at: datetime

    model_config = {"from_attributes": True}


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Render preview
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class RenderRequest(BaseModel):
    content: str = Field(default="", max_length=1_000_000)
    name: str = Field(default="Preview", min_length=1, max_length=255, pattern=PAGE_NAME_PATTERN)


class RenderResponse(BaseModel):
    html: str
    name: str


# -----------------------------------------------------------------------------
