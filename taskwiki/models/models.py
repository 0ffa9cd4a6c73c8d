#!/usr/bin/env python
#
#
# ----------------------------------------------------------------------------
"""
ORM Models for TaskWiki
=======================

Tables
------
pages   — one row per wiki page, keyed by its unique name

All primary keys are UUIDs.  Timestamps stored in UTC.
"""
# ----------------------------------------------------------------------------

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from taskwiki.core.database import Base


# ----------------------------------------------------------------------------

def _uuid_col(primary_key=False, nullable=False, **kw):
    """UUID column stored as String(36) — works for both SQLite and PostgreSQL."""
    return mapped_column(
        String(36),
        primary_key=primary_key,
        nullable=nullable,
        default=lambda: str(uuid.uuid4()),
        **kw,
    )


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# pages
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class Page(Base):
    __tablename__ = "pages"

    id:         Mapped[str]      = _uuid_col(primary_key=True)
    name:       Mapped[str]      = mapped_column(String(255), unique=True, nullable=False, index=True)
    content:    Mapped[str]      = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    def __repr__(self) -> str:
        return f"<Page {self.name!r}>"


# ----------------------------------------------------------------------------
