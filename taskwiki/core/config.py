#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Application configuration.

All values can be overridden via environment variables or a .env file.
The renderer and the task aggregator receive a ``Settings`` instance at
construction time instead of reading process state.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from taskwiki._version import __version__ as _pkg_version


# -----------------------------------------------------------------------------

class Settings(BaseSettings):

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Application ────────────────────────────────────────────────────────

    app_name: str = "TaskWiki"
    app_version: str = _pkg_version
    base_url: str = ""
    environment: Literal["development", "testing", "production"] = "development"
    log_level: str = "INFO"

    # ── Database ───────────────────────────────────────────────────────────

    database_url: str = "sqlite+aiosqlite:///./taskwiki.db"
    db_echo: bool = False

    # ── Wiki defaults ──────────────────────────────────────────────────────

    homepage: str = "Home"
    site_name: str = "TaskWiki"

    # ── Remote includes ────────────────────────────────────────────────────

    # Seconds to wait on INCLUDE http... fetches.  None blocks until the
    # remote server answers.
    fetch_timeout: Optional[float] = None


# -----------------------------------------------------------------------------

@lru_cache
def get_settings() -> Settings:
    return Settings()


# -----------------------------------------------------------------------------
