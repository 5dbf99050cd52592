#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Package configuration.

Defaults for every Quire instance.  All values can be overridden via
``QUIRE_*`` environment variables or a .env file; per-instance choices
passed in ``QuireOptions`` always win.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


# -----------------------------------------------------------------------------

class Settings(BaseSettings):

    model_config = SettingsConfigDict(
        env_prefix="QUIRE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Editor collaborators ───────────────────────────────────────────────

    renderer_debounce: int = 300              # ms, consumed by the editor surface
    history_min_interval: int = 300           # ms between undo snapshots
    history_max_size: int = 1_000_000         # bytes of undo history

    # ── Built-in transforms ────────────────────────────────────────────────

    mangle: bool = True
    gfm_heading_id: bool = True
    heading_id_prefix: str = ""

    # ── Highlighting ───────────────────────────────────────────────────────

    highlight_css_class: str = "highlight"
    pygments_style: str = "friendly"


# -----------------------------------------------------------------------------

@lru_cache
def get_settings() -> Settings:
    return Settings()


# -----------------------------------------------------------------------------
