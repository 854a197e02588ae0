"""
Configuration and application state management.
"""

import os
from pathlib import Path
from typing import TYPE_CHECKING

from dotenv import load_dotenv
from fastapi import HTTPException

if TYPE_CHECKING:
    from .database import Database
    from .miniflux import MinifluxSyncScheduler

# Load environment variables
load_dotenv()


def parse_bool(value: str | None, default: bool = False) -> bool:
    """Parse boolean from environment variable or stored setting."""
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


class Config:
    """Application configuration from environment."""
    DB_PATH: Path = Path(os.getenv("DB_PATH", "./data/articles.db"))
    PORT: int = int(os.getenv("PORT", "5005"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Optional API key protecting the HTTP API (empty = local dev, no auth)
    AUTH_API_KEY: str = os.getenv("AUTH_API_KEY", "")

    # Miniflux sync defaults; values saved through /miniflux/config take precedence
    MINIFLUX_URL: str = os.getenv("MINIFLUX_URL", "")
    MINIFLUX_API_KEY: str = os.getenv("MINIFLUX_API_KEY", "")
    MINIFLUX_ENABLED: bool = parse_bool(os.getenv("MINIFLUX_ENABLED"), default=True)
    # Mark fetched entries read on the server after import
    MINIFLUX_MARK_READ: bool = parse_bool(os.getenv("MINIFLUX_MARK_READ"), default=False)
    MINIFLUX_SYNC_LIMIT: int = int(os.getenv("MINIFLUX_SYNC_LIMIT", "100"))
    MINIFLUX_TIMEOUT: float = float(os.getenv("MINIFLUX_TIMEOUT", "30"))  # seconds
    MINIFLUX_POLL_INTERVAL_MINUTES: int = int(os.getenv("MINIFLUX_POLL_INTERVAL_MINUTES", "30"))


config = Config()


class AppState:
    """Shared application state."""
    db: "Database | None" = None
    miniflux_scheduler: "MinifluxSyncScheduler | None" = None


state = AppState()


def get_db() -> "Database":
    """Dependency to get database instance."""
    if not state.db:
        raise HTTPException(status_code=500, detail="Database not initialized")
    return state.db


def get_miniflux_scheduler() -> "MinifluxSyncScheduler":
    """Dependency to get the Miniflux sync scheduler."""
    if not state.miniflux_scheduler:
        raise HTTPException(status_code=500, detail="Miniflux sync not initialized")
    return state.miniflux_scheduler
