"""
Miscellaneous routes: health check and stats.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from .. import __version__
from ..auth import verify_api_key
from ..config import config, state, get_db
from ..database import Database

public_router = APIRouter(tags=["misc"])

router = APIRouter(tags=["misc"], dependencies=[Depends(verify_api_key)])


# ─────────────────────────────────────────────────────────────
# Health Check
# ─────────────────────────────────────────────────────────────

@public_router.get("/status")
async def health_check() -> dict:
    """API health check."""
    scheduler = state.miniflux_scheduler
    return {
        "status": "ok",
        "version": __version__,
        "auth_enabled": bool(config.AUTH_API_KEY),
        "miniflux_polling": scheduler.is_running if scheduler else False,
    }


# ─────────────────────────────────────────────────────────────
# Stats
# ─────────────────────────────────────────────────────────────

@router.get("/stats")
async def get_stats(
    db: Annotated[Database, Depends(get_db)]
) -> dict:
    """Get overall statistics."""
    feeds = db.get_feeds()
    total_unread = sum(f.unread_count for f in feeds)
    scheduler = state.miniflux_scheduler

    return {
        "total_feeds": len(feeds),
        "total_articles": db.count_articles(),
        "total_unread": total_unread,
        "sync_in_progress": scheduler.is_syncing if scheduler else False,
    }
