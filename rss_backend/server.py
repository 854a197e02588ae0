"""
RSS Reader API Server

FastAPI application providing endpoints for:
- Feed and article listing
- Miniflux connection settings and synchronization
- Health check and stats
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from . import __version__
from .config import config, state
from .database import Database
from .miniflux import MinifluxSyncScheduler
from .routes import (
    articles_router,
    feeds_router,
    miniflux_router,
    misc_router,
    misc_public_router,
)

logging.basicConfig(
    level=config.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup application resources."""
    # Startup - skip if already initialized (e.g., by tests)
    if state.db is None:
        state.db = Database(config.DB_PATH)
        logger.info(f"Database opened at {config.DB_PATH}")

    if state.miniflux_scheduler is None:
        state.miniflux_scheduler = MinifluxSyncScheduler(state.db)

    await state.miniflux_scheduler.start()

    yield

    # Shutdown
    if state.miniflux_scheduler:
        try:
            await state.miniflux_scheduler.stop()
        except Exception as e:
            logger.warning(f"Error stopping Miniflux scheduler: {e}")


app = FastAPI(
    title="RSS Reader API",
    version=__version__,
    lifespan=lifespan
)

# Include routers
app.include_router(misc_public_router)
app.include_router(misc_router)
app.include_router(articles_router)
app.include_router(feeds_router)
app.include_router(miniflux_router)
