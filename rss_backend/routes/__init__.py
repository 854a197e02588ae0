"""
API route modules.
"""

from .articles import router as articles_router
from .feeds import router as feeds_router
from .miniflux import router as miniflux_router
from .misc import router as misc_router, public_router as misc_public_router

__all__ = [
    "articles_router",
    "feeds_router",
    "miniflux_router",
    "misc_router",
    "misc_public_router",
]
