"""
HTTP exception utilities for common error patterns.

Maps missing resources to 404 and Miniflux sync errors to HTTP statuses.
"""

from typing import TypeVar

from fastapi import HTTPException

from .miniflux import (
    LocalStoreFailed,
    MinifluxError,
    MinifluxNotConfigured,
    RemoteRequestFailed,
    RemoteTimeout,
    SyncInProgress,
)

T = TypeVar("T")


def require_resource(resource: T | None, detail: str = "Resource not found") -> T:
    """
    Raise 404 if resource is None, otherwise return the resource.

    Usage:
        article = require_resource(db.get_article(id), "Article not found")
    """
    if resource is None:
        raise HTTPException(status_code=404, detail=detail)
    return resource


def require_article(article: T | None) -> T:
    """Raise 404 if article is None."""
    return require_resource(article, "Article not found")


def require_feed(feed: T | None) -> T:
    """Raise 404 if feed is None."""
    return require_resource(feed, "Feed not found")


def miniflux_http_error(error: MinifluxError) -> HTTPException:
    """
    Translate a Miniflux sync error into an HTTPException.

    - Not configured: 400
    - Sync already running: 409
    - Remote timeout: 504
    - Local database failure: 500
    - Any other remote failure: 502
    """
    if isinstance(error, MinifluxNotConfigured):
        return HTTPException(status_code=400, detail=str(error))
    if isinstance(error, SyncInProgress):
        return HTTPException(status_code=409, detail=str(error))
    if isinstance(error, RemoteTimeout):
        return HTTPException(status_code=504, detail=str(error))
    if isinstance(error, LocalStoreFailed):
        return HTTPException(status_code=500, detail=str(error))
    if isinstance(error, RemoteRequestFailed) and error.status_code == 401:
        return HTTPException(status_code=502, detail="Miniflux rejected the API key")
    return HTTPException(status_code=502, detail=str(error))
