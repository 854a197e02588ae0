"""
Pydantic models for API request/response validation.
"""

from typing import Literal

from pydantic import BaseModel, Field

from .database import DBArticle, DBFeed
from .miniflux import SyncResult


# ─────────────────────────────────────────────────────────────
# Article Schemas
# ─────────────────────────────────────────────────────────────

ArticleFilter = Literal["", "all", "unread", "read", "starred"]


class ArticleResponse(BaseModel):
    """Article for list view."""
    id: int
    feed_id: int
    url: str
    title: str
    author: str | None = None
    is_read: bool
    is_bookmarked: bool
    is_hidden: bool = False
    published_at: str | None
    created_at: str

    @classmethod
    def from_db(cls, article: DBArticle) -> "ArticleResponse":
        return cls(
            id=article.id,
            feed_id=article.feed_id,
            url=article.url,
            title=article.title,
            author=article.author,
            is_read=article.is_read,
            is_bookmarked=article.is_bookmarked,
            is_hidden=article.is_hidden,
            published_at=article.published_at.isoformat() if article.published_at else None,
            created_at=article.created_at.isoformat(),
        )


class ArticleDetailResponse(ArticleResponse):
    """Article with content for detail view."""
    content: str | None

    @classmethod
    def from_db(cls, article: DBArticle) -> "ArticleDetailResponse":
        base = ArticleResponse.from_db(article)
        return cls(**base.model_dump(), content=article.content)


class HideArticleRequest(BaseModel):
    """Request to hide or unhide an article."""
    hidden: bool = True


# ─────────────────────────────────────────────────────────────
# Feed Schemas
# ─────────────────────────────────────────────────────────────

class FeedResponse(BaseModel):
    """Feed for list view."""
    id: int
    url: str
    name: str
    category: str | None
    unread_count: int
    last_fetched: str | None
    fetch_error: str | None = None

    @classmethod
    def from_db(cls, feed: DBFeed) -> "FeedResponse":
        return cls(
            id=feed.id,
            url=feed.url,
            name=feed.name,
            category=feed.category,
            unread_count=feed.unread_count,
            last_fetched=feed.last_fetched.isoformat() if feed.last_fetched else None,
            fetch_error=feed.fetch_error
        )


# ─────────────────────────────────────────────────────────────
# Miniflux Schemas
# ─────────────────────────────────────────────────────────────

class MinifluxConfigRequest(BaseModel):
    """Request to update Miniflux connection settings."""
    server_url: str | None = None
    api_key: str | None = None
    enabled: bool | None = None
    mark_read: bool | None = None
    sync_limit: int | None = Field(default=None, ge=1, le=1000)
    poll_interval_minutes: int | None = Field(default=None, ge=1, le=1440)


class MinifluxSyncResponse(BaseModel):
    """Outcome of one Miniflux sync pass."""
    feeds_added: int
    articles_added: int
    duplicates_skipped: int
    entries_fetched: int
    total_remote: int
    marked_read: int = 0
    synced_feed_id: int | None = None

    @classmethod
    def from_result(cls, result: SyncResult) -> "MinifluxSyncResponse":
        return cls(
            feeds_added=result.feeds_added,
            articles_added=result.articles_added,
            duplicates_skipped=result.duplicates_skipped,
            entries_fetched=result.entries_fetched,
            total_remote=result.total_remote,
            marked_read=result.marked_read,
            synced_feed_id=result.synced_feed_id,
        )


class MinifluxStatusResponse(BaseModel):
    """Miniflux connection and sync status. The API key is never echoed back."""
    configured: bool
    server_url: str | None = None
    enabled: bool = True
    mark_read: bool = False
    sync_limit: int = 100
    poll_interval_minutes: int = 30
    is_polling: bool = False
    is_syncing: bool = False
    last_synced_at: str | None = None
    last_error: str | None = None
    last_result: MinifluxSyncResponse | None = None


class MinifluxTestResponse(BaseModel):
    """Result of a Miniflux connection test."""
    success: bool
    username: str | None = None
    message: str | None = None
