"""
Database models - dataclasses for database entities.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class DBArticle:
    id: int
    feed_id: int
    url: str
    title: str
    content: str | None
    is_read: bool
    is_bookmarked: bool
    published_at: datetime | None
    created_at: datetime
    author: str | None = None
    is_hidden: bool = False


@dataclass
class NewArticle:
    """An article staged for insertion; the database assigns its ID."""
    feed_id: int
    url: str
    title: str
    content: str | None = None
    author: str | None = None
    published_at: datetime | None = None
    is_read: bool = False
    is_bookmarked: bool = False


@dataclass
class DBFeed:
    id: int
    url: str
    name: str
    category: str | None
    last_fetched: datetime | None
    fetch_error: str | None = None
    unread_count: int = 0
