"""
Row converters - SQLite rows to store dataclasses.
"""

import sqlite3
from datetime import datetime

from .models import DBArticle, DBFeed


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse a stored ISO timestamp; unreadable values become None."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def row_to_article(row: sqlite3.Row) -> DBArticle:
    return DBArticle(
        id=row["id"],
        feed_id=row["feed_id"],
        url=row["url"],
        title=row["title"],
        content=row["content"],
        is_read=bool(row["is_read"]),
        is_bookmarked=bool(row["is_bookmarked"]),
        published_at=parse_timestamp(row["published_at"]),
        created_at=parse_timestamp(row["created_at"]) or datetime.now(),
        author=row["author"],
        is_hidden=bool(row["is_hidden"]),
    )


def row_to_feed(row: sqlite3.Row) -> DBFeed:
    # unread_count is only present when the query joins articles
    unread_count = row["unread_count"] if "unread_count" in row.keys() else 0
    return DBFeed(
        id=row["id"],
        url=row["url"],
        name=row["name"],
        category=row["category"],
        last_fetched=parse_timestamp(row["last_fetched"]),
        fetch_error=row["fetch_error"],
        unread_count=unread_count or 0,
    )
