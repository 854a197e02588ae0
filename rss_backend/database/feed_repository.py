"""
Feed repository - local feeds, including mirrored Miniflux feeds and the
synced-articles feed.
"""

from datetime import datetime

from .connection import DatabaseConnection
from .converters import row_to_feed
from .models import DBFeed


# Feeds joined with their count of unread articles
_FEEDS_WITH_UNREAD = """
    SELECT f.*, COUNT(CASE WHEN a.is_read = 0 THEN 1 END) AS unread_count
    FROM feeds f
    LEFT JOIN articles a ON a.feed_id = f.id
"""


class FeedRepository:
    """Repository for feed operations."""

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def add(self, url: str, name: str, category: str | None = None) -> int:
        """
        Insert a feed and return its ID.

        Raises sqlite3.IntegrityError if the URL is already stored.
        """
        with self._db.conn() as conn:
            cursor = conn.execute(
                "INSERT INTO feeds (url, name, category) VALUES (?, ?, ?)",
                (url, name, category)
            )
            return cursor.lastrowid

    def get(self, feed_id: int) -> DBFeed | None:
        with self._db.conn() as conn:
            row = conn.execute(
                _FEEDS_WITH_UNREAD + " WHERE f.id = ? GROUP BY f.id", (feed_id,)
            ).fetchone()
            return row_to_feed(row) if row else None

    def get_by_url(self, url: str) -> DBFeed | None:
        with self._db.conn() as conn:
            row = conn.execute(
                _FEEDS_WITH_UNREAD + " WHERE f.url = ? GROUP BY f.id", (url,)
            ).fetchone()
            return row_to_feed(row) if row else None

    def get_all(self) -> list[DBFeed]:
        """All feeds by name, internal ones such as miniflux://synced included."""
        with self._db.conn() as conn:
            rows = conn.execute(
                _FEEDS_WITH_UNREAD + " GROUP BY f.id ORDER BY f.name COLLATE NOCASE"
            ).fetchall()
            return [row_to_feed(row) for row in rows]

    def update_fetched(self, feed_id: int, error: str | None = None):
        """Stamp the feed with the current time and the outcome of the last fetch."""
        with self._db.conn() as conn:
            conn.execute(
                "UPDATE feeds SET last_fetched = ?, fetch_error = ? WHERE id = ?",
                (datetime.now().isoformat(), error, feed_id)
            )
