"""
Article repository - CRUD operations for articles.
"""

from .connection import DatabaseConnection
from .converters import row_to_article
from .models import DBArticle, NewArticle


ARTICLE_FILTERS = ("", "all", "unread", "read", "starred")


class ArticleRepository:
    """Repository for article operations."""

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def add_many(self, articles: list[NewArticle]) -> int:
        """
        Insert a batch of articles in one transaction.

        Rows whose URL already exists are ignored. Returns the number of
        rows actually inserted.
        """
        if not articles:
            return 0
        with self._db.conn() as conn:
            inserted = 0
            for article in articles:
                cursor = conn.execute(
                    """INSERT OR IGNORE INTO articles
                       (feed_id, url, title, content, author, published_at, is_read, is_bookmarked)
                       VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
                    (article.feed_id, article.url, article.title, article.content, article.author,
                     article.published_at.isoformat() if article.published_at else None,
                     article.is_read, article.is_bookmarked)
                )
                inserted += cursor.rowcount
            return inserted

    def get(self, article_id: int) -> DBArticle | None:
        """Get single article by ID."""
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT * FROM articles WHERE id = ?", (article_id,)
            ).fetchone()
            return row_to_article(row) if row else None

    def get_by_url(self, url: str) -> DBArticle | None:
        """Get article by URL."""
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT * FROM articles WHERE url = ?", (url,)
            ).fetchone()
            return row_to_article(row) if row else None

    def get_many(
        self,
        filter: str = "",
        feed_id: int | None = None,
        category: str | None = None,
        show_hidden: bool = False,
        limit: int = 50,
        offset: int = 0
    ) -> list[DBArticle]:
        """
        Get articles with optional filters.

        Args:
            filter: "" or "all", "unread", "read", "starred"
            feed_id: Only articles of this feed
            category: Only articles whose feed has this category
            show_hidden: Include hidden articles
        """
        if filter not in ARTICLE_FILTERS:
            raise ValueError(f"Unknown article filter: {filter!r}")

        query = "SELECT a.* FROM articles a JOIN feeds f ON a.feed_id = f.id WHERE 1=1"
        params: list = []

        if filter == "unread":
            query += " AND a.is_read = 0"
        elif filter == "read":
            query += " AND a.is_read = 1"
        elif filter == "starred":
            query += " AND a.is_bookmarked = 1"
        if feed_id is not None:
            query += " AND a.feed_id = ?"
            params.append(feed_id)
        if category is not None:
            query += " AND f.category = ?"
            params.append(category)
        if not show_hidden:
            query += " AND COALESCE(a.is_hidden, 0) = 0"

        query += " ORDER BY a.published_at DESC NULLS LAST, a.id DESC LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        with self._db.conn() as conn:
            rows = conn.execute(query, params).fetchall()
            return [row_to_article(row) for row in rows]

    def get_urls(self, limit: int = 500, offset: int = 0) -> list[str]:
        """Stored article URLs in insertion order, hidden ones included."""
        with self._db.conn() as conn:
            rows = conn.execute(
                "SELECT url FROM articles ORDER BY id LIMIT ? OFFSET ?", (limit, offset)
            ).fetchall()
            return [row["url"] for row in rows]

    def count(self, feed_id: int | None = None) -> int:
        """Count articles, optionally for one feed."""
        with self._db.conn() as conn:
            if feed_id is not None:
                row = conn.execute(
                    "SELECT COUNT(*) as cnt FROM articles WHERE feed_id = ?", (feed_id,)
                ).fetchone()
            else:
                row = conn.execute("SELECT COUNT(*) as cnt FROM articles").fetchone()
            return row["cnt"]

    def set_hidden(self, article_id: int, hidden: bool = True):
        """Hide or unhide an article from default listings."""
        with self._db.conn() as conn:
            conn.execute(
                "UPDATE articles SET is_hidden = ? WHERE id = ?",
                (hidden, article_id)
            )
