"""
Database facade - provides unified access to all repositories.

Implements the local store operations the Miniflux sync engine depends on
(get_feeds, add_feed, save_articles, get_articles) on top of SQLite.
"""

from pathlib import Path

from .connection import DatabaseConnection
from .article_repository import ArticleRepository
from .feed_repository import FeedRepository
from .settings_repository import SettingsRepository
from .models import DBArticle, DBFeed, NewArticle


class Database:
    """Unified database access facade."""

    def __init__(self, db_path: Path):
        self._connection = DatabaseConnection(db_path)

        # Initialize repositories
        self.articles = ArticleRepository(self._connection)
        self.feeds = FeedRepository(self._connection)
        self.settings = SettingsRepository(self._connection)

    # ─────────────────────────────────────────────────────────────
    # Feed operations (delegated to FeedRepository)
    # ─────────────────────────────────────────────────────────────

    def add_feed(self, url: str, name: str, category: str | None = None) -> int:
        return self.feeds.add(url, name, category)

    def get_feed(self, feed_id: int) -> DBFeed | None:
        return self.feeds.get(feed_id)

    def get_feed_by_url(self, url: str) -> DBFeed | None:
        return self.feeds.get_by_url(url)

    def get_feeds(self) -> list[DBFeed]:
        return self.feeds.get_all()

    def update_feed_fetched(self, feed_id: int, error: str | None = None):
        return self.feeds.update_fetched(feed_id, error)

    # ─────────────────────────────────────────────────────────────
    # Article operations (delegated to ArticleRepository)
    # ─────────────────────────────────────────────────────────────

    def save_articles(self, articles: list[NewArticle]) -> int:
        return self.articles.add_many(articles)

    def get_articles(
        self,
        filter: str = "",
        feed_id: int | None = None,
        category: str | None = None,
        show_hidden: bool = False,
        limit: int = 50,
        offset: int = 0
    ) -> list[DBArticle]:
        return self.articles.get_many(filter, feed_id, category, show_hidden, limit, offset)

    def get_article(self, article_id: int) -> DBArticle | None:
        return self.articles.get(article_id)

    def get_article_by_url(self, url: str) -> DBArticle | None:
        return self.articles.get_by_url(url)

    def get_article_urls(self, limit: int = 500, offset: int = 0) -> list[str]:
        return self.articles.get_urls(limit, offset)

    def count_articles(self, feed_id: int | None = None) -> int:
        return self.articles.count(feed_id)

    def set_article_hidden(self, article_id: int, hidden: bool = True):
        return self.articles.set_hidden(article_id, hidden)

    # ─────────────────────────────────────────────────────────────
    # Settings operations (delegated to SettingsRepository)
    # ─────────────────────────────────────────────────────────────

    def get_setting(self, key: str, default: str | None = None) -> str | None:
        return self.settings.get(key, default)

    def set_settings(self, values: dict[str, str]):
        return self.settings.set_many(values)

    def get_settings_with_prefix(self, prefix: str) -> dict[str, str]:
        return self.settings.get_prefixed(prefix)
