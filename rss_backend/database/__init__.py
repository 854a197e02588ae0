"""
Database module - SQLite operations for articles and feeds.

Uses repository pattern for better separation of concerns.
"""

from .connection import DatabaseConnection
from .models import DBArticle, DBFeed, NewArticle
from .article_repository import ArticleRepository
from .feed_repository import FeedRepository
from .settings_repository import SettingsRepository
from .database import Database

__all__ = [
    "Database",
    "DatabaseConnection",
    "DBArticle",
    "DBFeed",
    "NewArticle",
    "ArticleRepository",
    "FeedRepository",
    "SettingsRepository",
]
