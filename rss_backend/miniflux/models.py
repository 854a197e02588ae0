"""
Miniflux API payload models.

Only the fields the sync engine reads are declared; anything else the server
sends is ignored.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EntryStatus(str, Enum):
    UNREAD = "unread"
    READ = "read"
    REMOVED = "removed"


class MinifluxCategory(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    title: str = ""


class MinifluxFeed(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    title: str = ""
    feed_url: str = ""
    site_url: str = ""
    category: MinifluxCategory | None = None

    @property
    def category_title(self) -> str | None:
        if self.category and self.category.title:
            return self.category.title
        return None


class MinifluxEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    feed_id: int | None = None
    title: str = ""
    url: str = ""
    content: str = ""
    author: str = ""
    published_at: datetime | None = None
    status: EntryStatus = EntryStatus.UNREAD
    starred: bool = False
    feed: MinifluxFeed | None = None


class EntriesPage(BaseModel):
    """Response of GET /entries."""
    model_config = ConfigDict(extra="ignore")

    total: int = 0
    entries: list[MinifluxEntry] = Field(default_factory=list)

    @field_validator("entries", mode="before")
    @classmethod
    def _null_entries(cls, value):
        # Miniflux sends null instead of [] for an empty result
        return [] if value is None else value
