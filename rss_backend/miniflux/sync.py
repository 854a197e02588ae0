"""
Miniflux sync orchestrator.

One sync pass pulls remote feeds and unread entries from Miniflux and merges
them into the local store:

1. Mirror remote feeds that are not yet known locally (additive only)
2. Ensure the single "Miniflux Synced Articles" feed exists
3. Stage entries whose canonical URL is not already stored
4. Save all staged articles in one batch
5. Optionally mark the fetched entries as read on the server

A pass is a function of current remote and local state only, so re-running
it after a failure is safe. SyncService is not reentrant: callers must not
run two passes against the same store at once (see MinifluxSyncScheduler).
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Protocol, TypeVar, runtime_checkable
from urllib.parse import urlsplit, urlunsplit

from ..database.models import DBArticle, DBFeed, NewArticle
from .client import MinifluxClient
from .errors import LocalStoreFailed
from .models import EntryStatus, MinifluxEntry


logger = logging.getLogger(__name__)

SYNCED_FEED_URL = "miniflux://synced"
SYNCED_FEED_NAME = "Miniflux Synced Articles"
SYNCED_FEED_CATEGORY = "Miniflux"

DEFAULT_ENTRY_LIMIT = 100
ARTICLE_PAGE_SIZE = 500

T = TypeVar("T")


class LocalStore(Protocol):
    """Local storage operations the sync pass needs."""

    def get_feeds(self) -> list[DBFeed]: ...

    def add_feed(self, url: str, name: str, category: str | None = None) -> int: ...

    def save_articles(self, articles: list[NewArticle]) -> int: ...

    def get_articles(
        self,
        filter: str = "",
        feed_id: int | None = None,
        category: str | None = None,
        show_hidden: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> list[DBArticle]: ...


@runtime_checkable
class ArticleURLSource(Protocol):
    """Optional store extension listing article URLs without loading rows."""

    def get_article_urls(self, limit: int = 500, offset: int = 0) -> list[str]: ...


@dataclass
class SyncResult:
    """Outcome of one sync pass."""
    feeds_added: int = 0
    articles_added: int = 0
    duplicates_skipped: int = 0
    entries_fetched: int = 0
    total_remote: int = 0
    marked_read: int = 0
    synced_feed_id: int | None = None


def canonical_url(url: str) -> str:
    """
    Normalize a URL for identity comparison.

    Lowercases scheme and host, drops the fragment and a trailing slash on
    non-root paths. Query strings are kept since they often identify content.
    URLs that cannot be parsed (e.g. an unbalanced IPv6 bracket) are returned
    stripped but otherwise unchanged.
    """
    url = url.strip()
    if not url:
        return ""
    try:
        parts = urlsplit(url)
    except ValueError:
        logger.debug(f"Unparseable URL kept as-is: {url!r}")
        return url
    path = parts.path
    if len(path) > 1 and path.endswith("/"):
        path = path.rstrip("/")
    return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), path, parts.query, ""))


def entry_key(entry: MinifluxEntry) -> str:
    """Dedup key for an entry; entries without a link get a stable miniflux:// key."""
    return canonical_url(entry.url) or f"miniflux://entry/{entry.id}"


def entry_to_article(entry: MinifluxEntry, feed_id: int) -> NewArticle:
    return NewArticle(
        feed_id=feed_id,
        url=entry_key(entry),
        title=entry.title or "Untitled",
        content=entry.content or None,
        author=entry.author or None,
        published_at=entry.published_at,
        is_read=entry.status == EntryStatus.READ,
        is_bookmarked=entry.starred,
    )


class SyncService:
    """Runs sync passes between a Miniflux server and the local store."""

    def __init__(
        self,
        client: MinifluxClient,
        store: LocalStore,
        entry_limit: int = DEFAULT_ENTRY_LIMIT,
        mark_remote_read: bool = False,
    ):
        self.client = client
        self.store = store
        self.entry_limit = entry_limit
        self.mark_remote_read = mark_remote_read

    def _store_call(self, operation: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Run a store operation, reporting any failure as LocalStoreFailed."""
        try:
            return operation(*args, **kwargs)
        except Exception as e:
            name = getattr(operation, "__name__", "store operation")
            raise LocalStoreFailed(f"{name} failed: {e}") from e

    async def sync(self) -> SyncResult:
        """
        Run one full sync pass.

        Raises:
            MinifluxError subclasses from the client, unchanged
            LocalStoreFailed: If the local store raises
        """
        result = SyncResult()

        remote_feeds = await self.client.get_feeds()
        logger.info(f"Miniflux sync: {len(remote_feeds)} remote feeds")

        local_feeds = self._store_call(self.store.get_feeds)
        result.feeds_added = self._mirror_feeds(remote_feeds, local_feeds)
        result.synced_feed_id = self._ensure_synced_feed(local_feeds)

        page = await self.client.get_entries(EntryStatus.UNREAD, self.entry_limit)
        result.entries_fetched = len(page.entries)
        result.total_remote = page.total
        if page.total > len(page.entries):
            logger.warning(
                f"Miniflux sync: {page.total} unread entries on server, "
                f"only {len(page.entries)} fetched (limit {self.entry_limit})"
            )

        staged = self._stage_new_articles(page.entries, result.synced_feed_id)
        result.duplicates_skipped = len(page.entries) - len(staged)

        if staged:
            result.articles_added = self._store_call(self.store.save_articles, staged)

        if self.mark_remote_read and page.entries:
            entry_ids = [entry.id for entry in page.entries]
            await self.client.update_entries(entry_ids, EntryStatus.READ)
            result.marked_read = len(entry_ids)

        logger.info(
            f"Miniflux sync complete: {result.feeds_added} feeds added, "
            f"{result.articles_added} articles added, {result.duplicates_skipped} duplicates skipped"
        )
        return result

    def _mirror_feeds(self, remote_feeds, local_feeds: list[DBFeed]) -> int:
        """Create a local feed for each remote feed not seen before. Never updates existing ones."""
        known_urls = {canonical_url(feed.url) for feed in local_feeds}
        added = 0

        for remote_feed in remote_feeds:
            feed_url = canonical_url(remote_feed.feed_url)
            if not feed_url or feed_url == SYNCED_FEED_URL or feed_url in known_urls:
                continue

            self._store_call(
                self.store.add_feed,
                feed_url,
                remote_feed.title or feed_url,
                remote_feed.category_title,
            )
            known_urls.add(feed_url)
            added += 1
            logger.debug(f"Mirrored Miniflux feed {remote_feed.id}: {remote_feed.title}")

        return added

    def _ensure_synced_feed(self, local_feeds: list[DBFeed]) -> int:
        """Return the ID of the synced-articles feed, creating it only if absent."""
        for feed in local_feeds:
            if feed.url == SYNCED_FEED_URL:
                return feed.id

        feed_id = self._store_call(
            self.store.add_feed, SYNCED_FEED_URL, SYNCED_FEED_NAME, SYNCED_FEED_CATEGORY
        )
        logger.info(f"Created synced articles feed (id {feed_id})")
        return feed_id

    def _existing_article_urls(self) -> set[str]:
        """Canonical URLs of every stored article, across all feeds, hidden included."""
        urls: set[str] = set()
        offset = 0
        while True:
            page = self._article_url_page(offset)
            urls.update(canonical_url(url) for url in page)
            if len(page) < ARTICLE_PAGE_SIZE:
                return urls
            offset += ARTICLE_PAGE_SIZE

    def _article_url_page(self, offset: int) -> list[str]:
        # Stores that can list bare URLs skip loading full article rows
        if isinstance(self.store, ArticleURLSource):
            return self._store_call(
                self.store.get_article_urls, limit=ARTICLE_PAGE_SIZE, offset=offset
            )
        articles = self._store_call(
            self.store.get_articles,
            filter="",
            feed_id=None,
            category=None,
            show_hidden=True,
            limit=ARTICLE_PAGE_SIZE,
            offset=offset,
        )
        return [article.url for article in articles]

    def _stage_new_articles(self, entries: list[MinifluxEntry], feed_id: int) -> list[NewArticle]:
        """Translate entries to articles, skipping URLs already stored or staged earlier in this pass."""
        if not entries:
            return []

        seen = self._existing_article_urls()
        staged: list[NewArticle] = []

        for entry in entries:
            key = entry_key(entry)
            if key in seen:
                continue
            seen.add(key)
            staged.append(entry_to_article(entry, feed_id))

        return staged
