"""
Miniflux Sync Scheduler.

Background task that periodically runs a Miniflux sync pass, and the single
entry point for on-demand syncs. A lock guarantees that at most one pass runs
against the database at a time.
"""

import asyncio
import logging
from datetime import datetime
from typing import TYPE_CHECKING, Callable

from .client import MinifluxClient
from .errors import MinifluxError, MinifluxNotConfigured, SyncInProgress
from .settings import MinifluxSettings, load_miniflux_settings
from .sync import SYNCED_FEED_URL, SyncResult, SyncService

if TYPE_CHECKING:
    from ..database import Database


logger = logging.getLogger(__name__)

ClientFactory = Callable[[MinifluxSettings], MinifluxClient]


def default_client_factory(settings: MinifluxSettings) -> MinifluxClient:
    return MinifluxClient(settings.server_url, settings.api_key, timeout=settings.timeout)


class MinifluxSyncScheduler:
    """
    Background scheduler for Miniflux synchronization.

    Periodically pulls unread entries from Miniflux and imports them.
    """

    def __init__(
        self,
        db: "Database",
        client_factory: ClientFactory = default_client_factory,
        initial_delay_seconds: float = 10,
    ):
        self.db = db
        self.client_factory = client_factory
        self._initial_delay = initial_delay_seconds
        self._task: asyncio.Task | None = None
        self._running = False
        self._interval_minutes = 30
        self._lock = asyncio.Lock()

        self.last_result: SyncResult | None = None
        self.last_error: str | None = None
        self.last_synced_at: datetime | None = None

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_syncing(self) -> bool:
        return self._lock.locked()

    async def start(self):
        """Start the polling scheduler."""
        settings = load_miniflux_settings(self.db)

        if not settings.is_configured:
            logger.info("Miniflux not configured, scheduler not started")
            return

        if not settings.enabled:
            logger.info("Miniflux sync disabled, scheduler not started")
            return

        self._interval_minutes = settings.poll_interval_minutes
        self._running = True
        self._task = asyncio.create_task(self._poll_loop())
        logger.info(f"Miniflux sync scheduler started (interval: {self._interval_minutes} minutes)")

    async def stop(self):
        """Stop the polling scheduler."""
        self._running = False

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        logger.info("Miniflux sync scheduler stopped")

    async def restart(self):
        """Restart the scheduler with updated configuration."""
        await self.stop()
        await self.start()

    def build_client(self) -> MinifluxClient:
        """Create a client from the current settings."""
        settings = load_miniflux_settings(self.db)
        if not settings.is_configured:
            raise MinifluxNotConfigured("Miniflux server URL and API key are required")
        return self.client_factory(settings)

    async def run_once(self) -> SyncResult:
        """
        Run one sync pass now.

        Raises:
            SyncInProgress: If another pass holds the lock
            MinifluxNotConfigured: If URL or API key is missing
            MinifluxError: Whatever the pass raised
        """
        if self._lock.locked():
            raise SyncInProgress("A Miniflux sync is already running")

        async with self._lock:
            settings = load_miniflux_settings(self.db)
            if not settings.is_configured:
                raise MinifluxNotConfigured("Miniflux server URL and API key are required")

            service = SyncService(
                self.client_factory(settings),
                self.db,
                entry_limit=settings.sync_limit,
                mark_remote_read=settings.mark_read,
            )

            try:
                result = await service.sync()
            except MinifluxError as e:
                self.last_error = str(e)
                self.last_synced_at = datetime.now()
                self._record_fetch(error=str(e))
                raise

            self.last_result = result
            self.last_error = None
            self.last_synced_at = datetime.now()
            self._record_fetch(error=None)
            return result

    def _record_fetch(self, error: str | None):
        """Stamp the synced-articles feed with the time and outcome of the last pass."""
        try:
            feed = self.db.get_feed_by_url(SYNCED_FEED_URL)
            if feed:
                self.db.update_feed_fetched(feed.id, error)
        except Exception as e:
            logger.warning(f"Could not record Miniflux sync status: {e}")

    async def _poll_loop(self):
        """Main polling loop."""
        # Initial delay to let the server fully start
        await asyncio.sleep(self._initial_delay)

        while self._running:
            try:
                settings = load_miniflux_settings(self.db)

                if not settings.is_configured:
                    logger.info("Miniflux configuration removed, stopping scheduler")
                    self._running = False
                    break

                if not settings.enabled:
                    logger.info("Miniflux sync disabled, stopping scheduler")
                    self._running = False
                    break

                if settings.poll_interval_minutes != self._interval_minutes:
                    self._interval_minutes = settings.poll_interval_minutes
                    logger.info(f"Sync interval updated to {self._interval_minutes} minutes")

                result = await self.run_once()
                if result.articles_added > 0:
                    logger.info(f"Miniflux poll: imported {result.articles_added} articles")
                else:
                    logger.debug("Miniflux poll: no new articles")

            except asyncio.CancelledError:
                break
            except SyncInProgress:
                logger.debug("Miniflux poll skipped, a sync is already running")
            except MinifluxError as e:
                logger.warning(f"Miniflux poll failed: {e}")
            except Exception as e:
                logger.exception(f"Error in Miniflux polling loop: {e}")

            # Wait for next poll
            await asyncio.sleep(self._interval_minutes * 60)
