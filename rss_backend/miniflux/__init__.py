"""
Miniflux Integration Module.

Synchronizes feeds and unread entries from a Miniflux server:
- REST API client (X-Auth-Token authentication)
- Idempotent sync pass into the local database
- Background polling scheduler
"""

from .errors import (
    MinifluxError,
    MinifluxNotConfigured,
    RemoteRequestFailed,
    RemoteDecodeFailed,
    RemoteTimeout,
    RemoteUnavailable,
    LocalStoreFailed,
    SyncInProgress,
)

from .models import (
    EntryStatus,
    MinifluxCategory,
    MinifluxFeed,
    MinifluxEntry,
    EntriesPage,
)

from .client import MinifluxClient, normalize_base_url

from .sync import (
    ArticleURLSource,
    LocalStore,
    SyncResult,
    SyncService,
    canonical_url,
    SYNCED_FEED_URL,
    SYNCED_FEED_NAME,
)

from .settings import (
    MinifluxSettings,
    load_miniflux_settings,
    save_miniflux_settings,
)

from .scheduler import MinifluxSyncScheduler

__all__ = [
    # Errors
    "MinifluxError",
    "MinifluxNotConfigured",
    "RemoteRequestFailed",
    "RemoteDecodeFailed",
    "RemoteTimeout",
    "RemoteUnavailable",
    "LocalStoreFailed",
    "SyncInProgress",
    # Models
    "EntryStatus",
    "MinifluxCategory",
    "MinifluxFeed",
    "MinifluxEntry",
    "EntriesPage",
    # Client
    "MinifluxClient",
    "normalize_base_url",
    # Sync
    "ArticleURLSource",
    "LocalStore",
    "SyncResult",
    "SyncService",
    "canonical_url",
    "SYNCED_FEED_URL",
    "SYNCED_FEED_NAME",
    # Settings
    "MinifluxSettings",
    "load_miniflux_settings",
    "save_miniflux_settings",
    # Scheduler
    "MinifluxSyncScheduler",
]
