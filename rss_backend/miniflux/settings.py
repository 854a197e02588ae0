"""
Miniflux connection settings.

Environment values from Config are the defaults; anything saved in the
settings table under a "miniflux_" key overrides them. Saving an empty
server URL or API key clears the environment value.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..config import config, parse_bool

if TYPE_CHECKING:
    from ..database import Database


SETTINGS_PREFIX = "miniflux_"


@dataclass
class MinifluxSettings:
    server_url: str = ""
    api_key: str = ""
    enabled: bool = True
    mark_read: bool = False
    sync_limit: int = 100
    timeout: float = 30.0
    poll_interval_minutes: int = 30

    @property
    def is_configured(self) -> bool:
        return bool(self.server_url and self.api_key)


def load_miniflux_settings(db: "Database") -> MinifluxSettings:
    """Resolve effective Miniflux settings from the database and environment."""
    stored = db.get_settings_with_prefix(SETTINGS_PREFIX)

    def value(name: str) -> str | None:
        return stored.get(SETTINGS_PREFIX + name)

    def text(name: str, default: str) -> str:
        # A stored empty string clears the environment default
        stored_value = value(name)
        return default if stored_value is None else stored_value

    return MinifluxSettings(
        server_url=text("url", config.MINIFLUX_URL),
        api_key=text("api_key", config.MINIFLUX_API_KEY),
        enabled=parse_bool(value("enabled"), default=config.MINIFLUX_ENABLED),
        mark_read=parse_bool(value("mark_read"), default=config.MINIFLUX_MARK_READ),
        sync_limit=int(value("sync_limit") or config.MINIFLUX_SYNC_LIMIT),
        timeout=float(value("timeout") or config.MINIFLUX_TIMEOUT),
        poll_interval_minutes=int(
            value("poll_interval_minutes") or config.MINIFLUX_POLL_INTERVAL_MINUTES
        ),
    )


def save_miniflux_settings(
    db: "Database",
    server_url: str | None = None,
    api_key: str | None = None,
    enabled: bool | None = None,
    mark_read: bool | None = None,
    sync_limit: int | None = None,
    poll_interval_minutes: int | None = None,
):
    """Persist the given settings; None leaves a value unchanged."""
    values: dict[str, str] = {}
    if server_url is not None:
        values["url"] = server_url.strip()
    if api_key is not None:
        values["api_key"] = api_key
    if enabled is not None:
        values["enabled"] = str(enabled).lower()
    if mark_read is not None:
        values["mark_read"] = str(mark_read).lower()
    if sync_limit is not None:
        values["sync_limit"] = str(sync_limit)
    if poll_interval_minutes is not None:
        values["poll_interval_minutes"] = str(poll_interval_minutes)

    db.set_settings({SETTINGS_PREFIX + key: value for key, value in values.items()})
