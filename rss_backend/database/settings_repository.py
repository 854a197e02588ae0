"""
Settings repository - key/value app settings.
"""

from datetime import datetime

from .connection import DatabaseConnection


class SettingsRepository:
    """Repository for application settings."""

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def get(self, key: str, default: str | None = None) -> str | None:
        """Get a setting value."""
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT value FROM settings WHERE key = ?", (key,)
            ).fetchone()
            return row["value"] if row else default

    def set_many(self, values: dict[str, str]):
        """Upsert several settings in one transaction."""
        if not values:
            return
        now = datetime.now().isoformat()
        with self._db.conn() as conn:
            conn.executemany(
                """INSERT INTO settings (key, value, updated_at)
                   VALUES (?, ?, ?)
                   ON CONFLICT(key) DO UPDATE SET
                   value = excluded.value, updated_at = excluded.updated_at""",
                [(key, value, now) for key, value in values.items()]
            )

    def get_prefixed(self, prefix: str) -> dict[str, str]:
        """Get all settings whose key starts with prefix."""
        with self._db.conn() as conn:
            rows = conn.execute(
                "SELECT key, value FROM settings WHERE substr(key, 1, length(?)) = ?",
                (prefix, prefix)
            ).fetchall()
            return {row["key"]: row["value"] for row in rows}
