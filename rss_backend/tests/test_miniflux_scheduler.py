"""
Tests for the Miniflux sync scheduler and settings.
"""

import asyncio

import pytest

from rss_backend.config import config
from rss_backend.miniflux import (
    SYNCED_FEED_URL,
    MinifluxNotConfigured,
    RemoteRequestFailed,
    SyncInProgress,
    load_miniflux_settings,
    save_miniflux_settings,
)

from conftest import MINIFLUX_API_KEY, MINIFLUX_URL


def configure(db, **kwargs):
    save_miniflux_settings(db, server_url=MINIFLUX_URL, api_key=MINIFLUX_API_KEY, **kwargs)


class TestSettings:
    """Tests for settings resolution."""

    def test_defaults_from_config(self, test_db, miniflux_env, monkeypatch):
        monkeypatch.setattr(config, "MINIFLUX_URL", "https://env.example.com")
        monkeypatch.setattr(config, "MINIFLUX_API_KEY", "env-key")

        settings = load_miniflux_settings(test_db)

        assert settings.server_url == "https://env.example.com"
        assert settings.api_key == "env-key"
        assert settings.is_configured
        assert settings.mark_read is False

    def test_database_overrides_config(self, test_db, miniflux_env, monkeypatch):
        monkeypatch.setattr(config, "MINIFLUX_URL", "https://env.example.com")
        configure(test_db, mark_read=True, sync_limit=50, enabled=False)

        settings = load_miniflux_settings(test_db)

        assert settings.server_url == MINIFLUX_URL
        assert settings.api_key == MINIFLUX_API_KEY
        assert settings.mark_read is True
        assert settings.enabled is False
        assert settings.sync_limit == 50

    def test_saved_empty_url_clears_environment(self, test_db, miniflux_env, monkeypatch):
        monkeypatch.setattr(config, "MINIFLUX_URL", "https://env.example.com")
        monkeypatch.setattr(config, "MINIFLUX_API_KEY", "env-key")

        save_miniflux_settings(test_db, server_url="")

        settings = load_miniflux_settings(test_db)
        assert settings.server_url == ""
        assert settings.api_key == "env-key"
        assert not settings.is_configured

    def test_not_configured_without_key(self, test_db, miniflux_env):
        save_miniflux_settings(test_db, server_url=MINIFLUX_URL)

        assert not load_miniflux_settings(test_db).is_configured


class TestRunOnce:
    """Tests for on-demand sync passes."""

    @pytest.mark.asyncio
    async def test_not_configured(self, scheduler, fake_miniflux):
        with pytest.raises(MinifluxNotConfigured):
            await scheduler.run_once()
        assert fake_miniflux.requests == []

    @pytest.mark.asyncio
    async def test_success_records_result(self, scheduler, test_db):
        configure(test_db)

        result = await scheduler.run_once()

        assert result.articles_added == 1
        assert scheduler.last_result is result
        assert scheduler.last_error is None
        assert scheduler.last_synced_at is not None

        synced = test_db.get_feed_by_url(SYNCED_FEED_URL)
        assert synced.last_fetched is not None
        assert synced.fetch_error is None

    @pytest.mark.asyncio
    async def test_uses_saved_limit_and_mark_read(self, scheduler, test_db, fake_miniflux):
        configure(test_db, sync_limit=10, mark_read=True)

        await scheduler.run_once()

        request = fake_miniflux.requests_to("/v1/entries", "GET")[0]
        assert request.url.params["limit"] == "10"
        assert fake_miniflux.updates == [{"entry_ids": [1], "status": "read"}]

    @pytest.mark.asyncio
    async def test_failure_records_error(self, scheduler, test_db, fake_miniflux):
        configure(test_db)
        await scheduler.run_once()
        fake_miniflux.fail_paths["/v1/entries"] = 500

        with pytest.raises(RemoteRequestFailed):
            await scheduler.run_once()

        assert "500" in scheduler.last_error
        synced = test_db.get_feed_by_url(SYNCED_FEED_URL)
        assert "500" in synced.fetch_error

    @pytest.mark.asyncio
    async def test_concurrent_run_is_rejected(self, scheduler, test_db, fake_miniflux):
        """A second pass while one is running raises SyncInProgress."""
        configure(test_db)
        fake_miniflux.delay = 0.2

        first = asyncio.create_task(scheduler.run_once())
        await asyncio.sleep(0.05)
        assert scheduler.is_syncing

        with pytest.raises(SyncInProgress):
            await scheduler.run_once()

        result = await first
        assert result.articles_added == 1
        assert not scheduler.is_syncing
        assert test_db.count_articles() == 1


class TestStartStop:
    """Tests for the polling lifecycle."""

    @pytest.mark.asyncio
    async def test_start_without_config_does_nothing(self, scheduler):
        await scheduler.start()
        assert not scheduler.is_running

    @pytest.mark.asyncio
    async def test_start_when_disabled_does_nothing(self, scheduler, test_db):
        configure(test_db, enabled=False)
        await scheduler.start()
        assert not scheduler.is_running

    @pytest.mark.asyncio
    async def test_start_and_stop(self, scheduler, test_db):
        configure(test_db, poll_interval_minutes=5)

        await scheduler.start()
        assert scheduler.is_running

        await scheduler.stop()
        assert not scheduler.is_running

    @pytest.mark.asyncio
    async def test_poll_loop_runs_a_pass(self, scheduler, test_db):
        configure(test_db)
        scheduler._initial_delay = 0

        await scheduler.start()
        for _ in range(50):
            if scheduler.last_result is not None:
                break
            await asyncio.sleep(0.01)
        await scheduler.stop()

        assert scheduler.last_result is not None
        assert test_db.count_articles() == 1
