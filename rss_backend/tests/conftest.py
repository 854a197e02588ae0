"""
Pytest fixtures for backend tests.
"""

import asyncio
import json
import os
import tempfile
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient

from rss_backend.config import config, state
from rss_backend.database import Database, NewArticle
from rss_backend.miniflux import MinifluxClient, MinifluxSyncScheduler
from rss_backend.server import app


MINIFLUX_URL = "https://miniflux.example.com"
MINIFLUX_API_KEY = "test-api-key"


def make_feed(feed_id: int, title: str, feed_url: str, category: str = "Tech") -> dict:
    """Miniflux feed payload."""
    return {
        "id": feed_id,
        "title": title,
        "feed_url": feed_url,
        "site_url": "https://example.com",
        "category": {"id": feed_id, "title": category},
        "user_id": 1,
        "checked_at": "2026-10-01T12:00:00Z",
    }


def make_entry(
    entry_id: int,
    url: str,
    title: str = "Test Entry",
    status: str = "unread",
    starred: bool = False,
    feed_id: int = 1,
) -> dict:
    """Miniflux entry payload."""
    return {
        "id": entry_id,
        "feed_id": feed_id,
        "title": title,
        "url": url,
        "content": f"<p>Content of {title}</p>",
        "author": "Jane Doe",
        "published_at": "2026-10-01T12:00:00Z",
        "status": status,
        "starred": starred,
        "hash": f"hash-{entry_id}",
    }


class FakeMinifluxServer:
    """In-process Miniflux API served through httpx.MockTransport."""

    def __init__(self, api_key: str = MINIFLUX_API_KEY):
        self.api_key = api_key
        self.user = {"id": 1, "username": "reader"}
        self.feeds: list[dict] = []
        self.entries: list[dict] = []
        self.fail_paths: dict[str, int] = {}  # path -> status code to answer with
        self.raw_bodies: dict[str, bytes] = {}  # path -> raw 200 body
        self.delay: float = 0
        self.requests: list[httpx.Request] = []
        self.updates: list[dict] = []

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)

        path = request.url.path
        if request.headers.get("X-Auth-Token") != self.api_key:
            return httpx.Response(401, json={"error_message": "Access Unauthorized"})
        if path in self.fail_paths:
            return httpx.Response(self.fail_paths[path], json={"error_message": "Server error"})
        if path in self.raw_bodies:
            return httpx.Response(200, content=self.raw_bodies[path])

        if path == "/v1/me":
            return httpx.Response(200, json=self.user)
        if path == "/v1/feeds":
            return httpx.Response(200, json=self.feeds)
        if path == "/v1/entries" and request.method == "GET":
            status = request.url.params.get("status")
            limit = int(request.url.params.get("limit", "100"))
            matching = [e for e in self.entries if status is None or e["status"] == status]
            return httpx.Response(200, json={"total": len(matching), "entries": matching[:limit]})
        if path == "/v1/entries" and request.method == "PUT":
            body = json.loads(request.content)
            self.updates.append(body)
            for entry in self.entries:
                if entry["id"] in body["entry_ids"]:
                    entry["status"] = body["status"]
            return httpx.Response(204)

        return httpx.Response(404, json={"error_message": "Not found"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def client(self, api_key: str | None = None, **kwargs) -> MinifluxClient:
        return MinifluxClient(
            MINIFLUX_URL,
            api_key if api_key is not None else self.api_key,
            transport=self.transport,
            **kwargs,
        )

    def requests_to(self, path: str, method: str | None = None) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if r.url.path == path and (method is None or r.method == method)
        ]


@pytest.fixture
def temp_db_path():
    """Create a temporary database file path."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        yield Path(f.name)
    # Cleanup
    if os.path.exists(f.name):
        os.unlink(f.name)


@pytest.fixture
def test_db(temp_db_path):
    """Create a test database instance."""
    db = Database(temp_db_path)
    yield db


@pytest.fixture
def fake_miniflux():
    """Fake Miniflux server with one feed and one unread entry."""
    server = FakeMinifluxServer()
    server.feeds = [make_feed(1, "Test Feed", "https://example.com/feed.xml")]
    server.entries = [make_entry(1, "https://example.com/entry1")]
    return server


@pytest.fixture
def miniflux_env(monkeypatch):
    """Ignore any Miniflux settings from the developer's environment."""
    monkeypatch.setattr(config, "MINIFLUX_URL", "")
    monkeypatch.setattr(config, "MINIFLUX_API_KEY", "")
    monkeypatch.setattr(config, "MINIFLUX_ENABLED", True)
    monkeypatch.setattr(config, "MINIFLUX_MARK_READ", False)
    monkeypatch.setattr(config, "AUTH_API_KEY", "")


@pytest.fixture
def scheduler(test_db, fake_miniflux, miniflux_env):
    """Scheduler whose clients talk to the fake Miniflux server."""
    return MinifluxSyncScheduler(
        test_db,
        client_factory=lambda settings: MinifluxClient(
            settings.server_url,
            settings.api_key,
            timeout=settings.timeout,
            transport=fake_miniflux.transport,
        ),
        initial_delay_seconds=3600,
    )


@pytest.fixture
def client(test_db, scheduler):
    """Create a test client with isolated database and fake Miniflux server."""
    # Store original state
    original_db = state.db
    original_scheduler = state.miniflux_scheduler

    state.db = test_db
    state.miniflux_scheduler = scheduler

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    # Restore original state
    state.db = original_db
    state.miniflux_scheduler = original_scheduler


@pytest.fixture
def configured_client(client):
    """Test client with Miniflux settings saved."""
    response = client.put("/miniflux/config", json={
        "server_url": MINIFLUX_URL,
        "api_key": MINIFLUX_API_KEY,
    })
    assert response.status_code == 200
    return client


@pytest.fixture
def client_with_data(client, test_db):
    """Test client with some sample data pre-populated."""
    tech_id = test_db.add_feed("https://example.com/feed.xml", "Test Feed", "Tech")
    news_id = test_db.add_feed("https://news.example.com/rss", "News Feed", "News")

    test_db.save_articles([
        NewArticle(feed_id=tech_id, url="https://example.com/article1", title="Test Article 1",
                   content="Content 1", is_read=True),
        NewArticle(feed_id=tech_id, url="https://example.com/article2", title="Test Article 2",
                   content="Content 2", is_bookmarked=True),
        NewArticle(feed_id=news_id, url="https://news.example.com/story", title="Story",
                   content="Story content"),
    ])

    article_ids = [a.id for a in test_db.get_articles(show_hidden=True, limit=10)]

    return client, {
        "feed_ids": {"tech": tech_id, "news": news_id},
        "article_ids": article_ids,
    }
