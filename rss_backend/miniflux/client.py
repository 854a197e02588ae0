"""
Miniflux REST API client.

Thin, stateless adapter over the Miniflux v1 API:
- Base URL normalization (always ends in /v1)
- X-Auth-Token authentication on every request
- Typed responses via pydantic models
- Distinct errors for HTTP status, decode, timeout and transport failures

Retries are left to the caller; a sync pass is safe to re-run.
"""

import asyncio
import logging
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from .errors import (
    RemoteDecodeFailed,
    RemoteRequestFailed,
    RemoteTimeout,
    RemoteUnavailable,
)
from .models import EntriesPage, EntryStatus, MinifluxFeed


logger = logging.getLogger(__name__)

API_VERSION_PATH = "/v1"
AUTH_HEADER = "X-Auth-Token"
DEFAULT_TIMEOUT = 30.0

_feed_list_adapter = TypeAdapter(list[MinifluxFeed])


def normalize_base_url(server_url: str) -> str:
    """
    Normalize a Miniflux server address to its API base.

    "https://host", "https://host/" and "https://host/v1" all become
    "https://host/v1".
    """
    base = server_url.strip().rstrip("/")
    if not base.endswith(API_VERSION_PATH):
        base += API_VERSION_PATH
    return base


def _error_detail(response: httpx.Response) -> str | None:
    """Pull Miniflux's error_message out of an error response, if any."""
    try:
        payload = response.json()
    except ValueError:
        return response.text[:200] or None
    if isinstance(payload, dict):
        return payload.get("error_message")
    return None


class MinifluxClient:
    """Async client for the Miniflux API."""

    def __init__(
        self,
        server_url: str,
        api_key: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = normalize_base_url(server_url)
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            AUTH_HEADER: self.api_key,
            "Accept": "application/json",
            "User-Agent": "RSS Reader/2.0 (Miniflux sync)",
        }

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json_body: Any = None,
        timeout: float | None = None,
    ) -> httpx.Response:
        """Send one request and raise on anything but a 2xx answer."""
        url = f"{self.base_url}{path}"
        effective_timeout = timeout if timeout is not None else self.timeout

        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=effective_timeout,
            ) as client:
                # httpx timeouts apply per phase; wait_for bounds the whole exchange
                response = await asyncio.wait_for(
                    client.request(
                        method,
                        url,
                        headers=self._headers(),
                        params=params,
                        json=json_body,
                    ),
                    effective_timeout,
                )
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            raise RemoteTimeout(
                f"{method} {path} timed out after {effective_timeout}s"
            ) from e
        except httpx.TransportError as e:
            raise RemoteUnavailable(f"{method} {path} failed: {e}") from e

        if not response.is_success:
            detail = _error_detail(response)
            logger.warning(f"Miniflux {method} {path} returned {response.status_code}: {detail}")
            raise RemoteRequestFailed(response.status_code, detail)

        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise RemoteDecodeFailed(f"Invalid JSON from {response.request.url.path}: {e}") from e

    async def test_connection(self, timeout: float | None = None) -> None:
        """
        Check that the server is reachable and the API key is accepted.

        Raises:
            RemoteRequestFailed: On 401 (bad key), 5xx, or any other non-2xx
            RemoteTimeout: If the server does not answer in time
        """
        await self._request("GET", "/me", timeout=timeout)

    async def get_me(self, timeout: float | None = None) -> dict[str, Any]:
        """Get the authenticated user's account."""
        response = await self._request("GET", "/me", timeout=timeout)
        payload = self._json(response)
        if not isinstance(payload, dict):
            raise RemoteDecodeFailed("Expected a JSON object from /me")
        return payload

    async def get_feeds(self, timeout: float | None = None) -> list[MinifluxFeed]:
        """List all feeds, in server order."""
        response = await self._request("GET", "/feeds", timeout=timeout)
        try:
            return _feed_list_adapter.validate_python(self._json(response))
        except ValidationError as e:
            raise RemoteDecodeFailed(f"Unexpected feed list payload: {e}") from e

    async def get_entries(
        self,
        status: EntryStatus | str = EntryStatus.UNREAD,
        limit: int = 100,
        timeout: float | None = None,
    ) -> EntriesPage:
        """
        Fetch one bounded page of entries.

        Args:
            status: Entry status filter, usually "unread"
            limit: Maximum number of entries returned

        Returns:
            EntriesPage with the server's total count and entries in server order
        """
        params = {"status": EntryStatus(status).value, "limit": limit}
        response = await self._request("GET", "/entries", params=params, timeout=timeout)
        try:
            return EntriesPage.model_validate(self._json(response))
        except ValidationError as e:
            raise RemoteDecodeFailed(f"Unexpected entries payload: {e}") from e

    async def update_entries(
        self,
        entry_ids: list[int],
        status: EntryStatus | str,
        timeout: float | None = None,
    ) -> None:
        """Set the status of several entries with a single PUT."""
        if not entry_ids:
            return

        body = {"entry_ids": list(entry_ids), "status": EntryStatus(status).value}
        await self._request("PUT", "/entries", json_body=body, timeout=timeout)
        logger.debug(f"Marked {len(entry_ids)} Miniflux entries as {body['status']}")
