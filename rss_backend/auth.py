"""
API key protection for the HTTP API.

Every router except the public status endpoint depends on verify_api_key.
With AUTH_API_KEY unset the check is a no-op, which is the normal setup for
a backend that only listens on localhost next to the desktop app.
"""

import secrets

from fastapi import HTTPException, Security, status
from fastapi.security import APIKeyHeader

from .config import config

API_KEY_HEADER = APIKeyHeader(name="X-API-Key", auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "ApiKey"},
    )


def verify_api_key(api_key: str | None = Security(API_KEY_HEADER)) -> str:
    """
    FastAPI dependency checking the X-API-Key header.

    Returns the accepted key, or "" when authentication is disabled.

    Raises:
        HTTPException: 401 if a key is required and missing or wrong
    """
    expected = config.AUTH_API_KEY
    if not expected:
        return ""

    if not api_key:
        raise _unauthorized("Missing API key. Provide X-API-Key header.")
    if not secrets.compare_digest(api_key.encode(), expected.encode()):
        raise _unauthorized("Invalid API key")

    return api_key
