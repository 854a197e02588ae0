"""
Miniflux sync errors.

Remote failures are split so callers can tell "server said no" apart from
"server didn't answer".
"""


class MinifluxError(Exception):
    """Base class for Miniflux sync errors."""
    pass


class MinifluxNotConfigured(MinifluxError):
    """Server URL or API key missing."""
    pass


class RemoteRequestFailed(MinifluxError):
    """Miniflux answered with a non-2xx status."""

    def __init__(self, status_code: int, detail: str | None = None):
        self.status_code = status_code
        self.detail = detail
        message = f"Miniflux request failed with status {status_code}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class RemoteDecodeFailed(MinifluxError):
    """Miniflux returned a payload that could not be decoded."""
    pass


class RemoteTimeout(MinifluxError):
    """Miniflux did not answer before the deadline."""
    pass


class RemoteUnavailable(MinifluxError):
    """Miniflux could not be reached (DNS, refused connection, TLS)."""
    pass


class LocalStoreFailed(MinifluxError):
    """The local store raised while the sync pass was reading or writing."""
    pass


class SyncInProgress(MinifluxError):
    """A sync pass is already running."""
    pass
