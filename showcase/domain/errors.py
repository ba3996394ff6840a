"""Error taxonomy for fetching, caching and normalizing repository data."""

from typing import Any, Optional


class ShowcaseError(Exception):
    """Base class for all showcase errors."""
    pass


class FetchError(ShowcaseError):
    """Raised when the remote repository listing cannot be retrieved.

    Either the server answered with a non-successful status (``status`` is set)
    or the request never completed (``transport`` is True).
    """

    def __init__(
        self,
        reason: str,
        status: Optional[int] = None,
        transport: bool = False,
        rate_limit_reset: Optional[int] = None,
    ):
        self.reason = reason
        self.status = status
        self.transport = transport
        self.rate_limit_reset = rate_limit_reset
        super().__init__(reason)

    @classmethod
    def from_status(cls, status: int, status_text: str, rate_limit_reset: Optional[int] = None) -> "FetchError":
        reason = f"GitHub API: {status} {status_text}".rstrip()
        if rate_limit_reset is not None:
            reason += f" (rate limit exceeded, resets at {rate_limit_reset})"
        return cls(reason, status=status, rate_limit_reset=rate_limit_reset)

    @classmethod
    def from_transport(cls, error: Exception) -> "FetchError":
        return cls(f"Network error: {error}", transport=True)


class StorageError(ShowcaseError):
    """Raised when a cache snapshot cannot be persisted."""
    pass


class MalformedRecord(ShowcaseError):
    """Raised when a raw record lacks a required field."""

    def __init__(self, message: str, record: Any = None):
        self.record = record
        super().__init__(message)
