"""
Cache-Related Exceptions

All exceptions raised by the cache facade and its backends.
"""

from typing import Any

from nscache.core.exceptions.base import NSCacheError


class CacheError(NSCacheError):
    """Base exception for cache-related errors."""
    pass


class InvalidValueError(CacheError):
    """
    Raised when a caller attempts to store a value the cache refuses.

    Common causes:
    - Writing None (None is reserved as the "absent" result of a read)
    - Negative time-to-live
    """
    pass


class BackendError(CacheError):
    """
    Raised when a backend call fails or returns a failure status.

    The backend status code is kept on the exception and mirrored into
    ``details`` so it reaches structured logs.
    """

    def __init__(
        self,
        message: str,
        status_code: Any | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details=details)
        self.status_code = status_code
        if status_code is not None:
            self.details.setdefault("status_code", int(status_code))

    @classmethod
    def from_exception(
        cls,
        exc: Exception,
        message: str | None = None,
        status_code: Any | None = None,
        **details
    ) -> "BackendError":
        error = super().from_exception(exc, message, **details)
        error.status_code = status_code
        if status_code is not None:
            error.details.setdefault("status_code", int(status_code))
        return error


class BackendInitError(BackendError):
    """
    Raised when the backend connection cannot be established.

    Common causes:
    - Cache server is down
    - Incorrect host/port configuration
    - Authentication failure
    """
    pass


class BackendReadError(BackendError):
    """Raised when a single or batched lookup fails."""
    pass


class BackendWriteError(BackendError):
    """Raised when a value could not be stored."""
    pass


class BackendDeleteError(BackendError):
    """Raised when a key could not be deleted (including a missing key)."""
    pass


class BackendFlushError(BackendError):
    """Raised when the backend-wide flush fails."""
    pass
