"""
Base Exception Class

This module contains ONLY the base exception class that all other exceptions inherit from.
Cache-specific exceptions live in cache.py.
"""

from typing import Any


class NSCacheError(Exception):
    """
    Base exception for all nscache errors.

    All custom exceptions inherit from this class to enable:
    - Consistent error handling
    - Structured error logging
    - Rich context for debugging

    Attributes:
        message: Error message
        details: Additional error details (dict)

    Example:
        raise BackendWriteError(
            "Exception while attempting to write to resource",
            status_code=ResultCode.NOTSTORED,
            details={"key": "user:1"},
        )
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = (details or {}).copy()
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for logging.

        Returns:
            Dict with error_type, message and details
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }

    def with_suggestion(self, suggestion: str) -> "NSCacheError":
        """
        Add a suggestion to help users fix the error.

        Returns:
            Self (for method chaining)
        """
        self.details["suggestion"] = suggestion
        return self

    def with_context(self, **context) -> "NSCacheError":
        """
        Add additional context to the error details.

        Returns:
            Self (for method chaining)
        """
        self.details.update(context)
        return self

    def __repr__(self) -> str:
        details_str = f", details={self.details}" if self.details else ""
        return f"{self.__class__.__name__}(message='{self.message}'{details_str})"

    @classmethod
    def from_exception(
        cls,
        exc: Exception,
        message: str | None = None,
        **details
    ) -> "NSCacheError":
        """
        Create an error from another exception.

        Useful for wrapping redis-py exceptions with additional context.

        Args:
            exc: Original exception to wrap
            message: Custom message (defaults to original exception message)
            **details: Additional context to include

        Example:
            >>> try:
            ...     client.ping()
            ... except redis.ConnectionError as e:
            ...     raise BackendInitError.from_exception(e, servers=servers)
        """
        error_message = message or str(exc)
        error_details = {
            "original_error": exc.__class__.__name__,
            "original_message": str(exc),
            **details
        }
        return cls(error_message, details=error_details)


class ConfigurationError(NSCacheError):
    """Raised when configuration is invalid or missing (e.g. namespace not set)."""
    pass
