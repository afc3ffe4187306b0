"""
Core Module

Foundational components: configuration, logging, exceptions and backend protocols.
"""

from .exceptions import (
    BackendDeleteError,
    BackendError,
    BackendFlushError,
    BackendInitError,
    BackendReadError,
    BackendWriteError,
    CacheError,
    ConfigurationError,
    InvalidValueError,
    NSCacheError,
)
from .interfaces import NOT_FOUND, CacheBackend, InMemoryBackend, ResultCode
from .logging import get_logger, log_stage, setup_logging

__all__ = [
    "setup_logging",
    "get_logger",
    "log_stage",
    "NSCacheError",
    "ConfigurationError",
    "CacheError",
    "InvalidValueError",
    "BackendError",
    "BackendInitError",
    "BackendReadError",
    "BackendWriteError",
    "BackendDeleteError",
    "BackendFlushError",
    "NOT_FOUND",
    "CacheBackend",
    "InMemoryBackend",
    "ResultCode",
]
