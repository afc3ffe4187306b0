"""
nscache

Namespaced cache facade with miss/False disambiguation, batched reads,
bypass switching and call-level analytics.

Usage:
    from nscache import CacheFacade, RedisBackend

    cache = CacheFacade(RedisBackend())
    cache.initialize("app1", [("localhost", 6379)])
    cache.write("user:1", "alice")
    cache.read("user:1")
"""

from nscache.application import check_request_triggered_bypass, check_request_triggered_flush
from nscache.core import (
    BackendDeleteError,
    BackendError,
    BackendFlushError,
    BackendInitError,
    BackendReadError,
    BackendWriteError,
    CacheBackend,
    CacheError,
    ConfigurationError,
    InMemoryBackend,
    InvalidValueError,
    NSCacheError,
    ResultCode,
)
from nscache.infrastructure.cache import (
    AnalyticsRecorder,
    CacheFacade,
    RedisBackend,
    derive_storage_key,
    get_cache,
    init_cache,
    reset_cache,
)

__version__ = "1.0.0"

__all__ = [
    "AnalyticsRecorder",
    "BackendDeleteError",
    "BackendError",
    "BackendFlushError",
    "BackendInitError",
    "BackendReadError",
    "BackendWriteError",
    "CacheBackend",
    "CacheError",
    "CacheFacade",
    "ConfigurationError",
    "InMemoryBackend",
    "InvalidValueError",
    "NSCacheError",
    "RedisBackend",
    "ResultCode",
    "check_request_triggered_bypass",
    "check_request_triggered_flush",
    "derive_storage_key",
    "get_cache",
    "init_cache",
    "reset_cache",
]
