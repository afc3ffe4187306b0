"""
Cache Module

Namespaced cache facade over a pluggable backend (Redis by default).
"""

from .analytics import AnalyticsRecorder
from .facade import (
    CacheFacade,
    get_cache,
    init_cache,
    reset_cache,
)
from .keys import derive_storage_key, derive_storage_keys
from .redis_backend import RedisBackend
from .results import LookupResult, disambiguate, reassemble

__all__ = [
    "AnalyticsRecorder",
    "CacheFacade",
    "LookupResult",
    "RedisBackend",
    "derive_storage_key",
    "derive_storage_keys",
    "disambiguate",
    "get_cache",
    "init_cache",
    "reassemble",
    "reset_cache",
]
