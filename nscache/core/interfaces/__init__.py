"""
Core Interfaces

Protocols that decouple the cache facade from concrete backends.
"""

from .cache import NOT_FOUND, CacheBackend, InMemoryBackend, ResultCode

__all__ = [
    "NOT_FOUND",
    "CacheBackend",
    "InMemoryBackend",
    "ResultCode",
]
