"""
Exception Module

Structured exception hierarchy for nscache.

Module Structure:
-----------------
- **base.py**: NSCacheError base class + ConfigurationError
- **cache.py**: Cache and backend exceptions

Usage:
------
```python
from nscache.core.exceptions import BackendReadError, ConfigurationError

try:
    value = cache.read("user:1")
except BackendReadError as e:
    logger.error("cache read failed", status_code=e.status_code)
```
"""

from nscache.core.exceptions.base import ConfigurationError, NSCacheError
from nscache.core.exceptions.cache import (
    BackendDeleteError,
    BackendError,
    BackendFlushError,
    BackendInitError,
    BackendReadError,
    BackendWriteError,
    CacheError,
    InvalidValueError,
)

__all__ = [
    # Base
    "NSCacheError",
    "ConfigurationError",
    # Cache
    "CacheError",
    "InvalidValueError",
    "BackendError",
    "BackendInitError",
    "BackendReadError",
    "BackendWriteError",
    "BackendDeleteError",
    "BackendFlushError",
]
