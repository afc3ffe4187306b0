"""
Configuration Module

Centralized, type-safe configuration for nscache.

Components:
-----------
- **settings.py**: Pydantic-based configuration with environment variable loading
- **constants.py**: Key derivation token, defaults and logging stages

Environment Variables:
---------------------
```bash
CACHE_NAMESPACE=app1
CACHE_SERVERS='["cache-1:6379", "cache-2:6379"]'
CACHE_BENCHMARK_ENABLED=true
LOG_LEVEL=DEBUG
```
"""

from .constants import CacheStage
from .settings import Settings, get_settings, parse_server, reload_settings

__all__ = [
    "CacheStage",
    "Settings",
    "get_settings",
    "parse_server",
    "reload_settings",
]
