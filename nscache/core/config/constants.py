"""
System Constants and Enumerations

This module defines constants and enumerations used across nscache.

Architectural Decision: Centralized constants for maintainability
- Single source of truth for magic values
- Type-safe enums for logging stages
"""

from enum import Enum

# ============================================================================
# Key Derivation
# ============================================================================

# Replaces every single space in "namespace + key" before hashing.
# Changing this value orphans every entry already written.
KEY_SPACE_TOKEN = "!!{_}!!"


# ============================================================================
# Defaults
# ============================================================================

DEFAULT_TTL = 0  # no expiration
DEFAULT_FLUSH_DELAY = 0
DEFAULT_REDIS_PORT = 6379

# Logical keys are truncated to this length in log entries
LOG_KEY_MAX_LENGTH = 40


# ============================================================================
# Analytics
# ============================================================================

ANALYTICS_COUNTERS = ("reads", "writes", "deletes", "misses")


# ============================================================================
# Stage Identifiers (for structured logging)
# ============================================================================


class CacheStage(str, Enum):
    """
    Cache operation stages used in structured log entries.

    Format: {SEQUENCE}_{DESCRIPTIVE_NAME}
    """

    INITIALIZE = "C.0_INITIALIZE"
    READ = "C.1_READ"
    READ_MULTI = "C.2_READ_MULTI"
    WRITE = "C.3_WRITE"
    DELETE = "C.4_DELETE"
    FLUSH = "C.5_FLUSH"
    BYPASS = "C.6_BYPASS"
    HEALTH = "C.7_HEALTH"
