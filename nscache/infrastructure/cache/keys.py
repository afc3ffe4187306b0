"""
Storage Key Derivation

Maps (namespace, logical key) to the opaque key stored on the backend.

STAGE-C.KEY: Key derivation

    storage_key = md5(replace(namespace + key, " ", KEY_SPACE_TOKEN))

Uses MD5 for fast hashing (not cryptographically secure, but fine for cache):
- Fixed width: 32 hex characters, always a legal backend key
- Deterministic across processes, so a key written by one worker is
  re-derivable by every other worker and after restarts
- Namespace first, no separator: changing the order invalidates every
  existing entry
"""

import hashlib
from collections.abc import Iterable

from nscache.core.config.constants import KEY_SPACE_TOKEN


def derive_storage_key(namespace: str, key: str) -> str:
    """
    Derive the backend key for a logical key inside a namespace.

    Args:
        namespace: Application namespace
        key: Logical key supplied by the caller

    Returns:
        32-character hex digest
    """
    raw = f"{namespace}{key}".replace(" ", KEY_SPACE_TOKEN)
    return hashlib.md5(raw.encode("utf-8")).hexdigest()


def derive_storage_keys(namespace: str, keys: Iterable[str]) -> list[str]:
    """Derive storage keys for many logical keys, preserving input order."""
    return [derive_storage_key(namespace, key) for key in keys]
