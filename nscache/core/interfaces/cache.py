"""
Cache Backend Protocol

This module defines the protocol every cache backend implements, the result
codes backends report and a dependency-free in-memory implementation.

Architectural Decision: Protocol-based abstraction
- The facade depends on this protocol, never on redis-py directly
- Facilitates testing with in-memory and spy implementations
- Type-safe interface with runtime checking

Lookup contract:
    get() and get_multi() return ``(raw, status)``. A miss is reported as
    ``(NOT_FOUND, ResultCode.NOTFOUND)``. ``NOT_FOUND`` is ``False``, so a
    stored ``False`` is only distinguishable by its ``SUCCESS`` status.
"""

import copy
import time
from collections.abc import Callable, Sequence
from enum import IntEnum
from typing import Any, Protocol, runtime_checkable

# Raw value a backend returns when nothing was found.
NOT_FOUND = False


class ResultCode(IntEnum):
    """Backend status codes, numbered after the memcached result codes."""

    SUCCESS = 0
    FAILURE = 1
    CONNECTION_FAILURE = 3
    WRITE_FAILURE = 5
    SERVER_ERROR = 8
    NOTSTORED = 14
    NOTFOUND = 16
    NO_SERVERS = 20


@runtime_checkable
class CacheBackend(Protocol):
    """
    Protocol defining the interface for cache backend implementations.

    Implementations:
    - RedisBackend: Production redis-py backed cache
    - InMemoryBackend: Testing/development in-memory cache

    All calls are synchronous and blocking. Transport failures are raised;
    logical failures (missing key, refused write) are reported through the
    return value and last_status_code().
    """

    def connect(self, servers: Sequence[tuple[str, int]]) -> None:
        """
        Establish a connection handle across the given servers.

        Raises:
            Exception: If no usable connection could be established
        """
        ...

    def get(self, key: str) -> tuple[Any, ResultCode]:
        """Look up one key; ``(NOT_FOUND, NOTFOUND)`` on a miss."""
        ...

    def get_multi(self, keys: Sequence[str]) -> tuple[dict[str, Any] | bool, ResultCode]:
        """Look up many keys in one round trip; only found keys are returned."""
        ...

    def set(self, key: str, value: Any, ttl: int) -> bool:
        """Store a value; ``ttl`` 0 means no expiration."""
        ...

    def delete(self, key: str, delay: int = 0) -> bool:
        """Delete a key now, or let it expire after ``delay`` seconds."""
        ...

    def flush(self, delay: int = 0) -> bool:
        """Invalidate every key on the backend, now or after ``delay`` seconds."""
        ...

    def last_status_code(self) -> ResultCode:
        """Status of the most recent call."""
        ...

    def ping(self) -> bool:
        """Check if the backend is reachable."""
        ...


class InMemoryBackend:
    """
    Simple in-memory backend for tests and local development.

    Implements the CacheBackend protocol without external dependencies.
    Values are deep-copied on the way in and out to mimic serialization.

    Note: This is NOT distributed. Use only for testing and development.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._store: dict[str, Any] = {}
        self._expires_at: dict[str, float] = {}
        self._clock = clock
        self._connected = False
        self._status = ResultCode.SUCCESS
        self.servers: list[tuple[str, int]] = []

    def connect(self, servers: Sequence[tuple[str, int]]) -> None:
        """Simulate connection."""
        if not servers:
            self._status = ResultCode.NO_SERVERS
            raise ConnectionError("No cache servers given")
        self.servers = list(servers)
        self._connected = True
        self._status = ResultCode.SUCCESS

    def _ensure_connected(self) -> None:
        if not self._connected:
            self._status = ResultCode.CONNECTION_FAILURE
            raise ConnectionError("In-memory backend is not connected")

    def _live(self, key: str) -> bool:
        expires_at = self._expires_at.get(key)
        if expires_at is not None and self._clock() >= expires_at:
            self._store.pop(key, None)
            self._expires_at.pop(key, None)
        return key in self._store

    def _expire_in(self, key: str, seconds: int) -> None:
        deadline = self._clock() + seconds
        current = self._expires_at.get(key)
        if current is None or deadline < current:
            self._expires_at[key] = deadline

    def get(self, key: str) -> tuple[Any, ResultCode]:
        self._ensure_connected()
        if not self._live(key):
            self._status = ResultCode.NOTFOUND
            return NOT_FOUND, self._status
        self._status = ResultCode.SUCCESS
        return copy.deepcopy(self._store[key]), self._status

    def get_multi(self, keys: Sequence[str]) -> tuple[dict[str, Any] | bool, ResultCode]:
        self._ensure_connected()
        found = {key: copy.deepcopy(self._store[key]) for key in keys if self._live(key)}
        if not found:
            self._status = ResultCode.NOTFOUND
            return NOT_FOUND, self._status
        self._status = ResultCode.SUCCESS
        return found, self._status

    def set(self, key: str, value: Any, ttl: int) -> bool:
        self._ensure_connected()
        self._store[key] = copy.deepcopy(value)
        self._expires_at.pop(key, None)
        if ttl:
            self._expires_at[key] = self._clock() + ttl
        self._status = ResultCode.SUCCESS
        return True

    def delete(self, key: str, delay: int = 0) -> bool:
        self._ensure_connected()
        if not self._live(key):
            self._status = ResultCode.NOTFOUND
            return False
        if delay:
            self._expire_in(key, delay)
        else:
            del self._store[key]
            self._expires_at.pop(key, None)
        self._status = ResultCode.SUCCESS
        return True

    def flush(self, delay: int = 0) -> bool:
        self._ensure_connected()
        if delay:
            for key in list(self._store):
                self._expire_in(key, delay)
        else:
            self._store.clear()
            self._expires_at.clear()
        self._status = ResultCode.SUCCESS
        return True

    def last_status_code(self) -> ResultCode:
        return self._status

    def ping(self) -> bool:
        """Check if connected."""
        return self._connected

    def __len__(self) -> int:
        return sum(1 for key in list(self._store) if self._live(key))
