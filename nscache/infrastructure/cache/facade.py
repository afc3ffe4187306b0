"""
Namespaced Cache Facade

Architecture:
    CacheFacade (Public API)
        ├── keys.derive_storage_key   (namespace isolation)
        ├── results.disambiguate      (miss vs. stored False)
        ├── AnalyticsRecorder         (reads/writes/deletes/misses, duration)
        └── CacheBackend              (RedisBackend, InMemoryBackend)

Every operation follows the same path:
    1. Refuse to run until a namespace is set (ConfigurationError)
    2. Short-circuit reads while bypass is on (counted as misses)
    3. Derive storage keys
    4. One backend round trip, timed when benchmarking is on
    5. Classify the outcome, update counters, or raise a typed BackendError

Lifecycle:
    Uninitialized --initialize()--> Ready. There is no way back; a facade
    owns one namespace for its whole life.

Concurrency:
    Namespace, flags and counters belong to the facade instance. The
    module-level get_cache() instance makes them process-wide; construct a
    separate facade over a shared backend for request-scoped bypass.
"""

import threading
import time
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from nscache.core.config.constants import DEFAULT_FLUSH_DELAY, LOG_KEY_MAX_LENGTH, CacheStage
from nscache.core.config.settings import Settings, get_settings
from nscache.core.exceptions import (
    BackendDeleteError,
    BackendError,
    BackendFlushError,
    BackendInitError,
    BackendReadError,
    BackendWriteError,
    ConfigurationError,
    InvalidValueError,
)
from nscache.core.interfaces.cache import CacheBackend
from nscache.core.logging.logger import get_logger, log_stage
from nscache.infrastructure.cache.analytics import AnalyticsRecorder
from nscache.infrastructure.cache.keys import derive_storage_key, derive_storage_keys
from nscache.infrastructure.cache.redis_backend import RedisBackend
from nscache.infrastructure.cache.results import disambiguate, reassemble

logger = get_logger(__name__)


def _loggable(key: str) -> str:
    return key[:LOG_KEY_MAX_LENGTH]


class CacheFacade:
    """
    Namespaced read/write/delete/flush over a cache backend.

    Usage:
        cache = CacheFacade(RedisBackend())
        cache.initialize("app1", [("localhost", 6379)])

        cache.write("user:1", "alice")
        cache.read("user:1")           # "alice"
        cache.read("user:2")           # None (miss)
        cache.read_multi(["user:1", "user:2"])
        cache.get_stats()              # {"reads": 1, "writes": 1, ...}

    None is reserved as the "absent" result and can never be written; every
    other value, False/0/"" included, round-trips.
    """

    def __init__(
        self,
        backend: CacheBackend | None = None,
        analytics: AnalyticsRecorder | None = None,
        default_ttl: int = 0,
    ):
        self._backend = backend if backend is not None else RedisBackend()
        self._analytics = analytics or AnalyticsRecorder()
        self._default_ttl = default_ttl
        self._namespace: str | None = None
        self._bypass = False
        self._benchmark = False
        self._lock = threading.Lock()
        self._logger = logger

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def namespace(self) -> str | None:
        return self._namespace

    @property
    def is_ready(self) -> bool:
        return self._namespace is not None

    @property
    def bypass_enabled(self) -> bool:
        return self._bypass

    @property
    def benchmark_enabled(self) -> bool:
        return self._benchmark

    @property
    def backend(self) -> CacheBackend:
        return self._backend

    def _require_namespace(self) -> str:
        namespace = self._namespace
        if namespace is None:
            raise ConfigurationError("Namespace not set").with_suggestion(
                "Call initialize() before using the cache"
            )
        return namespace

    def initialize(
        self,
        namespace: str,
        servers: Iterable[tuple[str, int]],
        benchmark_enabled: bool = False,
    ) -> None:
        """
        Set the namespace and connect the backend.

        STAGE-C.0: Facade initialization

        The namespace is stored before connecting, so after a failed connect
        later calls report backend errors rather than "Namespace not set".

        Args:
            namespace: Prefix isolating this application's keys
            servers: (host, port) pairs handed to the backend
            benchmark_enabled: Accumulate backend round-trip time

        Raises:
            ConfigurationError: Namespace is not a string, or already set
            BackendInitError: Backend connection failed
        """
        if not isinstance(namespace, str):
            raise ConfigurationError(
                "Namespace must be a string", details={"namespace_type": type(namespace).__name__}
            )

        with self._lock:
            if self._namespace is not None:
                raise ConfigurationError(
                    "Namespace already set", details={"namespace": self._namespace}
                )
            self._namespace = namespace
            self._benchmark = benchmark_enabled

        self._logger = logger.bind(namespace=namespace)
        servers = list(servers)

        try:
            self._backend.connect(servers)
        except Exception as e:
            raise self._backend_failure(
                BackendInitError,
                CacheStage.INITIALIZE,
                "Exception while attempting to add servers",
                e,
                servers=servers,
            ) from e

        log_stage(
            self._logger,
            CacheStage.INITIALIZE,
            "Cache facade initialized",
            servers=len(servers),
            benchmark_enabled=benchmark_enabled,
        )

    # -------------------------------------------------------------------------
    # Instrumentation
    # -------------------------------------------------------------------------

    def _round_trip(self, call: Callable[..., Any], *args: Any) -> Any:
        """Run one backend call, adding its wall-clock time when benchmarking."""
        if not self._benchmark:
            return call(*args)

        started = time.perf_counter()
        try:
            return call(*args)
        finally:
            self._analytics.add_duration(time.perf_counter() - started)

    def _backend_failure(
        self,
        error_cls: type[BackendError],
        stage: CacheStage,
        message: str,
        exc: Exception | None = None,
        **context: Any,
    ) -> BackendError:
        """Log a failed backend call and build the typed error to raise."""
        status_code = self._backend.last_status_code()
        if exc is not None:
            error = error_cls.from_exception(exc, message, status_code=status_code, **context)
        else:
            error = error_cls(message, status_code=status_code, details=context)

        log_stage(
            self._logger,
            stage,
            message,
            level="error",
            status_code=int(status_code),
            error=str(exc) if exc is not None else None,
            **context,
        )
        return error

    # -------------------------------------------------------------------------
    # Core Cache Operations
    # -------------------------------------------------------------------------

    def read(self, key: str) -> Any:
        """
        Read one value.

        STAGE-C.1: Single-key lookup

        Returns:
            The stored value, or None on a miss or while bypassing

        Raises:
            ConfigurationError: Namespace not set
            BackendReadError: The backend call raised
        """
        namespace = self._require_namespace()

        if self._bypass:
            self._analytics.record_miss()
            log_stage(self._logger, CacheStage.BYPASS, "Cache read bypassed", level="debug",
                      cache_key=_loggable(key))
            return None

        storage_key = derive_storage_key(namespace, key)
        try:
            raw, status = self._round_trip(self._backend.get, storage_key)
        except Exception as e:
            raise self._backend_failure(
                BackendReadError,
                CacheStage.READ,
                "Exception while attempting to read from resource",
                e,
                key=_loggable(key),
            ) from e

        result = disambiguate(raw, status)
        if result.miss:
            self._analytics.record_miss()
            log_stage(self._logger, CacheStage.READ, "Cache miss", level="debug",
                      cache_key=_loggable(key))
            return None

        self._analytics.record_read()
        return result.value

    def read_multi(self, keys: Sequence[str]) -> dict[str, Any]:
        """
        Read many values in one backend round trip.

        STAGE-C.2: Batched lookup

        A batch counts as one read when anything was found, otherwise as one
        miss, however many keys it holds.

        Returns:
            Every requested key mapped to its value, or None when absent

        Raises:
            ConfigurationError: Namespace not set
            BackendReadError: The backend call raised
        """
        namespace = self._require_namespace()
        if isinstance(keys, str):
            raise TypeError("read_multi() expects a sequence of keys, not a single string")
        keys = list(keys)

        if self._bypass:
            self._analytics.record_miss()
            log_stage(self._logger, CacheStage.BYPASS, "Cache batch read bypassed", level="debug",
                      key_count=len(keys))
            return dict.fromkeys(keys)

        if not keys:
            return {}

        storage_keys = derive_storage_keys(namespace, keys)
        try:
            raw, status = self._round_trip(self._backend.get_multi, storage_keys)
        except Exception as e:
            raise self._backend_failure(
                BackendReadError,
                CacheStage.READ_MULTI,
                "Exception while attempting to read multiple keys from resource",
                e,
                key_count=len(keys),
            ) from e

        result = disambiguate(raw, status)
        if result.miss:
            self._analytics.record_miss()
            log_stage(self._logger, CacheStage.READ_MULTI, "Cache batch miss", level="debug",
                      key_count=len(keys))
        else:
            self._analytics.record_read()

        return reassemble(keys, storage_keys, result)

    def write(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """
        Store a value.

        STAGE-C.3: Cache population

        Args:
            key: Logical key
            value: Any value except None
            ttl: Seconds until expiry; 0 never expires (default: facade default)

        Raises:
            ConfigurationError: Namespace not set
            InvalidValueError: value is None, or ttl is negative
            BackendWriteError: The backend refused the value or raised
        """
        namespace = self._require_namespace()

        if value is None:
            raise InvalidValueError(
                f"Cannot perform write; attempted to store null value in key *{key}*",
                details={"key": key},
            )

        ttl = self._default_ttl if ttl is None else ttl
        if ttl < 0:
            raise InvalidValueError("TTL cannot be negative", details={"key": key, "ttl": ttl})

        storage_key = derive_storage_key(namespace, key)
        try:
            stored = self._round_trip(self._backend.set, storage_key, value, ttl)
        except Exception as e:
            raise self._backend_failure(
                BackendWriteError,
                CacheStage.WRITE,
                "Exception while attempting to write to resource",
                e,
                key=_loggable(key),
            ) from e

        if not stored:
            raise self._backend_failure(
                BackendWriteError,
                CacheStage.WRITE,
                "Backend refused write",
                key=_loggable(key),
            )

        self._analytics.record_write()
        log_stage(self._logger, CacheStage.WRITE, "Cache set", level="debug",
                  cache_key=_loggable(key), ttl=ttl)
        return True

    def delete(self, key: str, delay: int = 0) -> bool:
        """
        Delete a value, immediately or after ``delay`` seconds.

        STAGE-C.4: Cache invalidation

        Raises:
            ConfigurationError: Namespace not set
            BackendDeleteError: Key missing (status NOTFOUND) or backend failure
        """
        namespace = self._require_namespace()
        storage_key = derive_storage_key(namespace, key)

        try:
            deleted = self._round_trip(self._backend.delete, storage_key, delay)
        except Exception as e:
            raise self._backend_failure(
                BackendDeleteError,
                CacheStage.DELETE,
                "Exception while attempting to delete from resource",
                e,
                key=_loggable(key),
            ) from e

        if not deleted:
            raise self._backend_failure(
                BackendDeleteError,
                CacheStage.DELETE,
                "Backend refused delete",
                key=_loggable(key),
            )

        self._analytics.record_delete()
        log_stage(self._logger, CacheStage.DELETE, "Cache invalidated", level="debug",
                  cache_key=_loggable(key), delay=delay)
        return True

    def flush(self, delay: int = DEFAULT_FLUSH_DELAY) -> bool:
        """
        Empty the whole backend, immediately or after ``delay`` seconds.

        STAGE-C.5: Backend flush

        Warning: this is NOT namespace-scoped. Every namespace sharing the
        backend loses its data, sessions stored there included.

        Raises:
            ConfigurationError: Namespace not set
            BackendFlushError: Backend failure
        """
        self._require_namespace()

        log_stage(self._logger, CacheStage.FLUSH, "Flushing entire cache backend", level="warning",
                  delay=delay)
        try:
            flushed = self._round_trip(self._backend.flush, delay)
        except Exception as e:
            raise self._backend_failure(
                BackendFlushError,
                CacheStage.FLUSH,
                "Exception while attempting to flush resource",
                e,
            ) from e

        if not flushed:
            raise self._backend_failure(
                BackendFlushError, CacheStage.FLUSH, "Backend refused flush"
            )
        return True

    def set_bypass(self, enable: bool) -> None:
        """
        Turn read bypass on or off.

        While on, read() and read_multi() return absent results without
        contacting the backend and count a miss per call.
        """
        self._require_namespace()
        with self._lock:
            self._bypass = bool(enable)
        log_stage(self._logger, CacheStage.BYPASS, "Cache bypass toggled", enabled=self._bypass)

    # -------------------------------------------------------------------------
    # Analytics
    # -------------------------------------------------------------------------

    def get_stats(self) -> dict[str, int]:
        self._require_namespace()
        return self._analytics.get_stats()

    def get_reads(self) -> int:
        self._require_namespace()
        return self._analytics.get_reads()

    def get_writes(self) -> int:
        self._require_namespace()
        return self._analytics.get_writes()

    def get_deletes(self) -> int:
        self._require_namespace()
        return self._analytics.get_deletes()

    def get_misses(self) -> int:
        self._require_namespace()
        return self._analytics.get_misses()

    def get_duration(self) -> float:
        """Seconds spent in backend round trips since benchmarking was enabled."""
        self._require_namespace()
        return self._analytics.get_duration()

    # -------------------------------------------------------------------------
    # Monitoring
    # -------------------------------------------------------------------------

    def health_check(self) -> dict[str, Any]:
        """
        Report facade and backend health. Never raises.

        Returns:
            Dict with status, flags, backend reachability and stats
        """
        try:
            reachable = bool(self._backend.ping())
        except Exception as e:
            log_stage(self._logger, CacheStage.HEALTH, "Backend ping failed", level="warning",
                      error=str(e))
            reachable = False

        return {
            "status": "healthy" if self.is_ready and reachable else "degraded",
            "namespace": self._namespace,
            "bypass_enabled": self._bypass,
            "benchmark_enabled": self._benchmark,
            "backend_reachable": reachable,
            **self._analytics.summary(),
        }


# =============================================================================
# GLOBAL INSTANCE (SINGLETON PATTERN)
# =============================================================================

_cache: CacheFacade | None = None


def get_cache(settings: Settings | None = None) -> CacheFacade:
    """
    Get the process-wide cache facade (created on first use, uninitialized).

    Returns:
        CacheFacade: Global facade instance
    """
    global _cache

    if _cache is None:
        settings = settings or get_settings()
        _cache = CacheFacade(
            RedisBackend(settings),
            default_ttl=settings.cache.CACHE_DEFAULT_TTL,
        )

    return _cache


def init_cache(settings: Settings | None = None) -> CacheFacade:
    """
    Initialize the process-wide facade from settings.

    Raises:
        ConfigurationError: CACHE_NAMESPACE is not configured
        BackendInitError: Backend connection failed
    """
    settings = settings or get_settings()
    cache_settings = settings.cache

    if cache_settings.CACHE_NAMESPACE is None:
        raise ConfigurationError("CACHE_NAMESPACE is not configured").with_suggestion(
            "Set the CACHE_NAMESPACE environment variable"
        )

    cache = get_cache(settings)
    if not cache.is_ready:
        cache.initialize(
            cache_settings.CACHE_NAMESPACE,
            settings.server_list,
            benchmark_enabled=cache_settings.CACHE_BENCHMARK_ENABLED,
        )
    return cache


def reset_cache() -> None:
    """Drop the process-wide facade (useful for testing)."""
    global _cache
    _cache = None
