"""
Redis Cache Backend

Implements the CacheBackend protocol on redis-py.

Architecture:
    RedisBackend
        ├── connect()   one server -> redis.Redis, several -> RedisCluster
        ├── _execute()  command execution with status tracking
        └── orjson      value serialization

Why orjson?
- Stored values keep their type: False, 0 and "" come back as themselves
- A miss is the only case where Redis returns None, so it maps cleanly onto
  (NOT_FOUND, ResultCode.NOTFOUND)
- Values JSON would rewrite (tuples, dates, NaN, enums) are refused by set()
  instead of coming back changed

Routing across several servers, pooling and reconnection belong to redis-py.
"""

import math
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

import orjson
import redis
from redis.cluster import ClusterNode, RedisCluster
from redis.exceptions import ConnectionError, RedisClusterException, RedisError, TimeoutError

from nscache.core.config.settings import Settings, get_settings
from nscache.core.interfaces.cache import NOT_FOUND, ResultCode
from nscache.core.logging.logger import get_logger

logger = get_logger(__name__)

# Exact types orjson reads back unchanged. Subclasses (enums, named tuples)
# and tuples, sets, dates or dataclasses come back as something else.
_SCALAR_TYPES = (str, int, bool, type(None))


def _ensure_lossless(value: Any) -> None:
    """
    Raise if ``value`` would not read back unchanged after a JSON round trip.

    Raises:
        TypeError: Unsupported type, or a dict key that is not a str
        ValueError: NaN or infinity (JSON has no spelling for them)
    """
    kind = type(value)
    if kind in _SCALAR_TYPES:
        return
    if kind is float:
        if not math.isfinite(value):
            raise ValueError(f"Non-finite float {value!r} cannot be stored")
        return
    if kind is list:
        for item in value:
            _ensure_lossless(item)
        return
    if kind is dict:
        for key, item in value.items():
            if type(key) is not str:
                raise TypeError(f"Dict keys must be str, got {type(key).__name__}")
            _ensure_lossless(item)
        return
    raise TypeError(f"Values of type {kind.__name__} do not round-trip through the cache")


class RedisBackend:
    """
    Synchronous Redis backend.

    Transport errors are re-raised after recording CONNECTION_FAILURE or
    SERVER_ERROR as the last status; the facade wraps them into its own
    error types.

    Usage:
        backend = RedisBackend()
        backend.connect([("localhost", 6379)])
        backend.set("k", {"a": 1}, ttl=60)
        backend.get("k")  # ({"a": 1}, ResultCode.SUCCESS)
    """

    SCAN_BATCH_SIZE = 500

    def __init__(self, settings: Settings | None = None):
        self._settings = settings or get_settings()
        self._client: redis.Redis | RedisCluster | None = None
        self._cluster = False
        self._status = ResultCode.SUCCESS

    # -------------------------------------------------------------------------
    # Connection
    # -------------------------------------------------------------------------

    def connect(self, servers: Sequence[tuple[str, int]]) -> None:
        """
        Create the client and verify it with PING.

        Raises:
            redis.exceptions.ConnectionError: No servers, or none reachable
            redis.exceptions.RedisClusterException: No cluster node reachable
            redis.exceptions.RedisError: Any other connection failure
        """
        if not servers:
            self._status = ResultCode.NO_SERVERS
            raise ConnectionError("No cache servers given")

        redis_settings = self._settings.redis
        options = {
            "password": redis_settings.REDIS_PASSWORD,
            "socket_timeout": redis_settings.REDIS_SOCKET_TIMEOUT,
            "socket_connect_timeout": redis_settings.REDIS_SOCKET_CONNECT_TIMEOUT,
        }

        try:
            if len(servers) == 1:
                host, port = servers[0]
                client = redis.Redis(host=host, port=port, db=redis_settings.REDIS_DB, **options)
            else:
                # Cluster mode only exposes database 0
                client = RedisCluster(
                    startup_nodes=[ClusterNode(host, port) for host, port in servers],
                    **options,
                )
            client.ping()
        except (RedisError, RedisClusterException):
            self._status = ResultCode.CONNECTION_FAILURE
            raise

        self._client = client
        self._cluster = len(servers) > 1
        self._status = ResultCode.SUCCESS

        logger.info(
            "Redis backend connected",
            servers=[f"{host}:{port}" for host, port in servers],
            cluster=self._cluster,
        )

    def _require_client(self) -> redis.Redis | RedisCluster:
        if self._client is None:
            self._status = ResultCode.CONNECTION_FAILURE
            raise ConnectionError("Redis backend is not connected")
        return self._client

    @contextmanager
    def _tracking_errors(self) -> Iterator[None]:
        """Record the status of a failed Redis call before re-raising."""
        try:
            yield
        except (ConnectionError, TimeoutError, RedisClusterException):
            # RedisClusterException covers unreachable or uncovered cluster nodes
            self._status = ResultCode.CONNECTION_FAILURE
            raise
        except RedisError:
            self._status = ResultCode.SERVER_ERROR
            raise

    def _execute(self, command: str, *args, **kwargs) -> Any:
        client = self._require_client()
        with self._tracking_errors():
            return getattr(client, command)(*args, **kwargs)

    def _decode(self, raw: bytes) -> Any:
        try:
            return orjson.loads(raw)
        except orjson.JSONDecodeError:
            self._status = ResultCode.FAILURE
            raise

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def get(self, key: str) -> tuple[Any, ResultCode]:
        raw = self._execute("get", key)
        if raw is None:
            self._status = ResultCode.NOTFOUND
            return NOT_FOUND, self._status

        value = self._decode(raw)
        self._status = ResultCode.SUCCESS
        return value, self._status

    def get_multi(self, keys: Sequence[str]) -> tuple[dict[str, Any] | bool, ResultCode]:
        keys = list(keys)
        if self._cluster:
            # Keys hash to different slots; redis-py splits the MGET per node
            raws = self._execute("mget_nonatomic", keys)
        else:
            raws = self._execute("mget", keys)

        found = {key: self._decode(raw) for key, raw in zip(keys, raws) if raw is not None}
        if not found:
            self._status = ResultCode.NOTFOUND
            return NOT_FOUND, self._status

        self._status = ResultCode.SUCCESS
        return found, self._status

    def set(self, key: str, value: Any, ttl: int) -> bool:
        try:
            _ensure_lossless(value)
            payload = orjson.dumps(value)
        except (TypeError, ValueError):
            self._status = ResultCode.FAILURE
            raise

        stored = self._execute("set", key, payload, ex=ttl or None)
        if not stored:
            self._status = ResultCode.NOTSTORED
            return False

        self._status = ResultCode.SUCCESS
        return True

    def delete(self, key: str, delay: int = 0) -> bool:
        if delay:
            # LT keeps a shorter TTL already on the key (Redis 7.0+); a refused
            # EXPIRE on a live key still means it will be gone within delay
            removed = bool(self._execute("expire", key, delay, lt=True)) or bool(
                self._execute("exists", key)
            )
        else:
            removed = self._execute("delete", key) > 0

        self._status = ResultCode.SUCCESS if removed else ResultCode.NOTFOUND
        return removed

    def flush(self, delay: int = 0) -> bool:
        """
        Invalidate every key in the database (or every primary of a cluster).

        With a delay, FLUSHDB cannot be scheduled, so every key is given an
        EXPIRE of ``delay`` seconds instead (never lengthening a shorter TTL),
        sent in pipelines of SCAN_BATCH_SIZE commands.
        """
        if not delay:
            flushed = bool(self._execute("flushdb"))
        else:
            client = self._require_client()
            with self._tracking_errors():
                pipe = client.pipeline(transaction=False)
                queued = 0
                for key in client.scan_iter(count=self.SCAN_BATCH_SIZE):
                    pipe.expire(key, delay, lt=True)
                    queued += 1
                    if queued == self.SCAN_BATCH_SIZE:
                        pipe.execute()
                        queued = 0
                if queued:
                    pipe.execute()
            flushed = True

        self._status = ResultCode.SUCCESS if flushed else ResultCode.FAILURE
        return flushed

    # -------------------------------------------------------------------------
    # Monitoring
    # -------------------------------------------------------------------------

    def last_status_code(self) -> ResultCode:
        return self._status

    def ping(self) -> bool:
        """
        Check Redis connection health.

        Returns:
            True if healthy, False otherwise
        """
        if self._client is None:
            return False
        try:
            return bool(self._client.ping())
        except (RedisError, RedisClusterException):
            return False
