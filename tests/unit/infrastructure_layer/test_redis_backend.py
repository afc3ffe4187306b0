"""
Unit Tests for RedisBackend

redis-py clients are replaced with mocks; these tests pin the mapping from
Redis replies to the backend lookup contract and status codes.
"""

import enum
from dataclasses import dataclass
from datetime import date, datetime
from unittest.mock import MagicMock, patch

import orjson
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisClusterException, ResponseError, SlotNotCoveredError
from redis.exceptions import TimeoutError as RedisTimeoutError

from nscache.core.exceptions import BackendInitError, BackendWriteError
from nscache.core.interfaces.cache import NOT_FOUND, CacheBackend, ResultCode
from nscache.infrastructure.cache.facade import CacheFacade
from nscache.infrastructure.cache.redis_backend import RedisBackend

MODULE = "nscache.infrastructure.cache.redis_backend"


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def backend(test_settings, client):
    """Backend with an injected single-node client."""
    backend = RedisBackend(test_settings)
    backend._client = client
    return backend


@pytest.mark.unit
class TestRedisBackendConnect:
    """Test connection establishment."""

    def test_satisfies_protocol(self, test_settings):
        assert isinstance(RedisBackend(test_settings), CacheBackend)

    def test_single_server_uses_redis_client(self, test_settings):
        with patch(f"{MODULE}.redis.Redis") as redis_cls:
            backend = RedisBackend(test_settings)
            backend.connect([("cache-1", 6380)])

        kwargs = redis_cls.call_args.kwargs
        assert kwargs["host"] == "cache-1"
        assert kwargs["port"] == 6380
        assert kwargs["db"] == 0
        redis_cls.return_value.ping.assert_called_once()
        assert backend.last_status_code() == ResultCode.SUCCESS

    def test_multiple_servers_use_cluster_client(self, test_settings):
        with patch(f"{MODULE}.RedisCluster") as cluster_cls, patch(f"{MODULE}.ClusterNode") as node_cls:
            backend = RedisBackend(test_settings)
            backend.connect([("cache-1", 6379), ("cache-2", 6379)])

        assert node_cls.call_count == 2
        cluster_cls.return_value.ping.assert_called_once()
        assert backend._cluster is True

    def test_no_servers(self, test_settings):
        backend = RedisBackend(test_settings)

        with pytest.raises(RedisConnectionError):
            backend.connect([])
        assert backend.last_status_code() == ResultCode.NO_SERVERS

    def test_unreachable_cluster(self, test_settings):
        with patch(f"{MODULE}.RedisCluster") as cluster_cls, patch(f"{MODULE}.ClusterNode"):
            cluster_cls.side_effect = RedisClusterException("Redis Cluster cannot be connected")
            backend = RedisBackend(test_settings)

            with pytest.raises(RedisClusterException):
                backend.connect([("127.0.0.1", 1), ("127.0.0.1", 2)])

        assert backend.last_status_code() == ResultCode.CONNECTION_FAILURE
        assert backend.ping() is False

    def test_unreachable_cluster_reported_by_facade(self, test_settings):
        with patch(f"{MODULE}.RedisCluster") as cluster_cls, patch(f"{MODULE}.ClusterNode"):
            cluster_cls.side_effect = RedisClusterException("Redis Cluster cannot be connected")
            cache = CacheFacade(RedisBackend(test_settings))

            with pytest.raises(BackendInitError) as exc_info:
                cache.initialize("app1", [("127.0.0.1", 1), ("127.0.0.1", 2)])

        assert exc_info.value.status_code == ResultCode.CONNECTION_FAILURE

    def test_unreachable_server(self, test_settings):
        with patch(f"{MODULE}.redis.Redis") as redis_cls:
            redis_cls.return_value.ping.side_effect = RedisConnectionError("refused")
            backend = RedisBackend(test_settings)

            with pytest.raises(RedisConnectionError):
                backend.connect([("localhost", 6379)])

        assert backend.last_status_code() == ResultCode.CONNECTION_FAILURE
        assert backend.ping() is False

    def test_operation_before_connect(self, test_settings):
        backend = RedisBackend(test_settings)

        with pytest.raises(RedisConnectionError):
            backend.get("k")
        assert backend.last_status_code() == ResultCode.CONNECTION_FAILURE


@pytest.mark.unit
class TestRedisBackendLookups:
    """Test get/get_multi."""

    def test_get_miss(self, backend, client):
        client.get.return_value = None

        assert backend.get("k") == (NOT_FOUND, ResultCode.NOTFOUND)

    @pytest.mark.parametrize("value", [False, 0, "", "alice", [1, 2], {"a": None}])
    def test_get_hit_decodes(self, backend, client, value):
        client.get.return_value = orjson.dumps(value)

        assert backend.get("k") == (value, ResultCode.SUCCESS)

    def test_get_undecodable_value(self, backend, client):
        client.get.return_value = b"\x00not-json"

        with pytest.raises(orjson.JSONDecodeError):
            backend.get("k")
        assert backend.last_status_code() == ResultCode.FAILURE

    def test_get_multi_uses_mget(self, backend, client):
        client.mget.return_value = [None, orjson.dumps("bee"), orjson.dumps(False)]

        found, status = backend.get_multi(["a", "b", "c"])

        client.mget.assert_called_once_with(["a", "b", "c"])
        assert found == {"b": "bee", "c": False}
        assert status == ResultCode.SUCCESS

    def test_get_multi_nothing_found(self, backend, client):
        client.mget.return_value = [None, None]

        assert backend.get_multi(["a", "b"]) == (NOT_FOUND, ResultCode.NOTFOUND)

    def test_get_multi_on_cluster(self, backend, client):
        backend._cluster = True
        client.mget_nonatomic.return_value = [orjson.dumps(1)]

        found, _ = backend.get_multi(["a"])

        client.mget_nonatomic.assert_called_once_with(["a"])
        assert found == {"a": 1}

    def test_timeout_sets_connection_failure(self, backend, client):
        client.get.side_effect = RedisTimeoutError("slow")

        with pytest.raises(RedisTimeoutError):
            backend.get("k")
        assert backend.last_status_code() == ResultCode.CONNECTION_FAILURE

    def test_cluster_error_sets_connection_failure(self, backend, client):
        client.get.side_effect = SlotNotCoveredError("slot 42 not covered")

        with pytest.raises(SlotNotCoveredError):
            backend.get("k")
        assert backend.last_status_code() == ResultCode.CONNECTION_FAILURE

    def test_server_error_status(self, backend, client):
        client.get.side_effect = ResponseError("WRONGTYPE")

        with pytest.raises(ResponseError):
            backend.get("k")
        assert backend.last_status_code() == ResultCode.SERVER_ERROR


@pytest.mark.unit
class TestRedisBackendMutations:
    """Test set/delete/flush."""

    def test_set_serializes_and_applies_ttl(self, backend, client):
        client.set.return_value = True

        assert backend.set("k", {"a": 1}, 60) is True
        client.set.assert_called_once_with("k", orjson.dumps({"a": 1}), ex=60)

    def test_set_zero_ttl_means_no_expiry(self, backend, client):
        client.set.return_value = True

        backend.set("k", "v", 0)

        assert client.set.call_args.kwargs["ex"] is None

    def test_set_refused(self, backend, client):
        client.set.return_value = None

        assert backend.set("k", "v", 0) is False
        assert backend.last_status_code() == ResultCode.NOTSTORED

    def test_set_unserializable(self, backend, client):
        with pytest.raises(TypeError):
            backend.set("k", object(), 0)
        assert backend.last_status_code() == ResultCode.FAILURE
        client.set.assert_not_called()

    def test_delete(self, backend, client):
        client.delete.return_value = 1

        assert backend.delete("k") is True
        assert backend.last_status_code() == ResultCode.SUCCESS

    def test_delete_missing(self, backend, client):
        client.delete.return_value = 0

        assert backend.delete("k") is False
        assert backend.last_status_code() == ResultCode.NOTFOUND

    def test_delayed_delete_uses_expire(self, backend, client):
        client.expire.return_value = True

        assert backend.delete("k", delay=30) is True
        client.expire.assert_called_once_with("k", 30, lt=True)
        client.delete.assert_not_called()

    def test_delayed_delete_keeps_shorter_ttl(self, backend, client):
        # EXPIRE LT answers 0 when the key already expires sooner
        client.expire.return_value = False
        client.exists.return_value = 1

        assert backend.delete("k", delay=30) is True
        assert backend.last_status_code() == ResultCode.SUCCESS

    def test_delayed_delete_missing(self, backend, client):
        client.expire.return_value = False
        client.exists.return_value = 0

        assert backend.delete("k", delay=30) is False
        assert backend.last_status_code() == ResultCode.NOTFOUND

    def test_flush(self, backend, client):
        client.flushdb.return_value = True

        assert backend.flush() is True
        client.flushdb.assert_called_once()

    def test_delayed_flush_expires_every_key(self, backend, client):
        client.scan_iter.return_value = iter([b"k1", b"k2"])
        pipe = client.pipeline.return_value

        assert backend.flush(delay=15) is True

        assert [c.args for c in pipe.expire.call_args_list] == [(b"k1", 15), (b"k2", 15)]
        assert all(c.kwargs == {"lt": True} for c in pipe.expire.call_args_list)
        pipe.execute.assert_called_once()
        client.flushdb.assert_not_called()

    def test_delayed_flush_executes_in_batches(self, backend, client):
        backend.SCAN_BATCH_SIZE = 2
        client.scan_iter.return_value = iter([b"k1", b"k2", b"k3", b"k4", b"k5"])
        pipe = client.pipeline.return_value

        assert backend.flush(delay=15) is True

        assert pipe.expire.call_count == 5
        assert pipe.execute.call_count == 3

    def test_delayed_flush_empty_database(self, backend, client):
        client.scan_iter.return_value = iter([])
        pipe = client.pipeline.return_value

        assert backend.flush(delay=15) is True
        pipe.execute.assert_not_called()

    def test_delayed_flush_failure(self, backend, client):
        client.scan_iter.side_effect = RedisConnectionError("gone")

        with pytest.raises(RedisConnectionError):
            backend.flush(delay=15)
        assert backend.last_status_code() == ResultCode.CONNECTION_FAILURE

    def test_ping_swallows_errors(self, backend, client):
        client.ping.side_effect = RedisConnectionError("gone")
        assert backend.ping() is False

    def test_ping_swallows_cluster_errors(self, backend, client):
        client.ping.side_effect = RedisClusterException("no nodes")
        assert backend.ping() is False


class Color(enum.Enum):
    RED = "red"


@dataclass
class Point:
    x: int
    y: int


@pytest.fixture
def dict_client():
    """Mock client backed by a dict, so bytes written by set() are read back."""
    store = {}
    client = MagicMock()
    client.set.side_effect = lambda key, payload, ex=None: store.__setitem__(key, payload) or True
    client.get.side_effect = store.get
    client.store = store
    return client


@pytest.fixture
def dict_cache(test_settings, dict_client):
    backend = RedisBackend(test_settings)
    backend._client = dict_client
    cache = CacheFacade(backend)
    with patch.object(backend, "connect"):
        cache.initialize("app1", [("localhost", 6379)])
    return cache


@pytest.mark.unit
class TestRedisBackendValueFidelity:
    """Values either read back unchanged or are refused by set()."""

    @pytest.mark.parametrize(
        "value",
        [
            False,
            0,
            "",
            -0.5,
            2**63 - 1,
            {"name": "alice", "tags": ["a", "b"], "meta": {"score": 1.5, "note": None}},
            [1, "two", 3.0, True, None, [], {}],
        ],
    )
    def test_supported_values_round_trip(self, dict_cache, value):
        dict_cache.write("k", value)

        result = dict_cache.read("k")

        assert result == value
        assert type(result) is type(value)

    @pytest.mark.parametrize(
        "value",
        [
            date(2024, 1, 2),
            datetime(2024, 1, 2, 3, 4, 5),
            (1, 2),
            {1, 2},
            float("nan"),
            float("inf"),
            Color.RED,
            Point(1, 2),
            {1: "int key"},
            {"nested": [(1, 2)]},
            [float("-inf")],
            b"raw bytes",
        ],
    )
    def test_lossy_values_refused_by_set(self, backend, client, value):
        with pytest.raises((TypeError, ValueError)):
            backend.set("k", value, 0)

        assert backend.last_status_code() == ResultCode.FAILURE
        client.set.assert_not_called()

    @pytest.mark.parametrize("value", [date(2024, 1, 2), (1, 2), float("nan")])
    def test_facade_write_fails_without_storing(self, dict_cache, dict_client, value):
        with pytest.raises(BackendWriteError) as exc_info:
            dict_cache.write("k", value)

        assert exc_info.value.status_code == ResultCode.FAILURE
        assert dict_client.store == {}
        assert dict_cache.read("k") is None
        assert dict_cache.get_stats() == {"reads": 0, "writes": 0, "deletes": 0, "misses": 1}
