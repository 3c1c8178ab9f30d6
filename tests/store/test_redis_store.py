import pytest
import redis

from split_macros.exceptions import StoreUnavailableError
from split_macros.store.redis_store import RedisKeyValueStore
from tests.fakes.redis_client import FakeRedisClient


class TestRedisKeyValueStore:
    def test_get_and_set(self) -> None:
        store = RedisKeyValueStore(FakeRedisClient())
        store.set("k", "v")
        assert store.get("k") == "v"
        assert store.get("missing") is None

    def test_delete(self) -> None:
        client = FakeRedisClient({"k": "v"})
        RedisKeyValueStore(client).delete("k")
        assert client.data == {}

    def test_scan_sorts_and_dedupes(self) -> None:
        client = FakeRedisClient({"splits:team:NYY:2025": "{}", "splits:team:BOS:2025": "{}", "other": "x"})
        keys = RedisKeyValueStore(client).scan("splits:team:*:2025")
        assert keys == ["splits:team:BOS:2025", "splits:team:NYY:2025"]
        assert client.scan_counts == [1000]

    def test_get_many_pipelines_mget(self) -> None:
        client = FakeRedisClient({"a": "1", "c": "3"})
        pairs = RedisKeyValueStore(client).get_many(["a", "b", "c"])
        assert pairs == [("a", "1"), ("c", "3")]
        assert client.pipelines_executed == 1

    def test_get_many_chunks_large_batches(self) -> None:
        data = {f"k{i}": str(i) for i in range(1100)}
        client = FakeRedisClient(data)
        pairs = RedisKeyValueStore(client).get_many(list(data))
        assert pairs == list(data.items())
        assert client.pipelines_executed == 1

    def test_get_many_empty_skips_round_trip(self) -> None:
        client = FakeRedisClient()
        assert RedisKeyValueStore(client).get_many([]) == []
        assert client.pipelines_executed == 0

    def test_set_many(self) -> None:
        client = FakeRedisClient()
        RedisKeyValueStore(client).set_many([("a", "1"), ("b", "2")])
        assert client.data == {"a": "1", "b": "2"}

    def test_connection_error_is_unavailable(self) -> None:
        store = RedisKeyValueStore(FakeRedisClient(error=redis.ConnectionError("refused")))
        with pytest.raises(StoreUnavailableError, match="Redis GET failed: refused"):
            store.get("k")

    def test_timeout_during_scan_is_unavailable(self) -> None:
        store = RedisKeyValueStore(FakeRedisClient(error=redis.TimeoutError("slow")))
        with pytest.raises(StoreUnavailableError):
            store.scan("*")

    def test_close(self) -> None:
        client = FakeRedisClient()
        RedisKeyValueStore(client).close()
        assert client.closed

    def test_from_url_uses_decoded_responses(self) -> None:
        store = RedisKeyValueStore.from_url("redis://localhost:6379/0")
        assert store._client.get_connection_kwargs()["decode_responses"] is True
