from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import redis

from split_macros.exceptions import StoreUnavailableError

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

logger = logging.getLogger(__name__)

_SCAN_COUNT = 1000
_MGET_CHUNK = 500


class RedisKeyValueStore:
    """Key-value store backed by Redis.

    Args:
        client: A ``redis.Redis`` client created with ``decode_responses=True``.
    """

    def __init__(self, client: Any) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> RedisKeyValueStore:
        return cls(redis.Redis.from_url(url, decode_responses=True))

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        try:
            yield
        except (redis.ConnectionError, redis.TimeoutError) as e:
            raise StoreUnavailableError(f"Redis {operation} failed", cause=e) from e

    def get(self, key: str) -> str | None:
        with self._guard("GET"):
            return self._client.get(key)

    def set(self, key: str, value: str) -> None:
        with self._guard("SET"):
            self._client.set(key, value)

    def set_many(self, items: Sequence[tuple[str, str]]) -> None:
        with self._guard("MSET"):
            pipe = self._client.pipeline(transaction=False)
            for key, value in items:
                pipe.set(key, value)
            pipe.execute()

    def delete(self, key: str) -> None:
        with self._guard("DEL"):
            self._client.delete(key)

    def scan(self, pattern: str) -> list[str]:
        with self._guard("SCAN"):
            keys = sorted(set(self._client.scan_iter(match=pattern, count=_SCAN_COUNT)))
        logger.debug("Redis scan %s matched %d keys", pattern, len(keys))
        return keys

    def get_many(self, keys: Sequence[str]) -> list[tuple[str, str]]:
        if not keys:
            return []
        pairs: list[tuple[str, str]] = []
        with self._guard("MGET"):
            pipe = self._client.pipeline(transaction=False)
            chunks = [list(keys[start : start + _MGET_CHUNK]) for start in range(0, len(keys), _MGET_CHUNK)]
            for chunk in chunks:
                pipe.mget(chunk)
            results = pipe.execute()
        for chunk, values in zip(chunks, results, strict=True):
            pairs.extend((key, value) for key, value in zip(chunk, values, strict=True) if value is not None)
        return pairs

    def close(self) -> None:
        self._client.close()
