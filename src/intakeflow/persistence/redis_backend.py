"""Redis cache backend implementing ICacheBackend."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import redis

from intakeflow.core.config import RedisConfig
from intakeflow.core.exceptions import CacheError


class RedisCacheBackend:
    """Production ICacheBackend backed by Redis.

    Holds persisted wizard state and the cached application views that are
    evicted after every sync pass.
    """

    def __init__(self, host: str = "localhost", port: int = 6379, db: int = 0,
                 client: redis.Redis | None = None) -> None:
        self._host = host
        self._port = port
        self._db = db
        self._client = client if client is not None else redis.Redis(
            host=host, port=port, db=db, decode_responses=True,
        )

    @classmethod
    def from_config(cls, config: RedisConfig) -> RedisCacheBackend:
        client = redis.Redis(
            host=config.host, port=config.port, db=config.db,
            decode_responses=config.decode_responses,
        )
        return cls(host=config.host, port=config.port, db=config.db, client=client)

    def _op(self, name: str, key: str, fn: Callable[[str], Any]) -> Any:
        try:
            return fn(key)
        except Exception as exc:
            raise CacheError(f"Redis {name} failed for key={key!r}: {exc}") from exc

    def get(self, key: str) -> str | None:
        value = self._op("GET", key, lambda k: self._client.get(k))
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def setex(self, key: str, ttl: int, value: str) -> None:
        self._op("SETEX", key, lambda k: self._client.setex(k, ttl, value))

    def delete(self, key: str) -> None:
        self._op("DELETE", key, lambda k: self._client.delete(k))
