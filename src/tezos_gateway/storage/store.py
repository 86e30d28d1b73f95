"""Key-value store used for notifications and ad rules.

Only the handful of list/hash/set commands the gateway needs are exposed, so
the rest of the code depends on :class:`KeyValueStore` and not on Redis.
"""

from __future__ import annotations

from typing import Protocol

import redis.asyncio as redis
import structlog

log = structlog.get_logger("store")


class KeyValueStore(Protocol):
    async def lrange(self, key: str, start: int, end: int) -> list[str]: ...
    async def rpush(self, key: str, *values: str) -> int: ...
    async def lrem(self, key: str, count: int, value: str) -> int: ...
    async def hget(self, key: str, field: str) -> str | None: ...
    async def hgetall(self, key: str) -> dict[str, str]: ...
    async def hset(self, key: str, mapping: dict[str, str]) -> int: ...
    async def hdel(self, key: str, *fields: str) -> int: ...
    async def smembers(self, key: str) -> set[str]: ...
    async def sadd(self, key: str, *members: str) -> int: ...
    async def srem(self, key: str, *members: str) -> int: ...


class RedisStore:
    """:class:`KeyValueStore` on ``redis.asyncio`` with string responses."""

    def __init__(self, client: redis.Redis):
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> RedisStore:
        return cls(redis.from_url(url, decode_responses=True))

    async def close(self) -> None:
        await self._client.aclose()

    async def ping(self) -> bool:
        return await self._client.ping()

    async def lrange(self, key: str, start: int, end: int) -> list[str]:
        return await self._client.lrange(key, start, end)

    async def rpush(self, key: str, *values: str) -> int:
        return await self._client.rpush(key, *values)

    async def lrem(self, key: str, count: int, value: str) -> int:
        return await self._client.lrem(key, count, value)

    async def hget(self, key: str, field: str) -> str | None:
        return await self._client.hget(key, field)

    async def hgetall(self, key: str) -> dict[str, str]:
        return await self._client.hgetall(key)

    async def hset(self, key: str, mapping: dict[str, str]) -> int:
        if not mapping:
            return 0
        return await self._client.hset(key, mapping=mapping)

    async def hdel(self, key: str, *fields: str) -> int:
        if not fields:
            return 0
        return await self._client.hdel(key, *fields)

    async def smembers(self, key: str) -> set[str]:
        return await self._client.smembers(key)

    async def sadd(self, key: str, *members: str) -> int:
        if not members:
            return 0
        return await self._client.sadd(key, *members)

    async def srem(self, key: str, *members: str) -> int:
        if not members:
            return 0
        return await self._client.srem(key, *members)
