"""JSON objects and string sets kept in the key-value store."""

from __future__ import annotations

import json
from typing import Any

from tezos_gateway.storage.store import KeyValueStore


class StoredValueNotFound(KeyError):
    """Raised by :meth:`ObjectStorage.get_by_key` for an unknown key."""


class ObjectStorage:
    """A dictionary of JSON-encoded values in one store hash."""

    def __init__(self, store: KeyValueStore, hash_key: str):
        self._store = store
        self.hash_key = hash_key

    async def get_by_key(self, key: str) -> Any:
        raw = await self._store.hget(self.hash_key, key)
        if raw is None:
            raise StoredValueNotFound(key)
        return json.loads(raw)

    async def get_all_values(self) -> dict[str, Any]:
        raw = await self._store.hgetall(self.hash_key)
        return {k: json.loads(v) for k, v in raw.items()}

    async def upsert_values(self, values: dict[str, Any]) -> None:
        await self._store.hset(self.hash_key, {k: json.dumps(v) for k, v in values.items()})

    async def remove_values(self, keys: list[str]) -> int:
        """Returns how many keys were actually removed."""
        return await self._store.hdel(self.hash_key, *keys)


class SetStorage:
    """An unordered set of strings in one store set."""

    def __init__(self, store: KeyValueStore, set_key: str):
        self._store = store
        self.set_key = set_key

    async def get_all(self) -> list[str]:
        return sorted(await self._store.smembers(self.set_key))

    async def add(self, members: list[str]) -> int:
        return await self._store.sadd(self.set_key, *members)

    async def remove(self, members: list[str]) -> int:
        return await self._store.srem(self.set_key, *members)
