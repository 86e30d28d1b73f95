"""Key-value storage for notifications and ad rules."""

from tezos_gateway.storage.objects import ObjectStorage, SetStorage, StoredValueNotFound
from tezos_gateway.storage.store import KeyValueStore, RedisStore

__all__ = ["KeyValueStore", "ObjectStorage", "RedisStore", "SetStorage", "StoredValueNotFound"]
