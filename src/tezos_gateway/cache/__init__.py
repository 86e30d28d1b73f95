"""Single-flight TTL data providers."""

from tezos_gateway.cache.entry import CacheEntry, KeyState
from tezos_gateway.cache.provider import (
    DataProvider,
    ProviderResult,
    SingleQueryDataProvider,
)
from tezos_gateway.cache.timeout import ResponseTimeoutError, get_state_with_timeout

__all__ = [
    "CacheEntry",
    "DataProvider",
    "KeyState",
    "ProviderResult",
    "ResponseTimeoutError",
    "SingleQueryDataProvider",
    "get_state_with_timeout",
]
