"""Cached values and the per-key provider state."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """The last successfully fetched value for one key."""

    value: T
    fetched_at: float  # clock() of the provider, seconds

    def age(self, now: float) -> float:
        return now - self.fetched_at

    def is_stale(self, now: float, refresh_interval_s: float) -> bool:
        return self.age(now) >= refresh_interval_s


@dataclass
class KeyState(Generic[T]):
    """Cache entry and in-flight fetch of a single provider key.

    ``entry`` is only ever replaced as a whole; ``in_flight`` is set while a
    fetch is outstanding and cleared once it settles, success or not.
    """

    entry: CacheEntry[T] | None = None
    in_flight: asyncio.Task | None = None
