"""Time-boxed single-flight data providers.

A provider wraps a slow async fetch function behind a per-key cache:

* a fresh entry is returned without touching the network;
* a stale entry is returned as-is while one background refresh runs;
* with no entry yet, callers wait on the single in-flight fetch for the key.

Concurrent callers of the same key share one fetch and observe the same
outcome. A failed fetch leaves the cache untouched, so the last good value
keeps being served and the next call simply tries again. ``get_state`` never
raises for fetch failures: it returns a :class:`ProviderResult`.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable, Hashable
from dataclasses import dataclass
from typing import Generic, TypeVar

import structlog

from tezos_gateway.cache.entry import CacheEntry, KeyState

log = structlog.get_logger("data_provider")

K = TypeVar("K", bound=Hashable)
T = TypeVar("T")

UNIT_KEY: tuple[()] = ()


@dataclass(frozen=True)
class ProviderResult(Generic[T]):
    """Either ``data`` from a successful fetch or the ``error`` that failed it."""

    data: T | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return ``data``, raising ``error`` if the result is a failure."""
        if self.error is not None:
            raise self.error
        return self.data  # type: ignore[return-value]


class DataProvider(Generic[K, T]):
    """Single-flight TTL cache over ``fetch(key)``, one state per distinct key.

    Keys must be hashable with structural equality (tuples, ``NamedTuple``s or
    frozen dataclasses of primitives). Tracked keys are never evicted.
    """

    def __init__(
        self,
        refresh_interval_s: float,
        fetch: Callable[[K], Awaitable[T]],
        *,
        name: str | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.refresh_interval_s = refresh_interval_s
        self.name = name or getattr(fetch, "__name__", type(self).__name__)
        self._fetch = fetch
        self._clock = clock
        self._states: dict[K, KeyState[T]] = {}

    async def get_state(self, key: K) -> ProviderResult[T]:
        state = self._states.get(key)
        if state is None:
            state = self._states[key] = KeyState()

        entry = state.entry
        if entry is not None:
            if state.in_flight is None and entry.is_stale(self._clock(), self.refresh_interval_s):
                log.debug("provider_refresh_started", provider=self.name, key=repr(key))
                self._start_fetch(key, state)
            return ProviderResult(data=entry.value)

        task = state.in_flight or self._start_fetch(key, state)
        # A cancelled caller must not cancel the fetch other callers share.
        return await asyncio.shield(task)

    def peek(self, key: K) -> CacheEntry[T] | None:
        """Return the cached entry for *key* without fetching."""
        state = self._states.get(key)
        return state.entry if state is not None else None

    def is_fetching(self, key: K) -> bool:
        state = self._states.get(key)
        return state is not None and state.in_flight is not None

    @property
    def tracked_keys(self) -> int:
        return len(self._states)

    async def wait_idle(self) -> None:
        """Wait until every fetch in flight right now has settled."""
        pending = [s.in_flight for s in self._states.values() if s.in_flight is not None]
        if pending:
            await asyncio.gather(*pending)

    def _start_fetch(self, key: K, state: KeyState[T]) -> asyncio.Task:
        task = asyncio.create_task(self._run_fetch(key, state))
        state.in_flight = task
        return task

    async def _run_fetch(self, key: K, state: KeyState[T]) -> ProviderResult[T]:
        try:
            value = await self._fetch(key)
            state.entry = CacheEntry(value=value, fetched_at=self._clock())
        except Exception as exc:
            log.warning(
                "provider_fetch_failed",
                provider=self.name,
                key=repr(key),
                error=str(exc),
                error_type=type(exc).__name__,
                has_stale_value=state.entry is not None,
            )
            return ProviderResult(error=exc)
        finally:
            state.in_flight = None

        log.debug("provider_fetch_succeeded", provider=self.name, key=repr(key))
        return ProviderResult(data=value)


class SingleQueryDataProvider(DataProvider[tuple[()], T]):
    """A :class:`DataProvider` over a zero-argument fetch function."""

    def __init__(
        self,
        refresh_interval_s: float,
        fetch: Callable[[], Awaitable[T]],
        *,
        name: str | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        async def fetch_unit(_key: tuple[()]) -> T:
            return await fetch()

        super().__init__(
            refresh_interval_s,
            fetch_unit,
            name=name or getattr(fetch, "__name__", None),
            clock=clock,
        )

    async def get_state(self) -> ProviderResult[T]:  # type: ignore[override]
        return await super().get_state(UNIT_KEY)

    def peek(self) -> CacheEntry[T] | None:  # type: ignore[override]
        return super().peek(UNIT_KEY)

    def is_fetching(self) -> bool:  # type: ignore[override]
        return super().is_fetching(UNIT_KEY)
