"""Tests for the single-flight TTL data providers."""

from __future__ import annotations

import asyncio
from typing import NamedTuple

import pytest

from tezos_gateway.cache import (
    CacheEntry,
    DataProvider,
    ProviderResult,
    SingleQueryDataProvider,
)

TTL = 60.0


class AccountKey(NamedTuple):
    network: str
    address: str


@pytest.fixture
def provider(fetch, clock):
    return SingleQueryDataProvider(TTL, fetch, name="test", clock=clock)


class TestProviderResult:
    def test_ok(self):
        result = ProviderResult(data=[1, 2])
        assert result.ok
        assert result.unwrap() == [1, 2]

    def test_error(self):
        err = RuntimeError("boom")
        result = ProviderResult(error=err)
        assert not result.ok
        with pytest.raises(RuntimeError, match="boom"):
            result.unwrap()


class TestCacheEntry:
    def test_fresh_until_interval_elapses(self):
        entry = CacheEntry(value="v", fetched_at=100.0)
        assert not entry.is_stale(159.9, TTL)
        assert entry.is_stale(160.0, TTL)
        assert entry.age(130.0) == 30.0


class TestSingleQueryDataProvider:
    @pytest.mark.asyncio
    async def test_first_call_fetches(self, provider, fetch):
        result = await provider.get_state()
        assert result.data == "value-1"
        assert result.error is None
        assert fetch.calls == [()]

    @pytest.mark.asyncio
    async def test_second_call_within_ttl_uses_cache(self, provider, fetch, clock):
        first = await provider.get_state()
        clock.advance(TTL - 1)
        second = await provider.get_state()
        assert second.data == first.data
        assert len(fetch.calls) == 1

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_fetch(self, provider, fetch):
        fetch.gate = asyncio.Event()
        tasks = [asyncio.create_task(provider.get_state()) for _ in range(10)]
        await asyncio.sleep(0)
        assert provider.is_fetching()

        fetch.gate.set()
        results = await asyncio.gather(*tasks)

        assert len(fetch.calls) == 1
        assert {r.data for r in results} == {"value-1"}
        assert not provider.is_fetching()

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_failure(self, provider, fetch):
        fetch.gate = asyncio.Event()
        fetch.fail_with = ConnectionError("upstream down")
        tasks = [asyncio.create_task(provider.get_state()) for _ in range(5)]
        await asyncio.sleep(0)
        fetch.gate.set()
        results = await asyncio.gather(*tasks)

        assert len(fetch.calls) == 1
        assert all(r.error is fetch.fail_with for r in results)
        assert provider.peek() is None

    @pytest.mark.asyncio
    async def test_failure_is_not_cached(self, provider, fetch):
        fetch.fail_with = ConnectionError("upstream down")
        failed = await provider.get_state()
        assert isinstance(failed.error, ConnectionError)
        assert not provider.is_fetching()

        fetch.fail_with = None
        recovered = await provider.get_state()
        assert recovered.data == "value-1"
        assert len(fetch.calls) == 2

        # back to normal caching
        again = await provider.get_state()
        assert again.data == "value-1"
        assert len(fetch.calls) == 2

    @pytest.mark.asyncio
    async def test_stale_value_served_while_refreshing(self, provider, fetch, clock):
        await provider.get_state()
        clock.advance(TTL)
        fetch.gate = asyncio.Event()

        stale = await provider.get_state()
        assert stale.data == "value-1"
        assert provider.is_fetching()

        # A second stale read must not start another refresh.
        still_stale = await provider.get_state()
        assert still_stale.data == "value-1"
        await asyncio.sleep(0)
        assert len(fetch.calls) == 2

        fetch.gate.set()
        await provider.wait_idle()
        refreshed = await provider.get_state()
        assert refreshed.data == "value-2"
        assert provider.peek().fetched_at == clock.now

    @pytest.mark.asyncio
    async def test_failed_refresh_keeps_stale_value(self, provider, fetch, clock):
        await provider.get_state()
        clock.advance(TTL * 10)
        fetch.fail_with = TimeoutError("slow upstream")

        assert (await provider.get_state()).data == "value-1"
        await provider.wait_idle()
        assert provider.peek().value == "value-1"

        # The next stale read tries again instead of remembering the failure.
        assert (await provider.get_state()).data == "value-1"
        await provider.wait_idle()
        assert len(fetch.calls) == 3

        fetch.fail_with = None
        await provider.get_state()
        await provider.wait_idle()
        assert (await provider.get_state()).data == "value-2"

    @pytest.mark.asyncio
    async def test_cancelled_caller_does_not_cancel_fetch(self, provider, fetch):
        fetch.gate = asyncio.Event()
        caller = asyncio.create_task(provider.get_state())
        await asyncio.sleep(0)
        caller.cancel()
        with pytest.raises(asyncio.CancelledError):
            await caller

        fetch.gate.set()
        await provider.wait_idle()
        assert provider.peek().value == "value-1"

    def test_name_defaults_to_fetch_name(self, clock):
        async def get_dapps():
            return []

        assert SingleQueryDataProvider(TTL, get_dapps, clock=clock).name == "get_dapps"


class TestDataProvider:
    @pytest.fixture
    def keyed(self, fetch, clock):
        return DataProvider(TTL, fetch, name="keyed", clock=clock)

    @pytest.mark.asyncio
    async def test_fetch_receives_key(self, keyed, fetch):
        key = AccountKey("mainnet", "KT1abc")
        await keyed.get_state(key)
        assert fetch.calls == [(key,)]

    @pytest.mark.asyncio
    async def test_keys_are_cached_independently(self, keyed, fetch, clock):
        a = await keyed.get_state(AccountKey("mainnet", "KT1a"))
        b = await keyed.get_state(AccountKey("mainnet", "KT1b"))
        assert a.data != b.data
        assert len(fetch.calls) == 2
        assert keyed.tracked_keys == 2

        clock.advance(1)
        assert (await keyed.get_state(AccountKey("mainnet", "KT1a"))).data == a.data
        assert len(fetch.calls) == 2

    @pytest.mark.asyncio
    async def test_equal_keys_share_state(self, keyed, fetch):
        fetch.gate = asyncio.Event()
        tasks = [
            asyncio.create_task(keyed.get_state(AccountKey("mainnet", "KT1a"))),
            asyncio.create_task(keyed.get_state(AccountKey("mainnet", "KT1a"))),
            asyncio.create_task(keyed.get_state(AccountKey("ghostnet", "KT1a"))),
        ]
        await asyncio.sleep(0)
        assert keyed.is_fetching(AccountKey("mainnet", "KT1a"))
        assert keyed.is_fetching(AccountKey("ghostnet", "KT1a"))

        fetch.gate.set()
        first, second, other = await asyncio.gather(*tasks)
        assert first.data == second.data
        assert other.data != first.data
        assert len(fetch.calls) == 2

    @pytest.mark.asyncio
    async def test_failure_of_one_key_does_not_affect_another(self, keyed, fetch):
        await keyed.get_state(AccountKey("mainnet", "KT1a"))
        fetch.fail_with = ValueError("bad address")
        failed = await keyed.get_state(AccountKey("mainnet", "bad"))
        assert isinstance(failed.error, ValueError)
        assert (await keyed.get_state(AccountKey("mainnet", "KT1a"))).data == "value-1"

    @pytest.mark.asyncio
    async def test_stale_refresh_is_per_key(self, keyed, fetch, clock):
        await keyed.get_state(AccountKey("mainnet", "KT1a"))
        clock.advance(TTL / 2)
        await keyed.get_state(AccountKey("mainnet", "KT1b"))
        clock.advance(TTL / 2)

        await keyed.get_state(AccountKey("mainnet", "KT1a"))
        await keyed.get_state(AccountKey("mainnet", "KT1b"))
        await keyed.wait_idle()

        # only KT1a was past its refresh interval
        assert fetch.calls.count((AccountKey("mainnet", "KT1a"),)) == 2
        assert fetch.calls.count((AccountKey("mainnet", "KT1b"),)) == 1

    def test_peek_unknown_key(self, keyed):
        assert keyed.peek(AccountKey("mainnet", "nope")) is None
        assert not keyed.is_fetching(AccountKey("mainnet", "nope"))
