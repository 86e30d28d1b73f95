"""dApps catalogue: Better Call Dev data behind cached providers.

Details of a single dApp are enriched with ``estimatedUsersPerMonth``,
derived from the monthly users series of its mainnet contracts.
"""

from __future__ import annotations

from typing import Any, NamedTuple, Sequence

import structlog

from tezos_gateway.cache import DataProvider, SingleQueryDataProvider
from tezos_gateway.config.schema import CacheConfig
from tezos_gateway.metrics.users import estimate_monthly_users
from tezos_gateway.upstream.better_call_dev import BetterCallDevClient

log = structlog.get_logger("dapps")


class DAppKey(NamedTuple):
    slug: str


class TokensMetadataKey(NamedTuple):
    network: str
    contract: str | None = None
    token_id: str | None = None


class ContractTokensKey(NamedTuple):
    network: str
    address: str
    token_id: str | None = None
    size: int | None = None
    offset: int | None = None


def merge_dapps(upstream: Sequence[dict], custom: Sequence[dict]) -> list[dict]:
    """Upstream dApps deduplicated by slug (first wins), then custom dApps not listed upstream."""
    seen: set[str] = set()
    merged: list[dict] = []
    for dapp in upstream:
        slug = dapp.get("slug")
        if slug in seen:
            continue
        seen.add(slug)
        merged.append(dapp)
    merged.extend(d for d in custom if d.get("slug") not in seen)
    return merged


def mainnet_addresses(details: dict) -> list[str]:
    return [
        c["address"]
        for c in details.get("contracts") or []
        if c.get("network") == "mainnet" and c.get("address")
    ]


class DAppsService:
    """Owns the dApps-related providers; one instance per application."""

    def __init__(
        self,
        bcd: BetterCallDevClient,
        cache: CacheConfig | None = None,
        custom_dapps: Sequence[dict] = (),
    ):
        cache = cache or CacheConfig()
        self._bcd = bcd
        self._custom = list(custom_dapps)

        self.dapps = SingleQueryDataProvider(cache.dapps_s, self._fetch_dapps, name="dapps")
        self.dapp_details = DataProvider(cache.dapp_details_s, self._fetch_dapp_details, name="dapp_details")
        self.tokens_metadata = DataProvider(
            cache.tokens_metadata_s, self._fetch_tokens_metadata, name="tokens_metadata",
        )
        self.contract_tokens = DataProvider(
            cache.contract_tokens_s, self._fetch_contract_tokens, name="contract_tokens",
        )

    async def _fetch_dapps(self) -> list[dict]:
        upstream = await self._bcd.get_dapps()
        dapps = merge_dapps(upstream, self._custom)
        log.info("dapps_fetched", upstream=len(upstream), total=len(dapps))
        return dapps

    async def _fetch_dapp_details(self, key: DAppKey) -> dict[str, Any]:
        custom = next((d for d in self._custom if d.get("slug") == key.slug), None)
        details = custom if custom is not None else await self._bcd.get_dapp_details(key.slug)

        addresses = mainnet_addresses(details)
        if not addresses:
            return {**details, "estimatedUsersPerMonth": 0}

        series = await self._bcd.get_series(addresses, period="month", name="users")
        return {**details, "estimatedUsersPerMonth": estimate_monthly_users(series)}

    async def _fetch_tokens_metadata(self, key: TokensMetadataKey) -> list[dict]:
        return await self._bcd.get_tokens_metadata(key.network, contract=key.contract, token_id=key.token_id)

    async def _fetch_contract_tokens(self, key: ContractTokensKey) -> list[dict]:
        return await self._bcd.get_contract_tokens(
            key.network, key.address, token_id=key.token_id, size=key.size, offset=key.offset,
        )
