"""3Route swap-routing API client."""

from __future__ import annotations

from enum import Enum
from typing import Any

from tezos_gateway.upstream.base import JsonApiClient


class TokenStandard(str, Enum):
    XTZ = "xtz"
    FA12 = "fa12"
    FA2 = "fa2"


class ThreeRouteClient(JsonApiClient):
    """Async client for 3Route. Every request carries the Basic auth token."""

    def __init__(self, base_url: str, auth_token: str = "", **kwargs: Any):
        headers = {"Authorization": f"Basic {auth_token}"} if auth_token else {}
        super().__init__(base_url, headers=headers, **kwargs)

    async def get_tokens(self) -> list[dict]:
        """Tokens known to the router.

        Each has id, symbol, standard (xtz/fa12/fa2), contract, tokenId and
        decimals; ``contract`` and ``tokenId`` are null for tez.
        """
        return await self._get_json("/tokens")

    async def get_exchange_rates(self) -> dict[str, dict[str, float]]:
        """Prices in tez keyed by token symbol: ``{"USDt": {"ask": .., "bid": ..}}``."""
        return await self._get_json("/prices")
