"""Tez/USD price from a CoinGecko-style simple-price endpoint."""

from __future__ import annotations

from typing import Any

from tezos_gateway.upstream.base import JsonApiClient


class TezPriceClient(JsonApiClient):
    def __init__(self, base_url: str = "https://api.coingecko.com/api/v3/simple/price", **kwargs: Any):
        super().__init__(base_url, **kwargs)

    async def get_tez_usd_price(self) -> float:
        """Raises ``ValueError`` when the response carries no tezos price."""
        body = await self._get_json("", params={"ids": "tezos", "vs_currencies": "usd"})
        return self.parse_price(body)

    @staticmethod
    def parse_price(body: Any) -> float:
        try:
            price = float(body["tezos"]["usd"])
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"Unexpected tez price response: {body!r}") from exc
        if price <= 0:
            raise ValueError(f"Non-positive tez price: {price}")
        return price
