"""Tez and token USD exchange rates."""

from __future__ import annotations

import asyncio
from typing import Any

import structlog

from tezos_gateway.cache import SingleQueryDataProvider
from tezos_gateway.upstream.three_route import ThreeRouteClient, TokenStandard
from tezos_gateway.upstream.tez_price import TezPriceClient

log = structlog.get_logger("exchange_rates")


def compute_token_exchange_rates(
    tokens: list[dict],
    prices: dict[str, dict[str, Any]],
    tez_usd: float,
) -> list[dict]:
    """USD rate per token from 3Route tez prices.

    The tez price of a token is the ask/bid midpoint. Tez itself and tokens
    without a usable price are left out.
    """
    rates: list[dict] = []
    for token in tokens:
        if token.get("standard") == TokenStandard.XTZ.value:
            continue
        price = prices.get(token.get("symbol", ""))
        if not price:
            continue
        try:
            mid = (float(price["ask"]) + float(price["bid"])) / 2
        except (KeyError, TypeError, ValueError):
            log.warning("token_price_malformed", symbol=token.get("symbol"), price=price)
            continue
        if mid <= 0:
            continue

        item: dict[str, Any] = {
            "tokenAddress": token.get("contract"),
            "exchangeRate": str(mid * tez_usd),
            "metadata": {"symbol": token.get("symbol"), "decimals": token.get("decimals")},
        }
        if token.get("standard") == TokenStandard.FA2.value:
            item["tokenId"] = str(token.get("tokenId") or 0)
        rates.append(item)
    return rates


class ExchangeRatesService:
    def __init__(
        self,
        three_route: ThreeRouteClient,
        tez_price: TezPriceClient,
        refresh_interval_s: float = 5 * 60,
    ):
        self._three_route = three_route
        self.tez_rate = SingleQueryDataProvider(
            refresh_interval_s, tez_price.get_tez_usd_price, name="tez_exchange_rate",
        )
        self.token_rates = SingleQueryDataProvider(
            refresh_interval_s, self._fetch_token_rates, name="tokens_exchange_rates",
        )

    async def _fetch_token_rates(self) -> list[dict]:
        tokens, prices = await asyncio.gather(
            self._three_route.get_tokens(),
            self._three_route.get_exchange_rates(),
        )
        tez_usd = (await self.tez_rate.get_state()).unwrap()
        return compute_token_exchange_rates(tokens, prices, tez_usd)
