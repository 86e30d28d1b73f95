"""Upstream API clients."""

from tezos_gateway.upstream.better_call_dev import BetterCallDevClient
from tezos_gateway.upstream.tez_price import TezPriceClient
from tezos_gateway.upstream.three_route import ThreeRouteClient

__all__ = ["BetterCallDevClient", "TezPriceClient", "ThreeRouteClient"]
