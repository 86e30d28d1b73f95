"""Application services and the FastAPI dependencies that hand them out."""

from __future__ import annotations

import asyncio
import secrets
from dataclasses import dataclass, field

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from tezos_gateway.config.schema import AppConfig
from tezos_gateway.services.dapps import DAppsService
from tezos_gateway.services.exchange_rates import ExchangeRatesService
from tezos_gateway.storage.objects import ObjectStorage, SetStorage
from tezos_gateway.storage.store import KeyValueStore, RedisStore
from tezos_gateway.upstream.base import JsonApiClient
from tezos_gateway.upstream.better_call_dev import BetterCallDevClient
from tezos_gateway.upstream.tez_price import TezPriceClient
from tezos_gateway.upstream.three_route import ThreeRouteClient

AD_PROVIDERS_KEY = "ad_providers"
AD_PROVIDERS_ALL_SITES_KEY = "ad_providers_for_all_sites"


@dataclass
class Services:
    """Everything route handlers need, built once per application."""

    dapps: DAppsService
    exchange_rates: ExchangeRatesService
    store: KeyValueStore
    ad_providers: ObjectStorage
    ad_providers_all_sites: SetStorage
    clients: list[JsonApiClient] = field(default_factory=list)
    # Provider reads that outlived their request deadline
    detached_reads: set[asyncio.Future] = field(default_factory=set)

    async def close(self) -> None:
        for client in self.clients:
            await client.close()
        if isinstance(self.store, RedisStore):
            await self.store.close()


def build_services(config: AppConfig, store: KeyValueStore | None = None) -> Services:
    up = config.upstream
    http_kwargs = {"timeout_s": up.http_timeout_s, "attempts": up.attempts}
    bcd = BetterCallDevClient(up.bcd_base_url, up.bcd_dapps_url, **http_kwargs)
    three_route = ThreeRouteClient(up.three_route_api_url, up.three_route_auth_token, **http_kwargs)
    tez_price = TezPriceClient(up.tez_price_url, **http_kwargs)
    if store is None:
        store = RedisStore.from_url(config.redis.url)

    return Services(
        dapps=DAppsService(bcd, config.cache, config.custom_dapps),
        exchange_rates=ExchangeRatesService(three_route, tez_price, config.cache.exchange_rates_s),
        store=store,
        ad_providers=ObjectStorage(store, AD_PROVIDERS_KEY),
        ad_providers_all_sites=SetStorage(store, AD_PROVIDERS_ALL_SITES_KEY),
        clients=[bcd, three_route, tez_price],
    )


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_config(request: Request) -> AppConfig:
    return request.app.state.config


_basic = HTTPBasic()


def require_admin(
    credentials: HTTPBasicCredentials = Depends(_basic),
    config: AppConfig = Depends(get_config),
) -> str:
    """Basic-auth guard for write endpoints."""
    admin = config.admin
    user_ok = secrets.compare_digest(credentials.username.encode(), admin.username.encode())
    password_ok = secrets.compare_digest(credentials.password.encode(), admin.password.encode())
    # An unset admin password disables writes entirely.
    if not (user_ok and password_ok and admin.password):
        raise HTTPException(
            status_code=401,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )
    return credentials.username
