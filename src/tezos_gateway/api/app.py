"""FastAPI application for the Tezos data gateway."""

from __future__ import annotations

import time
import uuid
from collections.abc import Awaitable
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import TypeVar

import structlog
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tezos_gateway import __version__
from tezos_gateway.api import ad_rules, notifications
from tezos_gateway.api.deps import Services, build_services, get_config, get_services
from tezos_gateway.cache import ProviderResult, get_state_with_timeout
from tezos_gateway.config.loader import load_config
from tezos_gateway.config.schema import AppConfig
from tezos_gateway.services.dapps import ContractTokensKey, DAppKey, TokensMetadataKey

logger = structlog.get_logger("web")

T = TypeVar("T")


async def read_provider(request: Request, state: Awaitable[ProviderResult[T]]):
    """Serialize a provider read: 500 with the error message, or the JSON data."""
    timeout_s = request.app.state.config.server.response_timeout_s
    services: Services = request.app.state.services
    result = await get_state_with_timeout(state, timeout_s, services.detached_reads)
    if not result.ok:
        return JSONResponse(status_code=500, content={"error": str(result.error)})
    return result.data


def create_app(config: AppConfig | None = None, services: Services | None = None) -> FastAPI:
    """Build the app. *services* are built from *config* at startup when not given."""
    config = config or load_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = app.state.services is None
        if owned:
            app.state.services = build_services(config)
        logger.info("gateway_started", version=__version__)
        yield
        if owned:
            await app.state.services.close()
        logger.info("gateway_stopped")

    app = FastAPI(
        title="Tezos Data Gateway",
        description="Cached dApps, exchange rates, notifications and ad rules",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request.headers.get("x-request-id") or uuid.uuid4().hex[:12],
        )
        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_error(_request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": _describe_validation(exc)})

    app.include_router(notifications.router)
    app.include_router(ad_rules.router)
    _add_provider_routes(app)
    return app


def _describe_validation(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts)


def _add_provider_routes(app: FastAPI) -> None:
    @app.get("/api/health")
    async def health_check():
        return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

    @app.get("/api/mobile-check")
    async def mobile_check(config: AppConfig = Depends(get_config)):
        return {
            "minIosVersion": config.app_versions.min_ios,
            "minAndroidVersion": config.app_versions.min_android,
        }

    @app.get("/api/dapps")
    async def list_dapps(request: Request, services: Services = Depends(get_services)):
        return await read_provider(request, services.dapps.dapps.get_state())

    @app.get("/api/dapps/{slug}")
    async def dapp_details(slug: str, request: Request, services: Services = Depends(get_services)):
        return await read_provider(request, services.dapps.dapp_details.get_state(DAppKey(slug)))

    @app.get("/api/tokens/{network}/metadata")
    async def tokens_metadata(
        network: str,
        request: Request,
        contract: str | None = None,
        token_id: str | None = None,
        services: Services = Depends(get_services),
    ):
        key = TokensMetadataKey(network, contract, token_id)
        return await read_provider(request, services.dapps.tokens_metadata.get_state(key))

    @app.get("/api/contract/{network}/{address}/tokens")
    async def contract_tokens(
        network: str,
        address: str,
        request: Request,
        token_id: str | None = None,
        size: int | None = None,
        offset: int | None = None,
        services: Services = Depends(get_services),
    ):
        key = ContractTokensKey(network, address, token_id, size, offset)
        return await read_provider(request, services.dapps.contract_tokens.get_state(key))

    @app.get("/api/exchange-rates/tez")
    async def tez_exchange_rate(request: Request, services: Services = Depends(get_services)):
        return await read_provider(request, services.exchange_rates.tez_rate.get_state())

    @app.get("/api/exchange-rates")
    async def exchange_rates(request: Request, services: Services = Depends(get_services)):
        timeout_s = request.app.state.config.server.response_timeout_s
        rates = services.exchange_rates
        detached = services.detached_reads
        tokens = await get_state_with_timeout(rates.token_rates.get_state(), timeout_s, detached)
        tez = await get_state_with_timeout(rates.tez_rate.get_state(), timeout_s, detached)
        error = tokens.error or tez.error
        if error is not None:
            return JSONResponse(status_code=500, content={"error": str(error)})
        return [
            *({k: v for k, v in item.items() if k != "metadata"} for item in tokens.data),
            {"exchangeRate": str(tez.data)},
        ]
