"""Configuration schema: Pydantic models for config.yaml."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 3000
    # Deadline for a single provider read inside a request handler
    response_timeout_s: float = 30.0


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "json"


class UpstreamConfig(BaseModel):
    bcd_base_url: str = "https://api.better-call.dev/v1"
    bcd_dapps_url: str = "https://better-call.dev/v1/dapps"
    three_route_api_url: str = "https://api.3route.io"
    three_route_auth_token: str = ""
    tez_price_url: str = "https://api.coingecko.com/api/v3/simple/price"
    http_timeout_s: float = 15.0
    attempts: int = 5


class CacheConfig(BaseModel):
    """Refresh intervals (seconds) of the data providers."""

    dapps_s: float = 15 * 60
    dapp_details_s: float = 14 * 60
    tokens_metadata_s: float = 24 * 3600
    contract_tokens_s: float = 24 * 3600
    exchange_rates_s: float = 5 * 60


class RedisConfig(BaseModel):
    url: str = "redis://localhost:6379/0"


class AdminConfig(BaseModel):
    username: str = "admin"
    password: str = ""


class AppVersionsConfig(BaseModel):
    min_ios: str = "1.20.1027"
    min_android: str = "1.20.1027"


class AppConfig(BaseModel):
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    upstream: UpstreamConfig = Field(default_factory=UpstreamConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    redis: RedisConfig = Field(default_factory=RedisConfig)
    admin: AdminConfig = Field(default_factory=AdminConfig)
    app_versions: AppVersionsConfig = Field(default_factory=AppVersionsConfig)
    # dApps served in addition to the Better Call Dev catalogue
    custom_dapps: list[dict] = Field(default_factory=list)
