"""Config loader: reads YAML, applies GATEWAY_* env var overrides."""

from __future__ import annotations

import os
from pathlib import Path

import yaml

from tezos_gateway.config.schema import AppConfig

# env var -> (section, field)
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "GATEWAY_LOG_LEVEL": ("logging", "level"),
    "GATEWAY_LOG_FORMAT": ("logging", "format"),
    "GATEWAY_REDIS_URL": ("redis", "url"),
    "GATEWAY_THREE_ROUTE_API_URL": ("upstream", "three_route_api_url"),
    "GATEWAY_THREE_ROUTE_API_AUTH_TOKEN": ("upstream", "three_route_auth_token"),
    "GATEWAY_ADMIN_USERNAME": ("admin", "username"),
    "GATEWAY_ADMIN_PASSWORD": ("admin", "password"),
    "GATEWAY_PORT": ("server", "port"),
}


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from a YAML file, then apply env var overrides.

    If *path* is None or the file doesn't exist, defaults are used. Every
    variable in ``ENV_OVERRIDES`` that is set and non-empty replaces the
    matching field, so secrets never need to live in the YAML file.
    """
    data: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            with open(p) as f:
                data = yaml.safe_load(f) or {}

    for env_name, (section, field) in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            data.setdefault(section, {})[field] = value

    return AppConfig.model_validate(data)
