"""Configuration system."""

from tezos_gateway.config.loader import load_config
from tezos_gateway.config.schema import AppConfig

__all__ = ["AppConfig", "load_config"]
