"""Structured logging."""

from tezos_gateway.logging.setup import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
