#!/usr/bin/env python3
"""FastAPI server runner."""

from __future__ import annotations

import uvicorn
import structlog

from tezos_gateway.api.app import create_app
from tezos_gateway.config import load_config
from tezos_gateway.logging.setup import setup_logging

logger = structlog.get_logger()


def main(config_path: str | None = None) -> None:
    """Load config, configure logging and serve the gateway."""
    config = load_config(config_path)
    setup_logging(level=config.logging.level, log_format=config.logging.format)

    logger.info("Starting gateway server", host=config.server.host, port=config.server.port)

    try:
        uvicorn.run(
            create_app(config),
            host=config.server.host,
            port=config.server.port,
            log_config=None,  # Use our structlog setup
        )
    except Exception as e:
        logger.error("Failed to start server", error=str(e))
        raise


if __name__ == "__main__":
    main()
