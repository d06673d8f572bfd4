"""
Four fours HTTP server.

Environment variables:
    FOURFOURS_APP_HOST - Host to bind to (default: 0.0.0.0)
    FOURFOURS_APP_PORT - Port to listen on (default: 8099)
    FOURFOURS_LOG_LEVEL - Log level (debug, info, warning, error)

Usage:
    python -m fourfours.server
"""

from __future__ import annotations

import logging
import os

import uvicorn
from fastapi import FastAPI

from fourfours.fastapi_router import create_fourfours_router

ENV_VAR_LOG_LEVEL = "FOURFOURS_LOG_LEVEL"
ENV_VAR_APP_HOST = "FOURFOURS_APP_HOST"
ENV_VAR_APP_PORT = "FOURFOURS_APP_PORT"

logger = logging.getLogger(__name__)


def enable_logging(log_level: str = "warning") -> None:
    """Configures root logging at the given level name."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app() -> FastAPI:
    """Create and return a FastAPI application for the four fours service."""
    app = FastAPI(
        title="Four Fours",
        description="Evaluates and formats four fours puzzle expressions",
    )
    app.include_router(create_fourfours_router())
    return app


def main():
    """Main entry point for the four fours server."""
    enable_logging(log_level=os.getenv(ENV_VAR_LOG_LEVEL, "warning"))
    app = create_app()
    host = os.getenv(ENV_VAR_APP_HOST, "0.0.0.0")
    port = int(os.getenv(ENV_VAR_APP_PORT, "8099"))

    logger.info("fourfours_server_starting", extra={"host": host, "port": port})
    uvicorn.run(app, host=host, port=port, log_level="info")


if __name__ == "__main__":
    main()
