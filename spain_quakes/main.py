"""Application Entry Point.

This module configures logging, loads configuration and builds the web
app. Run it directly to serve the table locally with uvicorn.
"""

import logging
import os

import uvicorn
from fastapi import FastAPI

from spain_quakes.api import create_app
from spain_quakes.shell.config_loader import load_config


# Configure logging
log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def build_app() -> FastAPI:
    """Load configuration and create the app."""
    config = load_config()
    logging.getLogger().setLevel(getattr(logging, config.log_level, logging.INFO))
    return create_app(config)


def run() -> None:
    """Serve the app with uvicorn."""
    config = load_config()
    logger.info("Serving earthquake table on http://%s:%d", config.host, config.port)
    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    run()
