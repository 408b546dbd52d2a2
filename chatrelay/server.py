"""
Process entry point: configuration, backend and uvicorn server
"""

import logging
import sys

import uvicorn

from .api import create_app
from .config import load_settings
from .exceptions import ConfigurationError, InvalidPort
from .lifecycle import ServerHandle
from .logging_config import setup_logging

logger = logging.getLogger(__name__)


def build_server(settings, capability) -> uvicorn.Server:
    """Wire the app to a uvicorn server that /kill can stop"""
    handle = ServerHandle()
    app = create_app(capability, handle, settings.default_model)

    server = uvicorn.Server(
        uvicorn.Config(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
    )
    handle.stop_hook = lambda: setattr(server, "should_exit", True)
    return server


def main() -> None:
    setup_logging()

    try:
        settings = load_settings()
    except InvalidPort as e:
        logger.error(f"Invalid Port: {e}")
        sys.exit(1)
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    logging.getLogger().setLevel(settings.log_level)

    # Imported here so a bad configuration fails before the backend loads
    from .agent import LlamaCppCapability

    try:
        capability = LlamaCppCapability(settings.server_url, settings.models)
    except Exception as e:
        logger.error(f"Failed to initialize backend: {e}")
        logger.info("Please check your llama.cpp server configuration")
        raise

    server = build_server(settings, capability)
    logger.info(f"Starting server on {settings.host}:{settings.port}")
    server.run()
