"""Main entry point for running the Employee API with Uvicorn."""

import os
import socket
import sys

import uvicorn
from loguru import logger

from employee_api.api.main import app
from employee_api.core.config import get_settings
from employee_api.core.logging import setup_logging

# Route Uvicorn's own loggers through Loguru
UVICORN_LOG_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {
        "default": {
            "class": "employee_api.core.logging.InterceptHandler",
        },
    },
    "loggers": {
        "uvicorn": {"handlers": ["default"], "level": "INFO", "propagate": False},
        "uvicorn.error": {
            "handlers": ["default"],
            "level": "INFO",
            "propagate": False,
        },
        "uvicorn.access": {
            "handlers": ["default"],
            "level": "WARNING",
            "propagate": False,
        },
    },
}


def bind_listener(host: str, port: int) -> socket.socket:
    """Bind a TCP socket for the server to listen on.

    Args:
        host: Interface to bind.
        port: Port to bind.

    Returns:
        socket.socket: The bound socket, ready to be handed to Uvicorn.

    Raises:
        OSError: If the address cannot be bound (port in use, no privilege).
    """
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
    except OSError:
        sock.close()
        raise
    sock.set_inheritable(True)
    return sock


def main() -> None:
    """Start the server; exit with status 1 if the port cannot be bound."""
    settings = get_settings()

    setup_logging(settings)

    # Container platforms may inject the port to listen on
    port = int(os.environ.get("PORT", settings.api_port))

    try:
        sock = bind_listener(settings.api_host, port)
    except OSError as e:
        logger.critical(
            "Failed to start server: {}", e, host=settings.api_host, port=port
        )
        sys.exit(1)

    logger.info(
        "Starting Uvicorn on http://{}:{} ({} mode)",
        settings.api_host,
        port,
        settings.environment,
    )

    config = uvicorn.Config(
        app,
        log_config=UVICORN_LOG_CONFIG,
        timeout_keep_alive=settings.keep_alive_timeout,
    )
    uvicorn.Server(config).run(sockets=[sock])


if __name__ == "__main__":
    main()
