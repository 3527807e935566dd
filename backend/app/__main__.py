"""
Postboard Backend: Process Entry Point
=======================================

Usage:
    python -m app        (or the `postboard` console script)

Configuration is validated before anything else is imported or started.
A ConfigurationError logs every problem and exits with status 1, so the
server never reaches a listening state. Ctrl+C shuts uvicorn down, which
runs the lifespan shutdown (engine disposal) and exits 0.
"""

import logging
import sys

import uvicorn

from app.config import get_settings
from app.exceptions import ConfigurationError

logger = logging.getLogger("postboard")


def main() -> None:
    try:
        settings = get_settings()
    except ConfigurationError as exc:
        logging.basicConfig(level=logging.ERROR, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        logger.error(exc.message)
        logger.error("Fix the configuration and restart the server.")
        sys.exit(1)

    from app.main import create_app

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        # uvicorn adds "server: uvicorn" below the middleware chain
        server_header=False,
    )


if __name__ == "__main__":
    main()
