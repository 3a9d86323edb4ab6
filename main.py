"""Main entry point for the Render tools server.

Starts the uvicorn server with configured settings.
Importing the server registers all Render tools.
"""

import uvicorn

from config import get_settings
from logging_config import get_logger, setup_logging

from server import app

logger = get_logger(__name__)


def main() -> None:
    """Start the Render tools server."""
    settings = get_settings()
    setup_logging(settings.log_level)

    logger.info(
        "Starting Render tools server",
        extra={
            "host": settings.server_host,
            "port": settings.server_port,
            "config": settings.get_safe_dict()
        }
    )
    logger.warning(
        "Licensing notice: these tools are licensed under the Business Source "
        "License 1.1; production use by for-profit organizations requires a "
        "commercial license"
    )

    uvicorn.run(
        app,
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
