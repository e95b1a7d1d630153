"""
Aria backend - main entry point.

Checks the configuration, sets up logging and serves the API with uvicorn.
The process exits with status 1 when MONGODB_URI or JWT_SECRET is missing.
"""

from __future__ import annotations

import logging
import sys

import uvicorn
from pydantic import ValidationError

from aria.config import Settings, get_settings
from aria.core.errors import ConfigurationError
from aria.logging_config import setup_logging

logger = logging.getLogger(__name__)


def load_settings() -> Settings:
    """
    Load settings, refusing to continue without the required values.

    Raises:
        ConfigurationError: a required variable is missing or empty
    """
    try:
        return get_settings()
    except ValidationError as e:
        missing = ", ".join(str(err["loc"][0]).upper() for err in e.errors())
        raise ConfigurationError(f"Missing or invalid configuration: {missing}") from e


def main():
    """Main entry point."""
    setup_logging()
    try:
        settings = load_settings()
    except ConfigurationError as e:
        logger.error(str(e))
        sys.exit(1)

    setup_logging(settings.log_level)
    logger.info(f"Starting Aria backend on http://{settings.host}:{settings.port}")

    uvicorn.run(
        "aria.api.app:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_config=None,
    )


if __name__ == "__main__":
    main()
