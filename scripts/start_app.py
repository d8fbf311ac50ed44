#!/usr/bin/env python3
"""Serve the invite API, reporting startup failures to Logfire."""

import sys

import logfire
import uvicorn

from nexus.config import Settings
from nexus.util.logging import setup_logging
from nexus.util.observability import configure_logfire


def main() -> int:
    """Run uvicorn with the configured host and port."""
    settings = Settings()
    setup_logging(settings)

    # Configure before the app module is imported so its spans are captured
    configure_logfire(settings)

    logfire.info("Starting invite API", host=settings.host, port=settings.port)
    try:
        uvicorn.run(
            "nexus.interface.api.app:app",
            host=settings.host,
            port=settings.port,
            log_level="debug" if settings.debug else "info",
        )
    except Exception as e:
        logfire.error(
            "Application startup failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        raise

    return 0


if __name__ == "__main__":
    sys.exit(main())
