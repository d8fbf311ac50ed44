#!/usr/bin/env python3
"""Apply database migrations, reporting failures to Logfire."""

import sys

import logfire
from alembic import command
from alembic.config import Config

from nexus.config import Settings
from nexus.util.logging import setup_logging
from nexus.util.observability import configure_logfire


def main() -> int:
    """Upgrade the schema to head."""
    settings = Settings()
    setup_logging(settings)
    configure_logfire(settings)

    with logfire.span("migrations.upgrade", database=settings.database_url):
        try:
            command.upgrade(Config("alembic.ini"), "head")
        except Exception as e:
            logfire.error(
                "Database migration failed",
                error=str(e),
                error_type=type(e).__name__,
                _exc_info=sys.exc_info(),
            )
            # Fail the deploy rather than serve on a broken schema
            raise

    logfire.info("Database migrations applied")
    return 0


if __name__ == "__main__":
    sys.exit(main())
