"""FastAPI application."""

from dishka import AsyncContainer
from fastapi import FastAPI

from nexus.interface.api.routes import health, invites
from nexus.interface.error import register_error_handlers
from nexus.util.di.container import create_container, setup_di
from nexus.util.observability import instrument_fastapi


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.

    Args:
        container: DI container to use; defaults to the production container
    """
    app_instance = FastAPI(
        title="Nexus Invites API",
        description="Invite issuance and redemption for invite-only registration",
        version="0.1.0",
    )

    # Instrument FastAPI for automatic tracing of HTTP requests
    instrument_fastapi(app_instance)

    setup_di(app_instance, container or create_container())

    app_instance.include_router(health.router)
    app_instance.include_router(invites.router)

    register_error_handlers(app_instance)

    return app_instance


app = create_app()
