"""FastAPI application exposing the society operations engine."""

import logging

from fastapi import FastAPI

from society_engine.api import admin, resident, security
from society_engine.api.errors import register_error_handlers
from society_engine.config import Settings, get_settings

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the API application with all routers and error handlers."""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.api_title,
        description="Maintenance billing, amenity booking, visitor and complaint operations",
        version=settings.api_version,
    )
    register_error_handlers(app)

    app.include_router(admin.router)
    app.include_router(resident.router)
    app.include_router(security.router)

    @app.get("/health", tags=["health"])
    def health() -> dict[str, str]:
        return {"status": "ok"}

    logger.debug("API application created: %s %s", settings.api_title, settings.api_version)
    return app
