"""Application factory for the FastAPI app.

Centralizes app construction (metadata, middleware, handlers, routers) so
tests and the ASGI entry point build the same application.
"""

from __future__ import annotations

from fastapi import FastAPI

from imagegen.api.routes import health_router, images_router
from imagegen.core.config import settings
from imagegen.core.exception_handlers import setup_exception_handlers
from imagegen.core.logging import configure_logging
from imagegen.core.middleware import request_id_middleware

OPENAPI_TAGS = [
    {
        "name": "Images",
        "description": "Text-to-image generation with a per-client quota.",
    },
    {
        "name": "Health",
        "description": "Liveness checks.",
    },
]


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance.

    Returns:
        Configured FastAPI app with middleware, handlers and routers.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Image Generation API",
        description=(
            "Generates images from text prompts through an OpenAI-compatible "
            "provider. Each client is limited to a fixed number of generations "
            "within a trailing time window."
        ),
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        debug=settings.app.debug,
    )

    app.middleware("http")(request_id_middleware)

    setup_exception_handlers(app)

    app.include_router(images_router, prefix="/v1")
    app.include_router(health_router)

    return app
