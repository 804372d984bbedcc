"""FastAPI application entry point with lifespan management.

``create_app`` is the composition root: it builds settings, the database
client, the interceptor pipeline and the error normalizer once, and passes
each to the components that need it.

Startup: connect the database.
Shutdown: disconnect the database.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from inventory_api.config.openapi import GLOBAL_RESPONSES, openapi_options
from inventory_api.config.settings import ApiSettings
from inventory_api.database.client import Database
from inventory_api.interceptors import build_pipeline, envelope_route_class
from inventory_api.logging_config import configure_logging
from inventory_api.middleware.error_handler import ErrorNormalizer, register_error_handlers
from inventory_api.middleware.request_id import REQUEST_ID_HEADER, RequestIdMiddleware
from inventory_api.middleware.security_headers import SecurityHeadersMiddleware
from inventory_api.routers.auth import create_auth_router
from inventory_api.routers.health import create_health_router

logger = logging.getLogger(__name__)

API_PREFIX = "/api"
DEFAULT_VERSION = "1"

CORS_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
CORS_ALLOW_HEADERS = ["Content-Type", "Authorization"]
CORS_EXPOSE_HEADERS = ["Content-Type", REQUEST_ID_HEADER]


def _build_lifespan(database: Database):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan: startup and shutdown logic."""
        database.connect()
        logger.info("Inventory API started")

        yield

        logger.info("Shutting down inventory API…")
        database.disconnect()
        logger.info("Inventory API shut down")

    return lifespan


def create_app(
    settings: ApiSettings | None = None,
    database: Database | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Loads ``ApiSettings`` eagerly so that a missing required environment
    variable causes an immediate startup failure.
    """
    settings = settings or ApiSettings()  # type: ignore[call-arg]
    configure_logging(settings.log_level, settings.log_format)

    database = database or Database(
        settings.database_url,
        echo=settings.database_echo,
        isolation_level=settings.database_isolation_level,
        pool_timeout=settings.database_pool_timeout,
    )

    pipeline = build_pipeline(
        timeout_ms=settings.request_timeout_ms,
        debug_details=not settings.is_production,
    )
    route_class = envelope_route_class(pipeline)

    app = FastAPI(lifespan=_build_lifespan(database), **openapi_options(settings))
    app.state.settings = settings
    app.state.database = database
    app.state.route_class = route_class

    register_error_handlers(app, ErrorNormalizer())

    # Starlette applies middleware in reverse order of add_middleware calls:
    # request_id → CORS → security headers → error boundary → app
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins if settings.is_production else ["*"],
        allow_credentials=True,
        allow_methods=CORS_METHODS,
        allow_headers=CORS_ALLOW_HEADERS,
        expose_headers=CORS_EXPOSE_HEADERS,
    )
    app.add_middleware(RequestIdMiddleware)

    app.include_router(
        create_health_router(route_class=route_class, responses=GLOBAL_RESPONSES)
    )
    app.include_router(
        create_auth_router(route_class=route_class, responses=GLOBAL_RESPONSES),
        prefix=f"{API_PREFIX}/v{DEFAULT_VERSION}",
    )

    if not settings.is_production:
        logger.info("Swagger documentation available at %s", app.docs_url)

    return app


def run() -> None:
    """Serve the application with uvicorn."""
    settings = ApiSettings()  # type: ignore[call-arg]
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)
