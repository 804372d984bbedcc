"""Health check endpoint.

Mounted at the root, outside the versioned ``/api`` prefix, so load
balancers can probe ``GET /health`` directly.
"""

from __future__ import annotations

from fastapi import APIRouter

from inventory_api.models.responses import SuccessEnvelope

HEALTH_MESSAGE = "server is running"


class HealthResponse(SuccessEnvelope[str]):
    """Success envelope whose ``data`` describes the server's condition."""


def create_health_router(*, route_class: type | None = None, responses: dict | None = None) -> APIRouter:
    """Factory that creates the health router."""
    kwargs = {"route_class": route_class} if route_class is not None else {}
    health_router = APIRouter(tags=["health"], responses=responses, **kwargs)

    @health_router.get(
        "/health",
        response_model=None,
        responses={200: {"model": HealthResponse, "description": "Server is running"}},
    )
    async def health() -> str:
        return HEALTH_MESSAGE

    return health_router
