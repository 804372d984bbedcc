"""API routers."""

from inventory_api.routers.auth import create_auth_router
from inventory_api.routers.health import create_health_router

__all__ = ["create_auth_router", "create_health_router"]
