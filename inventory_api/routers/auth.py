"""Auth endpoints.

``GET /auth`` returns a fixed user list until a user store exists.
"""

from __future__ import annotations

from fastapi import APIRouter

from inventory_api.models.responses import SuccessEnvelope
from inventory_api.models.users import User

_USERS: tuple[User, ...] = (User(id=1, name="Jon Doe"),)


def create_auth_router(*, route_class: type | None = None, responses: dict | None = None) -> APIRouter:
    """Factory that creates the auth router."""
    kwargs = {"route_class": route_class} if route_class is not None else {}
    auth_router = APIRouter(prefix="/auth", tags=["auth"], responses=responses, **kwargs)

    @auth_router.get(
        "",
        summary="Get a list of users",
        response_model=None,
        responses={200: {"model": SuccessEnvelope[list[User]], "description": "The found records"}},
    )
    async def get_users() -> list[dict]:
        return [user.model_dump() for user in _USERS]

    return auth_router
