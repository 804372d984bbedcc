"""Recursive removal of sensitive fields from outgoing payloads."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from starlette.responses import Response

from inventory_api.interceptors.pipeline import NextStep, RequestContext

SENSITIVE_FIELDS = frozenset({
    "password",
    "passwordHash",
    "salt",
    "token",
    "refreshToken",
    "accessToken",
    "secret",
    "apiKey",
})


def sanitize(data: Any) -> Any:
    """Return a copy of *data* with every sensitive key dropped, at any depth.

    Keys are omitted outright rather than nulled. Lists and tuples are
    sanitized element-wise; primitives and ``None`` pass through.
    """
    if data is None:
        return data
    if isinstance(data, (list, tuple)):
        return [sanitize(item) for item in data]
    if isinstance(data, Mapping):
        return {
            key: sanitize(value)
            for key, value in data.items()
            if key not in SENSITIVE_FIELDS
        }
    return data


class FieldSanitizer:
    """Interceptor step applying ``sanitize`` to the inner result."""

    async def __call__(self, ctx: RequestContext, call_next: NextStep) -> Any:
        result = await call_next(ctx)
        if isinstance(result, Response):
            return result
        return sanitize(result)
