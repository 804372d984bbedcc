"""Route class running the interceptor pipeline around every endpoint.

FastAPI's own route handler resolves dependencies, validates the request and
serializes the endpoint's return value. The envelope route wraps that handler:
the serialized JSON body is decoded back into plain values, passed out through
the pipeline (normalizer, sanitizer, ...), and re-encoded as the final
response. Status code, headers and background tasks set by the endpoint carry
over.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Coroutine
from typing import Any

from fastapi.routing import APIRoute
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from inventory_api.interceptors.pipeline import Pipeline, RequestContext

_REPLACED_HEADERS = frozenset({"content-length", "content-type"})


def _is_json(response: Response) -> bool:
    content_type = response.headers.get("content-type", "")
    return content_type.startswith("application/json") and bool(getattr(response, "body", b""))


def envelope_route_class(pipeline: Pipeline) -> type[APIRoute]:
    """Build an ``APIRoute`` subclass bound to *pipeline*."""

    class EnvelopeRoute(APIRoute):
        def get_route_handler(self) -> Callable[[Request], Coroutine[Any, Any, Response]]:
            route_handler = super().get_route_handler()

            async def handler(request: Request) -> Response:
                ctx = RequestContext.from_request(request)
                raw: Response | None = None

                async def endpoint(ctx: RequestContext) -> Any:
                    nonlocal raw
                    raw = await route_handler(request)
                    ctx.status_code = raw.status_code
                    if not _is_json(raw):
                        return raw
                    return json.loads(raw.body)

                result = await pipeline.run(ctx, endpoint)
                if isinstance(result, Response):
                    return result

                response = JSONResponse(
                    content=result,
                    status_code=ctx.status_code,
                    background=raw.background if raw is not None else None,
                )
                if raw is not None:
                    for key, value in raw.headers.items():
                        if key not in _REPLACED_HEADERS:
                            response.headers.append(key, value)
                return response

            return handler

    return EnvelopeRoute
