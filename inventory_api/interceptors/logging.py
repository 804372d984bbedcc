"""Request/response logging interceptors."""

from __future__ import annotations

import json
import logging
from typing import Any

from inventory_api.interceptors.pipeline import NextStep, RequestContext

logger = logging.getLogger(__name__)


class RequestLogger:
    """Logs every request on entry, and its duration and outcome on exit.

    Errors are logged and re-raised unchanged; converting them into a
    response is the exception handlers' job.
    """

    async def __call__(self, ctx: RequestContext, call_next: NextStep) -> Any:
        logger.info(
            "Incoming Request: %s %s - IP: %s - User-Agent: %s",
            ctx.method,
            ctx.path,
            ctx.client_ip,
            ctx.user_agent,
            extra={
                "method": ctx.method,
                "path": ctx.path,
                "client_ip": ctx.client_ip,
            },
        )
        try:
            result = await call_next(ctx)
        except Exception as exc:
            duration = ctx.elapsed_ms()
            logger.error(
                "Failed Request: %s %s - Duration: %dms - Error: %s",
                ctx.method,
                ctx.path,
                duration,
                exc,
                exc_info=exc,
                extra={
                    "method": ctx.method,
                    "path": ctx.path,
                    "duration_ms": duration,
                    "error_reason": str(exc),
                },
            )
            raise

        duration = ctx.elapsed_ms()
        logger.info(
            "Outgoing Response: %s %s - Status: %d - Duration: %dms",
            ctx.method,
            ctx.path,
            ctx.status_code,
            duration,
            extra={
                "method": ctx.method,
                "path": ctx.path,
                "status_code": ctx.status_code,
                "duration_ms": duration,
            },
        )
        return result


class RequestDetailsLogger:
    """Debug-level dump of the request's body, query and path params.

    Meant for development only; the body is read only when DEBUG is
    enabled for this logger.
    """

    async def __call__(self, ctx: RequestContext, call_next: NextStep) -> Any:
        if not logger.isEnabledFor(logging.DEBUG):
            return await call_next(ctx)

        request = ctx.request
        body = (await request.body()).decode("utf-8", errors="replace")
        logger.debug(
            "Request Details:\n  Method: %s\n  URL: %s\n  Body: %s\n  Query: %s\n  Params: %s",
            ctx.method,
            request.url,
            body,
            json.dumps(dict(request.query_params)),
            json.dumps(request.path_params, default=str),
        )
        result = await call_next(ctx)
        logger.debug("Response sent in %dms", ctx.elapsed_ms())
        return result
