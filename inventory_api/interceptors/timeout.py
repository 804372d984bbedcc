"""Request timeout guard.

Bounds the execution of everything inside it in the pipeline. If the inner
chain finishes first, its value or error propagates unchanged. Otherwise the
inner task is cancelled, its eventual outcome discarded, and the request
fails with ``RequestTimeoutError``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from starlette.exceptions import HTTPException

from inventory_api.interceptors.pipeline import NextStep, RequestContext

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 30000


class RequestTimeoutError(HTTPException):
    """The request did not complete within the configured ceiling."""

    def __init__(self, detail: str = "Request timeout") -> None:
        super().__init__(status_code=408, detail=detail)


def _discard_outcome(task: asyncio.Future) -> None:
    # Retrieve the late result so asyncio never reports it as unhandled.
    if not task.cancelled():
        task.exception()


class TimeoutGuard:
    """Interceptor step enforcing a per-request time ceiling.

    Args:
        timeout_ms: Ceiling in milliseconds.
    """

    def __init__(self, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> None:
        if timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")
        self._timeout_ms = timeout_ms

    @property
    def timeout_ms(self) -> int:
        return self._timeout_ms

    async def __call__(self, ctx: RequestContext, call_next: NextStep) -> Any:
        task = asyncio.ensure_future(call_next(ctx))
        try:
            done, _ = await asyncio.wait({task}, timeout=self._timeout_ms / 1000)
        finally:
            # Covers the timeout path and cancellation of this request upstream.
            if not task.done():
                task.add_done_callback(_discard_outcome)
                task.cancel()

        if task in done:
            return task.result()

        logger.warning(
            "Request timeout: %s %s exceeded %dms",
            ctx.method,
            ctx.path,
            self._timeout_ms,
            extra={"method": ctx.method, "path": ctx.path},
        )
        raise RequestTimeoutError()
