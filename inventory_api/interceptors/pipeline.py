"""Interceptor pipeline.

An interceptor step is an async callable ``(ctx, call_next) -> result``. A
``Pipeline`` composes an ordered list of steps around an endpoint: the
first step is outermost, so it sees the request first and the result last.
Errors propagate outward through every step unless a step handles them.
"""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from starlette.requests import Request

NextStep = Callable[["RequestContext"], Awaitable[Any]]
Step = Callable[["RequestContext", NextStep], Awaitable[Any]]


@dataclass
class RequestContext:
    """Per-request state shared by the interceptor steps."""

    request: Request
    method: str
    path: str
    client_ip: str
    user_agent: str
    status_code: int = 200
    started_at: float = field(default_factory=time.perf_counter)

    @classmethod
    def from_request(cls, request: Request) -> RequestContext:
        return cls(
            request=request,
            method=request.method,
            path=request.url.path,
            client_ip=request.client.host if request.client else "unknown",
            user_agent=request.headers.get("user-agent") or "Unknown",
        )

    def elapsed_ms(self) -> int:
        return int((time.perf_counter() - self.started_at) * 1000)


def _bind(step: Step, call_next: NextStep) -> NextStep:
    async def call(ctx: RequestContext) -> Any:
        return await step(ctx, call_next)

    return call


class Pipeline:
    """Ordered chain of interceptor steps, outermost first."""

    def __init__(self, steps: Sequence[Step] = ()) -> None:
        self._steps = tuple(steps)

    @property
    def steps(self) -> tuple[Step, ...]:
        return self._steps

    async def run(self, ctx: RequestContext, endpoint: NextStep) -> Any:
        call = endpoint
        for step in reversed(self._steps):
            call = _bind(step, call)
        return await call(ctx)
