"""Interceptor pipeline: response normalization, sanitization, timeout, logging."""

from inventory_api.interceptors.logging import RequestDetailsLogger, RequestLogger
from inventory_api.interceptors.normalizer import ResponseNormalizer, normalize_response
from inventory_api.interceptors.pipeline import Pipeline, RequestContext, Step
from inventory_api.interceptors.route import envelope_route_class
from inventory_api.interceptors.sanitizer import SENSITIVE_FIELDS, FieldSanitizer, sanitize
from inventory_api.interceptors.timeout import RequestTimeoutError, TimeoutGuard


def build_pipeline(*, timeout_ms: int, debug_details: bool = False) -> Pipeline:
    """Assemble the interceptor chain, outermost first.

    The endpoint's value is normalized, then sanitized; the timeout guard
    bounds both, and the loggers observe the whole exchange.
    """
    steps: list[Step] = []
    if debug_details:
        steps.append(RequestDetailsLogger())
    steps.extend([
        RequestLogger(),
        TimeoutGuard(timeout_ms),
        FieldSanitizer(),
        ResponseNormalizer(),
    ])
    return Pipeline(steps)


__all__ = [
    "FieldSanitizer",
    "Pipeline",
    "RequestContext",
    "RequestDetailsLogger",
    "RequestLogger",
    "RequestTimeoutError",
    "ResponseNormalizer",
    "SENSITIVE_FIELDS",
    "Step",
    "TimeoutGuard",
    "build_pipeline",
    "envelope_route_class",
    "normalize_response",
    "sanitize",
]
