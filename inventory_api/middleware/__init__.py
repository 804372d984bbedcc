"""Middleware package: error normalization, request ID and security headers."""

from inventory_api.middleware.error_handler import (
    ErrorBoundaryMiddleware,
    ErrorNormalizer,
    register_error_handlers,
)
from inventory_api.middleware.request_id import (
    REQUEST_ID_HEADER,
    RequestIdMiddleware,
    current_request_id,
)
from inventory_api.middleware.security_headers import SecurityHeadersMiddleware

__all__ = [
    "ErrorBoundaryMiddleware",
    "ErrorNormalizer",
    "REQUEST_ID_HEADER",
    "RequestIdMiddleware",
    "SecurityHeadersMiddleware",
    "current_request_id",
    "register_error_handlers",
]
