"""Error normalization and FastAPI exception handlers.

Every error that escapes a request, whether raised by the framework, the
database layer or application code, is converted into the failure envelope:
{ success, statusCode, timestamp, path, method, message, error, details? }

Classification, in priority order:
1. framework HTTP errors (``HTTPException``, request validation)
2. coded database errors (unique violation → 409, not found → 404, ...)
3. database query validation errors → 400
4. database connection errors → 500
5. anything else → 500 "Internal server error"
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping
from http import HTTPStatus
from typing import Any

from fastapi import FastAPI, Request
from fastapi import HTTPException as FastAPIHTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from inventory_api.database.errors import (
    FOREIGN_KEY_VIOLATION,
    RECORD_DOES_NOT_EXIST,
    RECORD_NOT_FOUND,
    RELATED_RECORD_NOT_FOUND,
    RELATION_VIOLATION,
    UNIQUE_VIOLATION,
    VALUE_TOO_LONG,
    DatabaseError,
    InitializationError,
    KnownRequestError,
    QueryValidationError,
    translate_error,
)
from inventory_api.models.responses import FailureEnvelope

logger = logging.getLogger(__name__)

_BASE_HTTP_ERRORS = (HTTPException, FastAPIHTTPException)

# Fixed (status, message) per known database error code
_DATABASE_ERRORS: dict[str, tuple[int, str]] = {
    RECORD_NOT_FOUND: (404, "Record not found"),
    FOREIGN_KEY_VIOLATION: (400, "Invalid reference to related record"),
    RELATION_VIOLATION: (400, "Invalid relation between records"),
    VALUE_TOO_LONG: (400, "Input value is too long"),
    RECORD_DOES_NOT_EXIST: (404, "Referenced record does not exist"),
    RELATED_RECORD_NOT_FOUND: (404, "Related record not found"),
}


def _http_error_name(exc: HTTPException) -> str:
    """Name a framework HTTP error after its status, e.g. 404 -> NotFoundException.

    Subclasses keep their own class name.
    """
    if type(exc) not in _BASE_HTTP_ERRORS:
        return type(exc).__name__
    try:
        phrase = HTTPStatus(exc.status_code).phrase
    except ValueError:
        return type(exc).__name__
    return re.sub(r"[^0-9A-Za-z]", "", phrase) + "Exception"


class ErrorNormalizer:
    """Maps raised errors to failure envelopes and logs the outcome."""

    def build(self, exc: object, *, method: str, path: str) -> dict[str, Any]:
        """Return the failure envelope payload for *exc*."""
        if isinstance(exc, SQLAlchemyError):
            exc = translate_error(exc)

        if isinstance(exc, HTTPException):
            envelope = self._http_error(exc, method=method, path=path)
        elif isinstance(exc, RequestValidationError):
            envelope = self._request_validation_error(exc, method=method, path=path)
        elif isinstance(exc, KnownRequestError):
            envelope = self._known_database_error(exc, method=method, path=path)
        elif isinstance(exc, QueryValidationError):
            envelope = FailureEnvelope(
                status_code=400,
                path=path,
                method=method,
                message="Validation error in database query",
                error="DatabaseValidationError",
            )
        elif isinstance(exc, InitializationError):
            envelope = FailureEnvelope(
                status_code=500,
                path=path,
                method=method,
                message="Database connection error",
                error="DatabaseConnectionError",
            )
        else:
            envelope = FailureEnvelope(
                status_code=500,
                path=path,
                method=method,
                message="Internal server error",
                error=type(exc).__name__ if isinstance(exc, BaseException) else "UnknownError",
            )
        return envelope.to_payload()

    def handle(self, exc: object, *, method: str, path: str) -> dict[str, Any]:
        """Build the failure envelope for *exc* and log it."""
        payload = self.build(exc, method=method, path=path)
        self.log(exc, payload)
        return payload

    @staticmethod
    def _http_error(exc: HTTPException, *, method: str, path: str) -> FailureEnvelope:
        detail = exc.detail
        if isinstance(detail, str):
            message: str | list[str] = detail
        elif isinstance(detail, Mapping) and isinstance(detail.get("message"), str) and detail["message"]:
            message = detail["message"]
        elif isinstance(detail, Mapping) and isinstance(detail.get("message"), list) and detail["message"]:
            message = [str(item) for item in detail["message"]]
        else:
            message = "An error occurred"
        return FailureEnvelope(
            status_code=exc.status_code,
            path=path,
            method=method,
            message=message,
            error=_http_error_name(exc),
            details=detail if isinstance(detail, (Mapping, list)) else None,
        )

    @staticmethod
    def _request_validation_error(
        exc: RequestValidationError, *, method: str, path: str
    ) -> FailureEnvelope:
        field_errors = [
            {
                "field": " -> ".join(str(loc) for loc in err["loc"]),
                "message": err["msg"],
                "type": err["type"],
            }
            for err in exc.errors()
        ]
        return FailureEnvelope(
            status_code=422,
            path=path,
            method=method,
            message=[f"{item['field']}: {item['message']}" for item in field_errors],
            error="RequestValidationError",
            details={"errors": field_errors},
        )

    @staticmethod
    def _known_database_error(
        exc: KnownRequestError, *, method: str, path: str
    ) -> FailureEnvelope:
        base = {"path": path, "method": method, "error": "DatabaseError"}

        if exc.code == UNIQUE_VIOLATION:
            fields = [str(f) for f in (exc.meta.get("target") or [])]
            return FailureEnvelope(
                status_code=409,
                message=f"A record with this {', '.join(fields)} already exists",
                details={"fields": fields},
                **base,
            )

        if exc.code in _DATABASE_ERRORS:
            status_code, message = _DATABASE_ERRORS[exc.code]
            return FailureEnvelope(status_code=status_code, message=message, **base)

        return FailureEnvelope(
            status_code=500,
            message="Database operation failed",
            details={"code": exc.code},
            **base,
        )

    @staticmethod
    def log(exc: object, payload: Mapping[str, Any]) -> None:
        status_code = payload["statusCode"]
        message = f"{payload['method']} {payload['path']} - Status: {status_code}"
        extra = {
            "method": payload["method"],
            "path": payload["path"],
            "status_code": status_code,
        }

        if status_code >= 500:
            if isinstance(exc, BaseException):
                logger.error(message, exc_info=exc, extra=extra)
            else:
                logger.error("%s\n%s", message, json.dumps(exc, default=str), extra=extra)
        else:
            logger.warning(
                "%s %s", message, json.dumps(payload["message"], default=str), extra=extra
            )


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------


def register_error_handlers(app: FastAPI, normalizer: ErrorNormalizer | None = None) -> None:
    """Wire every exception type to the failure envelope on *app*.

    Call before adding any other middleware: the error boundary it installs
    has to end up innermost.
    """
    normalizer = normalizer or ErrorNormalizer()

    async def _handle(request: Request, exc: Exception) -> JSONResponse:
        payload = normalizer.handle(exc, method=request.method, path=request.url.path)
        headers = getattr(exc, "headers", None) if isinstance(exc, HTTPException) else None
        return JSONResponse(
            status_code=payload["statusCode"],
            content=payload,
            headers=headers,
        )

    for exc_class in (
        HTTPException,
        RequestValidationError,
        DatabaseError,
        SQLAlchemyError,
        Exception,
    ):
        app.add_exception_handler(exc_class, _handle)  # type: ignore[arg-type]

    app.add_middleware(ErrorBoundaryMiddleware, normalizer=normalizer)


class ErrorBoundaryMiddleware(BaseHTTPMiddleware):
    """Turns errors no exception handler claimed into the failure envelope.

    Must stay the innermost middleware so request-ID, CORS and security
    headers still apply to the response.
    """

    def __init__(self, app: ASGIApp, normalizer: ErrorNormalizer | None = None) -> None:
        super().__init__(app)
        self._normalizer = normalizer or ErrorNormalizer()

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            payload = self._normalizer.handle(
                exc, method=request.method, path=request.url.path
            )
            return JSONResponse(status_code=payload["statusCode"], content=payload)
