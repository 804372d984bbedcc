"""Response envelope models.

Every API response body is one of two shapes:

success: { success, statusCode, message, data, meta?, timestamp, path }
failure: { success, statusCode, timestamp, path, method, message, error, details? }

The models document these shapes in the OpenAPI schema and build the
payloads the interceptors and exception handlers emit.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")

DEFAULT_SUCCESS_MESSAGE = "Request successful"


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a ``Z`` suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class PaginationMeta(BaseModel):
    """Pagination metadata lifted out of a handler's return value."""

    model_config = ConfigDict(populate_by_name=True)

    total: int | float | None = None
    page: int | float | None = None
    limit: int | float | None = None
    skip: int | float | None = None
    take: int | float | None = None
    total_pages: int | float | None = Field(default=None, alias="totalPages")
    has_next_page: bool | None = Field(default=None, alias="hasNextPage")
    has_previous_page: bool | None = Field(default=None, alias="hasPreviousPage")


class SuccessEnvelope(BaseModel, Generic[T]):
    """JSON envelope for successful responses."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = Field(default=True, examples=[True])
    status_code: int = Field(alias="statusCode", examples=[200])
    message: str = Field(default=DEFAULT_SUCCESS_MESSAGE, examples=[DEFAULT_SUCCESS_MESSAGE])
    data: T | None = None
    meta: PaginationMeta | None = None
    timestamp: str = Field(default_factory=utc_timestamp)
    path: str = Field(examples=["/example"])

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "success": self.success,
            "statusCode": self.status_code,
            "message": self.message,
            "data": self.data,
            "timestamp": self.timestamp,
            "path": self.path,
        }
        if self.meta is not None:
            meta = self.meta.model_dump(by_alias=True, exclude_none=True)
            if meta:
                payload["meta"] = meta
        return payload


class FailureEnvelope(BaseModel):
    """JSON envelope for failed responses."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = Field(default=False, examples=[False])
    status_code: int = Field(alias="statusCode", examples=[500])
    timestamp: str = Field(default_factory=utc_timestamp)
    path: str = Field(examples=["/api/v1/users"])
    method: str = Field(examples=["GET"])
    message: str | list[str] = Field(examples=["Internal server error"])
    error: str = Field(examples=["Error"])
    details: Any | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "success": self.success,
            "statusCode": self.status_code,
            "timestamp": self.timestamp,
            "path": self.path,
            "method": self.method,
            "message": self.message,
            "error": self.error,
        }
        if self.details is not None:
            payload["details"] = self.details
        return payload
