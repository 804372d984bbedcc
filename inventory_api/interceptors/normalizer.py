"""Response normalization.

Wraps whatever an endpoint returns into the success envelope:

- values that already are a success envelope pass through unchanged
- mappings carrying pagination keys (total, page, limit, ...) have those
  lifted into ``meta`` and the payload taken from ``data``, ``items`` or
  ``results``, or rebuilt from the remaining keys
- a string ``message`` key overrides the default envelope message
- lists and primitives become ``data`` as-is
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from starlette.responses import Response

from inventory_api.interceptors.pipeline import NextStep, RequestContext
from inventory_api.models.responses import (
    DEFAULT_SUCCESS_MESSAGE,
    PaginationMeta,
    SuccessEnvelope,
)

ENVELOPE_KEYS = frozenset({"success", "statusCode", "message", "data", "timestamp", "path"})

# Pagination keys and the type each must carry to be copied into meta
_NUMERIC_PAGINATION_KEYS = ("total", "page", "limit", "skip", "take", "totalPages")
_BOOLEAN_PAGINATION_KEYS = ("hasNextPage", "hasPreviousPage")
PAGINATION_KEYS = frozenset(_NUMERIC_PAGINATION_KEYS + _BOOLEAN_PAGINATION_KEYS)

# Checked in order for the actual payload of a paginated result
_PAYLOAD_KEYS = ("data", "items", "results")


def is_success_envelope(value: Any) -> bool:
    return isinstance(value, Mapping) and ENVELOPE_KEYS.issubset(value.keys())


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def extract_pagination_meta(data: Mapping[str, Any]) -> dict[str, Any]:
    """Copy correctly-typed pagination fields out of *data*."""
    meta: dict[str, Any] = {}
    for key in _NUMERIC_PAGINATION_KEYS:
        if key in data and _is_number(data[key]):
            meta[key] = data[key]
    for key in _BOOLEAN_PAGINATION_KEYS:
        if key in data and isinstance(data[key], bool):
            meta[key] = data[key]
    return meta


def _string_message(data: Mapping[str, Any]) -> str | None:
    message = data.get("message")
    return message if isinstance(message, str) else None


def _paginated_payload(data: Mapping[str, Any]) -> Any:
    for key in _PAYLOAD_KEYS:
        if key in data:
            return data[key]
    remaining = {
        key: value
        for key, value in data.items()
        if key not in PAGINATION_KEYS and key != "message"
    }
    return remaining if remaining else data


def normalize_response(data: Any, *, status_code: int, path: str) -> dict[str, Any]:
    """Wrap an endpoint's return value in the success envelope."""
    if is_success_envelope(data):
        return data

    message = DEFAULT_SUCCESS_MESSAGE
    payload = data
    meta: dict[str, Any] = {}

    if isinstance(data, Mapping):
        override = _string_message(data)
        if any(key in data for key in PAGINATION_KEYS):
            meta = extract_pagination_meta(data)
            payload = _paginated_payload(data)
            if override is not None:
                message = override
        elif override is not None:
            message = override
            payload = data["data"] if "data" in data else data

    envelope = SuccessEnvelope(
        status_code=status_code,
        message=message,
        data=payload,
        meta=PaginationMeta.model_validate(meta) if meta else None,
        path=path,
    )
    return envelope.to_payload()


class ResponseNormalizer:
    """Interceptor step producing the success envelope.

    Non-JSON responses (files, streams, empty bodies) come through as
    Starlette ``Response`` objects and are returned untouched.
    """

    async def __call__(self, ctx: RequestContext, call_next: NextStep) -> Any:
        result = await call_next(ctx)
        if isinstance(result, Response):
            return result
        return normalize_response(result, status_code=ctx.status_code, path=ctx.path)
