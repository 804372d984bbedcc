"""Property tests for envelope exclusivity.

Every body is either a success envelope or a failure envelope, never a mix:
success bodies carry ``data`` and no ``error``; failure bodies carry
``error`` and ``method`` and never ``data`` or ``meta``.
"""

from __future__ import annotations

from fastapi import APIRouter, FastAPI, HTTPException
from fastapi.testclient import TestClient
from hypothesis import given, settings
from hypothesis import strategies as st

from inventory_api.database.errors import (
    InitializationError,
    KnownRequestError,
    QueryValidationError,
)
from inventory_api.interceptors import build_pipeline, envelope_route_class
from inventory_api.middleware.error_handler import ErrorNormalizer, register_error_handlers

_FAILURE_KEYS = {"success", "statusCode", "timestamp", "path", "method", "message", "error"}


# ---------------------------------------------------------------------------
# Minimal test app
# ---------------------------------------------------------------------------

def _create_test_app() -> FastAPI:
    """Create a minimal app wired with the envelope route and error handlers."""
    app = FastAPI()
    register_error_handlers(app)
    router = APIRouter(route_class=envelope_route_class(build_pipeline(timeout_ms=5000)))

    @router.post("/echo")
    async def echo(payload: dict):
        return payload["value"]

    @router.get("/fail/{status_code}")
    async def fail(status_code: int) -> None:
        raise HTTPException(status_code=status_code, detail="nope")

    @router.get("/db/{code}")
    async def db(code: str) -> None:
        raise KnownRequestError(code, meta={"target": ["sku"]})

    app.include_router(router)
    return app


_client = TestClient(_create_test_app(), raise_server_exceptions=False)


# --- Strategies ---

scalars = st.one_of(
    st.none(),
    st.booleans(),
    st.integers(min_value=-(2**31), max_value=2**31),
    st.text(max_size=20),
)
json_values = st.recursive(
    scalars,
    lambda children: st.one_of(
        st.lists(children, max_size=4),
        st.dictionaries(st.text(alphabet="abcdefghijklmnop", min_size=1, max_size=6), children, max_size=4),
    ),
    max_leaves=15,
)
client_error_codes = st.sampled_from([400, 401, 403, 404, 409, 410, 418, 429, 500, 502, 503])
database_codes = st.one_of(
    st.sampled_from(["P2000", "P2001", "P2002", "P2003", "P2014", "P2015", "P2025"]),
    st.from_regex(r"P[0-9]{4}", fullmatch=True),
)
errors = st.one_of(
    client_error_codes.map(lambda code: HTTPException(status_code=code, detail="x")),
    database_codes.map(KnownRequestError),
    st.just(QueryValidationError()),
    st.just(InitializationError()),
    st.text(max_size=20).map(RuntimeError),
    st.text(max_size=20).map(ValueError),
    json_values,
)
methods = st.sampled_from(["GET", "POST", "PUT", "PATCH", "DELETE"])


@settings(max_examples=100)
@given(value=json_values)
def test_success_bodies_never_carry_failure_fields(value) -> None:
    resp = _client.post("/echo", json={"value": value})
    body = resp.json()

    assert resp.status_code == 200
    assert body["success"] is True
    assert body["statusCode"] == 200
    assert "data" in body
    assert "error" not in body
    assert "method" not in body


@settings(max_examples=100)
@given(status_code=client_error_codes)
def test_http_failures_never_carry_success_fields(status_code: int) -> None:
    resp = _client.get(f"/fail/{status_code}")
    body = resp.json()

    assert resp.status_code == status_code
    assert body["success"] is False
    assert body["statusCode"] == status_code
    assert _FAILURE_KEYS.issubset(body)
    assert "data" not in body
    assert "meta" not in body


@settings(max_examples=100)
@given(code=database_codes)
def test_database_failures_never_carry_success_fields(code: str) -> None:
    resp = _client.get(f"/db/{code}")
    body = resp.json()

    assert resp.status_code in {400, 404, 409, 500}
    assert body["success"] is False
    assert body["error"] == "DatabaseError"
    assert "data" not in body


@settings(max_examples=100)
@given(exc=errors, method=methods)
def test_error_normalizer_always_builds_failure_envelope(exc, method: str) -> None:
    body = ErrorNormalizer().build(exc, method=method, path="/api/v1/items")

    assert _FAILURE_KEYS.issubset(body)
    assert body["success"] is False
    assert 400 <= body["statusCode"] <= 599
    assert body["method"] == method
    assert body["error"]
    assert "data" not in body
    assert "meta" not in body
