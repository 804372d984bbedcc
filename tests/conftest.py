"""Shared test fixtures for the inventory API test suite."""

from __future__ import annotations

import os

import pytest
from fastapi.testclient import TestClient
from starlette.requests import Request

from inventory_api.config.settings import ApiSettings, get_settings
from inventory_api.database.client import Database
from inventory_api.interceptors.pipeline import RequestContext
from inventory_api.main import create_app


# ---------------------------------------------------------------------------
# Ensure required env vars are set for ApiSettings in tests
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _set_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Set minimal env vars so ApiSettings can be instantiated in tests."""
    defaults = {
        "DATABASE_URL": "sqlite://",
        "DASHBOARD_ORIGIN": "https://dashboard.example.com",
        "CLIENT_ORIGIN": "https://app.example.com",
        "DATABASE_ISOLATION_LEVEL": "",
    }
    for key, value in defaults.items():
        if key not in os.environ:
            monkeypatch.setenv(key, value)
    get_settings.cache_clear()


# ---------------------------------------------------------------------------
# Settings and app fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def settings() -> ApiSettings:
    """Test settings with safe defaults."""
    return ApiSettings(
        database_url="sqlite://",
        database_isolation_level=None,
        dashboard_origin="https://dashboard.example.com",
        client_origin="https://app.example.com",
        node_env="test",
        log_format="text",
    )


@pytest.fixture
def database(settings: ApiSettings) -> Database:
    return Database(settings.database_url, isolation_level=None)


@pytest.fixture
def app(settings: ApiSettings, database: Database):
    return create_app(settings, database)


@pytest.fixture
def client(app):
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client



# ---------------------------------------------------------------------------
# Interceptor fixtures
# ---------------------------------------------------------------------------

def build_request(
    method: str = "GET",
    path: str = "/items",
    *,
    headers: dict[str, str] | None = None,
    body: bytes = b"",
    query_string: bytes = b"",
) -> Request:
    """Build a bare Starlette request for exercising interceptors directly."""
    scope = {
        "type": "http",
        "http_version": "1.1",
        "method": method,
        "scheme": "http",
        "server": ("testserver", 80),
        "client": ("127.0.0.1", 50000),
        "root_path": "",
        "path": path,
        "raw_path": path.encode(),
        "query_string": query_string,
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
    }

    async def receive() -> dict:
        return {"type": "http.request", "body": body, "more_body": False}

    return Request(scope, receive)


@pytest.fixture
def make_context():
    """Factory for ``RequestContext`` objects backed by a bare request."""

    def _make(method: str = "GET", path: str = "/items", **kwargs) -> RequestContext:
        return RequestContext.from_request(build_request(method, path, **kwargs))

    return _make
