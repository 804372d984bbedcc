"""OpenAPI document metadata and interactive docs setup."""

from __future__ import annotations

from typing import Any

from inventory_api.config.settings import ApiSettings
from inventory_api.models.responses import FailureEnvelope

DOCS_PATH = "/api-docs"

# Documented on every route.
GLOBAL_RESPONSES: dict[int | str, dict[str, Any]] = {
    500: {"model": FailureEnvelope, "description": "INTERNAL SERVER ERROR"},
}


def openapi_options(settings: ApiSettings) -> dict[str, Any]:
    """Keyword arguments for ``FastAPI(...)`` describing the API document.

    Interactive docs and the schema endpoint are only served outside
    production.
    """
    options: dict[str, Any] = {
        "title": "Inventory System API",
        "description": "API for managing the inventory system.",
        "version": "1.0",
        "servers": [
            {"url": f"http://localhost:{settings.port}/api", "description": "Development server"},
            {"url": f"http://localhost:{settings.port}", "description": "Base server"},
        ],
    }
    if settings.is_production:
        options.update(docs_url=None, redoc_url=None, openapi_url=None)
    else:
        options.update(docs_url=DOCS_PATH, redoc_url=None)
    return options
