"""Configuration module: settings and OpenAPI document setup."""

from inventory_api.config.openapi import GLOBAL_RESPONSES, openapi_options
from inventory_api.config.settings import ApiSettings, get_settings

__all__ = [
    "ApiSettings",
    "GLOBAL_RESPONSES",
    "get_settings",
    "openapi_options",
]
