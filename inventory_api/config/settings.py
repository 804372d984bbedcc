"""Pydantic Settings for the inventory API.

Environment variable names match the service's deployment manifests, with
no prefix. Example: DATABASE_URL=postgresql+psycopg://..., NODE_ENV=production
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ApiSettings(BaseSettings):
    """Inventory API configuration validated from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Service
    port: int = 8080
    node_env: str = "development"
    log_level: str = "INFO"
    log_format: str = "json"  # "json" or "text"

    # Clients allowed by CORS in production
    dashboard_origin: str
    client_origin: str

    # Interceptors
    request_timeout_ms: int = Field(default=30000, ge=1)

    # Database
    database_url: str
    database_echo: bool = False
    database_isolation_level: str | None = "READ COMMITTED"
    database_pool_timeout: int = Field(default=20, ge=0)

    @field_validator("log_format")
    @classmethod
    def _check_log_format(cls, v: str) -> str:
        fmt = v.strip().lower()
        if fmt not in {"json", "text"}:
            raise ValueError("log_format must be 'json' or 'text'")
        return fmt

    @field_validator("database_isolation_level", mode="before")
    @classmethod
    def _blank_isolation_level(cls, v):
        # An empty value leaves the driver default in place.
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def is_production(self) -> bool:
        return self.node_env == "production"

    @property
    def allowed_origins(self) -> list[str]:
        return [self.dashboard_origin, self.client_origin]


@lru_cache(maxsize=1)
def get_settings() -> ApiSettings:
    return ApiSettings()  # type: ignore[call-arg]
