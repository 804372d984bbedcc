"""Database client and error taxonomy."""

from inventory_api.database.client import Database
from inventory_api.database.errors import (
    DatabaseError,
    InitializationError,
    KnownRequestError,
    QueryValidationError,
    translate_error,
)

__all__ = [
    "Database",
    "DatabaseError",
    "InitializationError",
    "KnownRequestError",
    "QueryValidationError",
    "translate_error",
]
