"""Public models for the inventory API."""

from inventory_api.models.responses import (
    DEFAULT_SUCCESS_MESSAGE,
    FailureEnvelope,
    PaginationMeta,
    SuccessEnvelope,
    utc_timestamp,
)
from inventory_api.models.users import User

__all__ = [
    "DEFAULT_SUCCESS_MESSAGE",
    "FailureEnvelope",
    "PaginationMeta",
    "SuccessEnvelope",
    "User",
    "utc_timestamp",
]
