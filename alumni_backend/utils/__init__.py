"""Utilities module."""
from alumni_backend.utils.datetime_helpers import ensure_utc, utc_today
from alumni_backend.utils.exceptions import (
    AlumniServiceError,
    InvalidPayloadError,
    NotFoundError,
    ConflictError,
    InternalServiceError,
)

__all__ = [
    "ensure_utc",
    "utc_today",
    "AlumniServiceError",
    "InvalidPayloadError",
    "NotFoundError",
    "ConflictError",
    "InternalServiceError",
]
