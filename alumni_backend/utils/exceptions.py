"""Service-level exceptions rendered into the API error envelope."""
from typing import Any, Optional


class AlumniServiceError(RuntimeError):
    """Base exception for errors surfaced to API callers.

    Attributes:
        error: Machine-readable error code (e.g. ``survey_not_found``)
        message: Human-readable message safe to show to the caller
        details: Optional structured details (field errors, offending ids)
    """

    status_code: int = 400

    def __init__(self, error: str, message: Optional[str] = None, details: Optional[Any] = None):
        super().__init__(message or error)
        self.error = error
        self.message = message or error
        self.details = details


class InvalidPayloadError(AlumniServiceError):
    """Raised when a payload is malformed or incomplete. Nothing was persisted."""

    status_code = 422


class NotFoundError(AlumniServiceError):
    """Raised when a survey, question, option or response id does not resolve."""

    status_code = 404


class ConflictError(AlumniServiceError):
    """Raised on duplicate submissions."""

    status_code = 409


class InternalServiceError(AlumniServiceError):
    """Raised when storage fails mid-operation. The transaction was rolled back."""

    status_code = 500
