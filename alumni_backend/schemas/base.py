"""Base schemas with common configuration."""
from datetime import datetime, UTC
from typing import Annotated, Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, StringConstraints, model_serializer

from alumni_backend.config import get_settings

DataT = TypeVar("DataT")

_settings = get_settings()

# Trimmed, non-empty, length-bounded text used for titles, question text and option text
BoundedText = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=_settings.max_text_length)
]


def serialize_datetime_utc(dt: datetime) -> str:
    """
    Serialize datetime to ISO 8601 with explicit UTC timezone.

    SQLite stores datetimes as naive strings, so we treat them as UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC).isoformat().replace('+00:00', 'Z')


class BaseSchema(BaseModel):
    """Base schema with common configuration for all API responses."""

    model_config = ConfigDict(
        from_attributes=True,
    )

    @model_serializer(mode="wrap")
    def serialize_model(self, handler):
        """Serialize model values with custom datetime handling."""

        def _convert(value):
            if isinstance(value, datetime):
                return serialize_datetime_utc(value)
            if isinstance(value, list):
                return [_convert(item) for item in value]
            if isinstance(value, dict):
                return {key: _convert(item) for key, item in value.items()}
            return value

        data = handler(self)
        return {key: _convert(value) for key, value in data.items()}


class ApiResponse(BaseSchema, Generic[DataT]):
    """Success envelope shared by every endpoint."""

    success: bool = True
    data: Optional[DataT] = None
    message: Optional[str] = None


class FieldError(BaseSchema):
    """Single field-level validation problem."""

    field: str
    message: str
    type: str


class ErrorResponse(BaseSchema):
    """Error envelope shared by every endpoint."""

    success: bool = False
    error: str
    message: Optional[str] = None
    errors: Optional[list[FieldError]] = None
    details: Optional[Any] = None
