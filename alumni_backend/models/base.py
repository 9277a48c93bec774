"""Base utilities for SQLAlchemy models."""
from datetime import datetime, UTC
from enum import Enum
import uuid

from sqlalchemy import Column, String
from sqlalchemy.dialects.postgresql import UUID as PGUUID
from sqlalchemy.sql import sqltypes


class QuestionType(str, Enum):
    """Question kinds a survey may contain (values are the wire strings)."""
    MULTIPLE_CHOICE = "Multiple Choice"
    OPEN_ENDED = "Open-ended"
    RATING = "Rating"
    DROPDOWN = "Dropdown"

    @property
    def has_options(self) -> bool:
        return self in OPTION_QUESTION_TYPES

    @property
    def allows_other_option(self) -> bool:
        return self in OTHER_OPTION_QUESTION_TYPES


OPTION_QUESTION_TYPES = frozenset({QuestionType.MULTIPLE_CHOICE, QuestionType.DROPDOWN, QuestionType.RATING})
OTHER_OPTION_QUESTION_TYPES = frozenset({QuestionType.MULTIPLE_CHOICE, QuestionType.DROPDOWN})

OTHER_OPTION_TEXT = "Others"


class NotificationType(str, Enum):
    """Notification type enumeration for type safety."""
    SURVEY_INVITATION = "survey_invitation"


def get_current_utc() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


class AdaptiveUUID(sqltypes.TypeDecorator):
    """UUID stored natively on PostgreSQL and as hex text elsewhere."""

    impl = sqltypes.String
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(PGUUID(as_uuid=True))
        return dialect.type_descriptor(String(36))

    @staticmethod
    def _coerce_uuid(value):
        if value is None or isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(str(value))

    def process_bind_param(self, value, dialect):
        value = self._coerce_uuid(value)
        if value is None:
            return None
        if dialect.name == "postgresql":
            return value
        return value.hex

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return self._coerce_uuid(value)


def get_uuid_column(*args, **kwargs):
    """Get a UUID column that adapts to the database dialect.

    Args:
        *args: Positional arguments to pass to Column (e.g., ForeignKey)
        **kwargs: Keyword arguments to pass to Column (e.g., primary_key=True)

    Example:
        survey_id = get_uuid_column(primary_key=True, default=uuid.uuid4)
        section_id = get_uuid_column(ForeignKey("survey_sections.section_id"), nullable=False)
    """
    return Column(AdaptiveUUID(), *args, **kwargs)
