"""Schemas for the quick survey poll."""
from typing import Annotated, Optional

from pydantic import Field, StringConstraints

from alumni_backend.schemas.base import BaseSchema

QuickSurveyChoice = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]


class QuickSurveySubmission(BaseSchema):
    """Checkbox selections plus optional free text for the "other" box."""

    selected_options: list[QuickSurveyChoice] = Field(..., min_length=1)
    other_response: Optional[str] = Field(default=None, max_length=255)


class QuickSurveyStatus(BaseSchema):
    answered: bool
    selected_options: Optional[list[str]] = None
    other_response: Optional[str] = None
