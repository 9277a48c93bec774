"""Pydantic schemas for survey authoring and schema fetch endpoints."""
from __future__ import annotations

from datetime import date, datetime
from typing import Annotated, Literal, Optional, Union
from uuid import UUID

from pydantic import ConfigDict, Field, model_validator

from alumni_backend.schemas.base import BaseSchema, BoundedText


# ---------------------------------------------------------------------------
# Authoring payload
# ---------------------------------------------------------------------------

class OptionDefinition(BaseSchema):
    """Selectable option supplied by the survey author."""

    option_text: BoundedText
    option_value: Optional[int] = None


class _QuestionDefinitionBase(BaseSchema):
    model_config = ConfigDict(extra="forbid")

    question_text: BoundedText
    is_required: bool = False
    # Only honored for Multiple Choice and Dropdown questions
    is_other_option: bool = False


class ChoiceQuestionDefinition(_QuestionDefinitionBase):
    """Multiple Choice or Dropdown question: author options plus an optional "Others"."""

    question_type: Literal["Multiple Choice", "Dropdown"]
    options: list[OptionDefinition] = Field(..., min_length=1)


class RatingQuestionDefinition(_QuestionDefinitionBase):
    """Rating question: options are the scale points."""

    question_type: Literal["Rating"]
    options: list[OptionDefinition] = Field(..., min_length=1)


class OpenEndedQuestionDefinition(_QuestionDefinitionBase):
    """Free-text question. Supplying ``options`` is rejected."""

    question_type: Literal["Open-ended"]


QuestionDefinition = Annotated[
    Union[ChoiceQuestionDefinition, RatingQuestionDefinition, OpenEndedQuestionDefinition],
    Field(discriminator="question_type"),
]


class SectionDefinition(BaseSchema):
    """Section of the authoring payload."""

    section_title: BoundedText
    section_description: Optional[str] = None
    questions: list[QuestionDefinition] = Field(..., min_length=1)


class SurveyDefinition(BaseSchema):
    """Nested survey definition accepted by ``POST /surveys``."""

    title: BoundedText
    description: Optional[str] = None
    start_date: date
    end_date: date
    sections: list[SectionDefinition] = Field(..., min_length=1)

    @model_validator(mode="after")
    def check_validity_window(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


# ---------------------------------------------------------------------------
# Schema tree returned to clients
# ---------------------------------------------------------------------------

class OptionOut(BaseSchema):
    option_id: UUID
    option_text: str
    option_value: Optional[int] = None
    is_other_option: bool


class QuestionOut(BaseSchema):
    question_id: UUID
    question_text: str
    question_type: str
    is_required: bool
    options: list[OptionOut] = []


class SectionOut(BaseSchema):
    section_id: UUID
    section_title: str
    section_description: Optional[str] = None
    questions: list[QuestionOut] = []


class SurveySummary(BaseSchema):
    """Survey header used by listings."""

    survey_id: UUID
    title: str
    description: Optional[str] = None
    start_date: date
    end_date: date
    created_at: datetime
    is_open: bool


class SurveyTree(SurveySummary):
    """Survey with its full section/question/option schema."""

    sections: list[SectionOut] = []
