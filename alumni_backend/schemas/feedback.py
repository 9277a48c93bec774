"""Pydantic schemas for survey response submission and reporting."""
from __future__ import annotations

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from alumni_backend.schemas.base import BaseSchema
from alumni_backend.schemas.survey import OptionOut


class AnswerSubmission(BaseSchema):
    """Individual answer payload."""

    question_id: UUID
    option_id: Optional[UUID] = None
    response_text: Optional[str] = None


class SurveySubmission(BaseSchema):
    """Survey response payload from the respondent."""

    responses: list[AnswerSubmission] = Field(..., min_length=1)


class SubmissionResult(BaseSchema):
    """Returned after a successful submission.

    ``order`` is the respondent's position among submissions to the survey.
    It is computed before insert and may repeat under concurrent submissions.
    """

    response_id: UUID
    survey_id: UUID
    order: int


# ---------------------------------------------------------------------------
# Per-survey report (every respondent under every question)
# ---------------------------------------------------------------------------

class RespondentAnswer(BaseSchema):
    alumni_id: UUID
    alumni_email: Optional[str] = None
    alumni_first_name: Optional[str] = None
    alumni_last_name: Optional[str] = None
    gender: Optional[str] = None
    graduation_year: Optional[int] = None
    date_of_birth: Optional[date] = None
    major: Optional[str] = None
    response_id: UUID
    option_id: Optional[UUID] = None
    option_text: Optional[str] = None
    option_value: Optional[int] = None
    response_text: Optional[str] = None


class QuestionReport(BaseSchema):
    question_id: UUID
    question_text: str
    question_type: str
    is_required: bool
    options: list[OptionOut] = []
    responses: list[RespondentAnswer] = []


class SectionReport(BaseSchema):
    section_id: UUID
    section_title: str
    section_description: Optional[str] = None
    questions: list[QuestionReport] = []


class SurveyResponsesReport(BaseSchema):
    survey_id: UUID
    title: str
    description: Optional[str] = None
    total_responses: int
    sections: list[SectionReport] = []


# ---------------------------------------------------------------------------
# Single respondent answer sheet
# ---------------------------------------------------------------------------

class SelectedOption(BaseSchema):
    option_id: UUID
    option_text: str
    option_value: Optional[int] = None


class QuestionAnswer(BaseSchema):
    response_text: Optional[str] = None
    selected_option: Optional[SelectedOption] = None


class AnsweredQuestion(BaseSchema):
    question_id: UUID
    question_text: str
    question_type: str
    is_required: bool
    options: list[OptionOut] = []
    response: Optional[QuestionAnswer] = None


class AnsweredSection(BaseSchema):
    section_id: UUID
    section_title: str
    section_description: Optional[str] = None
    questions: list[AnsweredQuestion] = []


class RespondentSummary(BaseSchema):
    alumni_id: UUID
    first_name: str
    last_name: str
    email: str


class RespondentAnswerSheet(BaseSchema):
    response_id: UUID
    survey_id: UUID
    title: str
    description: Optional[str] = None
    response_date: datetime
    alumni: RespondentSummary
    sections: list[AnsweredSection] = []


# ---------------------------------------------------------------------------
# Response listing
# ---------------------------------------------------------------------------

class ResponseAlumni(BaseSchema):
    alumni_id: UUID
    alumni_name: str
    alumni_email: str


class ResponseListItem(BaseSchema):
    response_id: UUID
    survey_id: UUID
    survey_title: str
    response_date: datetime
    alumni: ResponseAlumni
