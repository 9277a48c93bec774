"""Projection of stored survey responses back onto the survey's schema tree."""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from alumni_backend.models.feedback_response import FeedbackResponse, QuestionResponse
from alumni_backend.models.survey import SurveyQuestion
from alumni_backend.schemas.feedback import (
    AnsweredQuestion,
    AnsweredSection,
    QuestionAnswer,
    QuestionReport,
    RespondentAnswer,
    RespondentAnswerSheet,
    RespondentSummary,
    ResponseAlumni,
    ResponseListItem,
    SectionReport,
    SelectedOption,
    SurveyResponsesReport,
)
from alumni_backend.schemas.survey import OptionOut
from alumni_backend.services.survey_service import load_survey_tree
from alumni_backend.utils.datetime_helpers import ensure_utc
from alumni_backend.utils.exceptions import NotFoundError

logger = logging.getLogger(__name__)

_FEEDBACK_LOAD_OPTIONS = (
    selectinload(FeedbackResponse.alumni),
    selectinload(FeedbackResponse.question_responses).selectinload(QuestionResponse.option),
)


def _options_out(question: SurveyQuestion) -> List[OptionOut]:
    return [OptionOut.model_validate(option) for option in question.options]


def _respondent_answer(feedback: FeedbackResponse, answer: Optional[QuestionResponse]) -> RespondentAnswer:
    alumni = feedback.alumni
    option = answer.option if answer else None
    return RespondentAnswer(
        alumni_id=feedback.alumni_id,
        alumni_email=alumni.email if alumni else None,
        alumni_first_name=alumni.first_name if alumni else None,
        alumni_last_name=alumni.last_name if alumni else None,
        gender=alumni.gender if alumni else None,
        graduation_year=alumni.graduation_year if alumni else None,
        date_of_birth=alumni.date_of_birth if alumni else None,
        major=alumni.major if alumni else None,
        response_id=feedback.response_id,
        option_id=option.option_id if option else None,
        option_text=option.option_text if option else None,
        option_value=option.option_value if option else None,
        response_text=answer.response_text if answer else None,
    )


def _question_answer(answer: Optional[QuestionResponse]) -> Optional[QuestionAnswer]:
    if answer is None:
        return None
    option = answer.option
    return QuestionAnswer(
        response_text=answer.response_text,
        selected_option=SelectedOption(
            option_id=option.option_id,
            option_text=option.option_text,
            option_value=option.option_value,
        ) if option else None,
    )


class SurveyAggregationService:
    """Builds the per-survey and per-respondent response reports."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_responses_by_survey(self, survey_id: UUID) -> SurveyResponsesReport:
        """Every respondent's answer under every question, in schema order.

        A respondent with no answer for a question gets a row with null answer
        fields rather than an error.

        Raises:
            NotFoundError: If the survey does not exist
        """
        survey = await load_survey_tree(self.db, survey_id)
        if not survey:
            raise NotFoundError("survey_not_found", "Survey not found")

        result = await self.db.execute(
            select(FeedbackResponse)
            .where(FeedbackResponse.survey_id == survey_id)
            .options(*_FEEDBACK_LOAD_OPTIONS)
            .execution_options(populate_existing=True)
            .order_by(FeedbackResponse.response_date, FeedbackResponse.response_id)
        )
        feedbacks = result.scalars().all()

        answers: Dict[Tuple[UUID, UUID], QuestionResponse] = {
            (answer.response_id, answer.question_id): answer
            for feedback in feedbacks
            for answer in feedback.question_responses
        }

        sections = [
            SectionReport(
                section_id=section.section_id,
                section_title=section.section_title,
                section_description=section.section_description,
                questions=[
                    QuestionReport(
                        question_id=question.question_id,
                        question_text=question.question_text,
                        question_type=question.question_type,
                        is_required=question.is_required,
                        options=_options_out(question),
                        responses=[
                            _respondent_answer(
                                feedback, answers.get((feedback.response_id, question.question_id))
                            )
                            for feedback in feedbacks
                        ],
                    )
                    for question in section.questions
                ],
            )
            for section in survey.sections
        ]

        return SurveyResponsesReport(
            survey_id=survey.survey_id,
            title=survey.title,
            description=survey.description,
            total_responses=len(feedbacks),
            sections=sections,
        )

    async def get_responses_by_respondent(self, response_id: UUID) -> RespondentAnswerSheet:
        """One respondent's complete answer sheet rooted at their FeedbackResponse.

        Raises:
            NotFoundError: If the response does not exist
        """
        result = await self.db.execute(
            select(FeedbackResponse)
            .where(FeedbackResponse.response_id == response_id)
            .options(*_FEEDBACK_LOAD_OPTIONS)
            .execution_options(populate_existing=True)
        )
        feedback = result.scalar_one_or_none()
        if not feedback:
            raise NotFoundError("response_not_found", "Feedback response not found")

        survey = await load_survey_tree(self.db, feedback.survey_id)
        if not survey:  # pragma: no cover - FK cascade removes responses with their survey
            raise NotFoundError("survey_not_found", "Survey not found")

        answers = {answer.question_id: answer for answer in feedback.question_responses}
        alumni = feedback.alumni

        return RespondentAnswerSheet(
            response_id=feedback.response_id,
            survey_id=survey.survey_id,
            title=survey.title,
            description=survey.description,
            response_date=ensure_utc(feedback.response_date),
            alumni=RespondentSummary(
                alumni_id=alumni.alumni_id,
                first_name=alumni.first_name,
                last_name=alumni.last_name,
                email=alumni.email,
            ),
            sections=[
                AnsweredSection(
                    section_id=section.section_id,
                    section_title=section.section_title,
                    section_description=section.section_description,
                    questions=[
                        AnsweredQuestion(
                            question_id=question.question_id,
                            question_text=question.question_text,
                            question_type=question.question_type,
                            is_required=question.is_required,
                            options=_options_out(question),
                            response=_question_answer(answers.get(question.question_id)),
                        )
                        for question in section.questions
                    ],
                )
                for section in survey.sections
            ],
        )

    async def list_all_responses(self) -> List[ResponseListItem]:
        """Every feedback response with its respondent and survey title, newest first."""
        result = await self.db.execute(
            select(FeedbackResponse)
            .options(selectinload(FeedbackResponse.alumni), selectinload(FeedbackResponse.survey))
            .order_by(FeedbackResponse.response_date.desc())
        )
        return [
            ResponseListItem(
                response_id=feedback.response_id,
                survey_id=feedback.survey_id,
                survey_title=feedback.survey.title,
                response_date=ensure_utc(feedback.response_date),
                alumni=ResponseAlumni(
                    alumni_id=feedback.alumni.alumni_id,
                    alumni_name=feedback.alumni.full_name,
                    alumni_email=feedback.alumni.email,
                ),
            )
            for feedback in result.scalars().all()
        ]
