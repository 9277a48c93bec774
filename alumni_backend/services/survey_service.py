"""Survey authoring, schema fetch and catalogue service."""
from __future__ import annotations

import logging
import uuid
from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, exists, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from alumni_backend.models.base import OTHER_OPTION_TEXT, QuestionType
from alumni_backend.models.feedback_response import FeedbackResponse
from alumni_backend.models.survey import Survey, SurveyOption, SurveyQuestion, SurveySection
from alumni_backend.schemas.survey import SurveyDefinition, SurveySummary, SurveyTree
from alumni_backend.services.notification_service import NotificationService
from alumni_backend.utils.exceptions import InternalServiceError, NotFoundError

logger = logging.getLogger(__name__)


async def load_survey_tree(db: AsyncSession, survey_id: UUID) -> Optional[Survey]:
    """Load a survey with sections, questions and options eagerly, in position order."""
    result = await db.execute(
        select(Survey)
        .where(Survey.survey_id == survey_id)
        .options(
            selectinload(Survey.sections)
            .selectinload(SurveySection.questions)
            .selectinload(SurveyQuestion.options)
        )
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


def _build_question(survey_id: UUID, position: int, definition) -> SurveyQuestion:
    question_type = QuestionType(definition.question_type)
    question = SurveyQuestion(
        survey_id=survey_id,
        question_text=definition.question_text,
        question_type=question_type.value,
        is_required=definition.is_required,
        position=position,
    )

    if question_type.has_options:
        for option_position, option_definition in enumerate(definition.options):
            question.options.append(
                SurveyOption(
                    option_text=option_definition.option_text,
                    option_value=option_definition.option_value,
                    is_other_option=False,
                    position=option_position,
                )
            )

    if question_type.allows_other_option and definition.is_other_option:
        question.options.append(
            SurveyOption(
                option_text=OTHER_OPTION_TEXT,
                option_value=None,
                is_other_option=True,
                position=len(question.options),
            )
        )

    return question


class SurveyService:
    """Service for building, reading and deleting surveys."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.notification_service = NotificationService(db)

    async def create_survey(self, definition: SurveyDefinition) -> SurveyTree:
        """Materialize a validated survey definition in a single transaction.

        Sections, questions and options keep the order of the payload. Each
        Multiple Choice/Dropdown question that asks for it gets one trailing
        "Others" option. The new-survey invitation is fanned out to every
        alumni inside the same transaction.

        Raises:
            InternalServiceError: If persistence fails (everything is rolled back)
        """
        survey = Survey(
            survey_id=uuid.uuid4(),
            title=definition.title,
            description=definition.description,
            start_date=definition.start_date,
            end_date=definition.end_date,
        )

        for section_position, section_definition in enumerate(definition.sections):
            section = SurveySection(
                section_title=section_definition.section_title,
                section_description=section_definition.section_description,
                position=section_position,
            )
            for question_position, question_definition in enumerate(section_definition.questions):
                section.questions.append(
                    _build_question(survey.survey_id, question_position, question_definition)
                )
            survey.sections.append(section)

        try:
            self.db.add(survey)
            await self.db.flush()
            await self.notification_service.create_survey_invitation(survey)
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error(f"Failed to create survey {definition.title!r}: {exc}")
            raise InternalServiceError(
                "survey_creation_failed", "An error occurred while creating the survey."
            ) from exc

        logger.info(
            f"Created survey {survey.survey_id} with {len(definition.sections)} sections"
        )
        return await self.get_survey_with_schema(survey.survey_id)

    async def get_survey_with_schema(self, survey_id: UUID) -> SurveyTree:
        """Return the survey's full nested schema.

        Raises:
            NotFoundError: If the survey does not exist
        """
        survey = await load_survey_tree(self.db, survey_id)
        if not survey:
            raise NotFoundError("survey_not_found", "Survey not found")
        return SurveyTree.model_validate(survey)

    async def delete_survey(self, survey_id: UUID) -> None:
        """Delete a survey together with its schema, responses and notifications."""
        survey = await self.db.get(Survey, survey_id)
        if not survey:
            raise NotFoundError("survey_not_found", "Survey not found")

        try:
            await self.notification_service.delete_for_survey(survey_id)
            # Sections, questions, options and responses go with the survey via ON DELETE CASCADE
            await self.db.execute(
                delete(Survey)
                .where(Survey.survey_id == survey_id)
                .execution_options(synchronize_session=False)
            )
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error(f"Failed to delete survey {survey_id}: {exc}")
            raise InternalServiceError(
                "survey_deletion_failed", "An error occurred while deleting the survey."
            ) from exc

        self.db.expunge(survey)
        logger.info(f"Deleted survey {survey_id}")

    async def list_surveys(self) -> List[SurveySummary]:
        """All surveys, newest first."""
        result = await self.db.execute(select(Survey).order_by(Survey.created_at.desc()))
        return [SurveySummary.model_validate(survey) for survey in result.scalars().all()]

    async def list_unanswered_surveys(self, alumni_id: UUID) -> List[SurveySummary]:
        """Surveys the alumni has not responded to yet, newest first."""
        return await self._list_by_participation(alumni_id, answered=False)

    async def list_answered_surveys(self, alumni_id: UUID) -> List[SurveySummary]:
        """Surveys the alumni has already responded to, newest first."""
        return await self._list_by_participation(alumni_id, answered=True)

    async def _list_by_participation(self, alumni_id: UUID, *, answered: bool) -> List[SurveySummary]:
        responded = exists().where(
            FeedbackResponse.survey_id == Survey.survey_id,
            FeedbackResponse.alumni_id == alumni_id,
        )
        result = await self.db.execute(
            select(Survey)
            .where(responded if answered else ~responded)
            .order_by(Survey.created_at.desc())
        )
        return [SurveySummary.model_validate(survey) for survey in result.scalars().all()]
