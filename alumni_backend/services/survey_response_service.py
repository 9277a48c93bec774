"""Survey response submission: validation against the survey's schema and persistence."""
from __future__ import annotations

import logging
from collections import Counter
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from alumni_backend.models.feedback_response import FeedbackResponse, QuestionResponse
from alumni_backend.models.survey import SurveyOption, SurveyQuestion
from alumni_backend.schemas.feedback import AnswerSubmission, SubmissionResult, SurveySubmission
from alumni_backend.services.notification_service import NotificationService
from alumni_backend.services.survey_service import load_survey_tree
from alumni_backend.utils.exceptions import (
    ConflictError,
    InternalServiceError,
    InvalidPayloadError,
    NotFoundError,
)

logger = logging.getLogger(__name__)

DUPLICATE_RESPONSE_INDEX = "ix_feedback_responses_survey_alumni"


def _clean_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _is_duplicate_response_error(exc: IntegrityError) -> bool:
    message = str(exc).lower()
    if DUPLICATE_RESPONSE_INDEX in message:
        return True
    return "unique" in message and "feedback_responses" in message


def _conflict() -> ConflictError:
    return ConflictError(
        "already_responded", "You have already submitted a response for this survey."
    )


class SurveyResponseService:
    """Validates and stores an alumni's answers to a survey."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.notification_service = NotificationService(db)

    async def has_responded(self, survey_id: UUID, alumni_id: UUID) -> bool:
        """Fast-path duplicate check; the unique index stays authoritative."""
        result = await self.db.execute(
            select(FeedbackResponse.response_id).where(
                FeedbackResponse.survey_id == survey_id,
                FeedbackResponse.alumni_id == alumni_id,
            )
        )
        return result.first() is not None

    async def count_responses(self, survey_id: UUID) -> int:
        result = await self.db.execute(
            select(func.count())
            .select_from(FeedbackResponse)
            .where(FeedbackResponse.survey_id == survey_id)
        )
        return int(result.scalar_one())

    async def submit_response(
        self,
        survey_id: UUID,
        alumni_id: UUID,
        submission: SurveySubmission,
    ) -> SubmissionResult:
        """Validate a submission against the survey schema and persist it atomically.

        Validation runs fully before any write:
        1. every question_id belongs to this survey and appears once
        2. every question of the survey is answered (required ones with content)
        3. every option_id belongs to its question, and choosing the "Others"
           option comes with response text

        On success the alumni's invitation for the survey is marked read.

        Raises:
            NotFoundError: Unknown survey
            ConflictError: The alumni already responded
            InvalidPayloadError: Any validation rule failed
            InternalServiceError: Storage failure (rolled back)
        """
        survey = await load_survey_tree(self.db, survey_id)
        if not survey:
            raise NotFoundError("survey_not_found", "Survey not found")

        if await self.has_responded(survey_id, alumni_id):
            logger.info(f"Alumni {alumni_id} attempted to resubmit survey {survey_id}")
            raise _conflict()

        questions = [question for section in survey.sections for question in section.questions]
        self._validate(questions, submission.responses)

        try:
            prior_responses = await self.count_responses(survey_id)
            feedback = FeedbackResponse(survey_id=survey_id, alumni_id=alumni_id)
            for answer in submission.responses:
                feedback.question_responses.append(
                    QuestionResponse(
                        question_id=answer.question_id,
                        option_id=answer.option_id,
                        response_text=_clean_text(answer.response_text),
                    )
                )
            self.db.add(feedback)
            await self.db.flush()
            await self.notification_service.mark_survey_invitation_read(alumni_id, survey_id)
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            if _is_duplicate_response_error(exc):
                logger.info(f"Concurrent duplicate submission by alumni {alumni_id} on survey {survey_id}")
                raise _conflict() from exc
            logger.error(f"Integrity error storing response for survey {survey_id}: {exc}")
            raise InternalServiceError(
                "response_submission_failed", "An error occurred while submitting the survey response."
            ) from exc
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error(f"Failed to store response for survey {survey_id}: {exc}")
            raise InternalServiceError(
                "response_submission_failed", "An error occurred while submitting the survey response."
            ) from exc

        logger.info(
            f"Stored response {feedback.response_id} for alumni {alumni_id} on survey {survey_id}"
        )
        return SubmissionResult(
            response_id=feedback.response_id,
            survey_id=survey_id,
            order=prior_responses + 1,
        )

    @staticmethod
    def _validate(questions: List[SurveyQuestion], answers: List[AnswerSubmission]) -> None:
        questions_by_id: Dict[UUID, SurveyQuestion] = {q.question_id: q for q in questions}

        foreign = [str(a.question_id) for a in answers if a.question_id not in questions_by_id]
        if foreign:
            raise InvalidPayloadError(
                "question_not_in_survey",
                "The question does not belong to the specified survey.",
                details={"question_ids": foreign},
            )

        repeated = [str(qid) for qid, count in Counter(a.question_id for a in answers).items() if count > 1]
        if repeated:
            raise InvalidPayloadError(
                "duplicate_question_answer",
                "Each question may only be answered once.",
                details={"question_ids": repeated},
            )

        answers_by_question = {a.question_id: a for a in answers}
        unanswered = []
        for question in questions:
            answer = answers_by_question.get(question.question_id)
            if answer is None:
                unanswered.append(str(question.question_id))
            elif question.is_required and answer.option_id is None and not _clean_text(answer.response_text):
                unanswered.append(str(question.question_id))
        if unanswered:
            raise InvalidPayloadError(
                "unanswered_questions",
                "All questions must be answered.",
                details={"question_ids": unanswered},
            )

        for answer in answers:
            if answer.option_id is None:
                continue
            question = questions_by_id[answer.question_id]
            options: Dict[UUID, SurveyOption] = {o.option_id: o for o in question.options}
            option = options.get(answer.option_id)
            if option is None:
                raise InvalidPayloadError(
                    "option_not_in_question",
                    f"The selected option does not belong to question {question.question_id}.",
                    details={"question_id": str(question.question_id), "option_id": str(answer.option_id)},
                )
            if option.is_other_option and not _clean_text(answer.response_text):
                raise InvalidPayloadError(
                    "other_response_required",
                    f'Response text is required when selecting "Others" for question {question.question_id}.',
                    details={"question_id": str(question.question_id)},
                )
