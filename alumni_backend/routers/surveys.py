"""Router for survey authoring, schema fetch and response submission."""
from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from alumni_backend.database import get_db
from alumni_backend.dependencies import get_admin_alumni, get_current_alumni
from alumni_backend.models.alumni import Alumni
from alumni_backend.schemas.base import ApiResponse
from alumni_backend.schemas.feedback import SubmissionResult, SurveyResponsesReport, SurveySubmission
from alumni_backend.schemas.survey import SurveyDefinition, SurveySummary, SurveyTree
from alumni_backend.services.aggregation_service import SurveyAggregationService
from alumni_backend.services.survey_response_service import SurveyResponseService
from alumni_backend.services.survey_service import SurveyService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/surveys", tags=["surveys"])


@router.post("", response_model=ApiResponse[SurveyTree], status_code=status.HTTP_201_CREATED)
async def create_survey(
    definition: SurveyDefinition,
    admin: Alumni = Depends(get_admin_alumni),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[SurveyTree]:
    """Create a survey with its sections, questions and options, and invite every alumni."""
    survey = await SurveyService(db).create_survey(definition)
    logger.info(f"Admin {admin.email} created survey {survey.survey_id}")
    return ApiResponse(data=survey, message="Survey created successfully")


@router.get("", response_model=ApiResponse[list[SurveySummary]])
async def list_surveys(
    _admin: Alumni = Depends(get_admin_alumni),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[list[SurveySummary]]:
    surveys = await SurveyService(db).list_surveys()
    return ApiResponse(data=surveys)


@router.get("/unanswered", response_model=ApiResponse[list[SurveySummary]])
async def list_unanswered_surveys(
    alumni: Alumni = Depends(get_current_alumni),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[list[SurveySummary]]:
    """Surveys the caller has not answered yet."""
    surveys = await SurveyService(db).list_unanswered_surveys(alumni.alumni_id)
    return ApiResponse(data=surveys)


@router.get("/answered", response_model=ApiResponse[list[SurveySummary]])
async def list_answered_surveys(
    alumni: Alumni = Depends(get_current_alumni),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[list[SurveySummary]]:
    """Surveys the caller has already answered."""
    surveys = await SurveyService(db).list_answered_surveys(alumni.alumni_id)
    return ApiResponse(data=surveys)


@router.get("/{survey_id}", response_model=ApiResponse[SurveyTree])
async def get_survey(
    survey_id: UUID,
    _alumni: Alumni = Depends(get_current_alumni),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[SurveyTree]:
    """Full survey schema in authoring order."""
    survey = await SurveyService(db).get_survey_with_schema(survey_id)
    return ApiResponse(data=survey)


@router.delete("/{survey_id}", response_model=ApiResponse[None])
async def delete_survey(
    survey_id: UUID,
    admin: Alumni = Depends(get_admin_alumni),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[None]:
    await SurveyService(db).delete_survey(survey_id)
    logger.info(f"Admin {admin.email} deleted survey {survey_id}")
    return ApiResponse(message="Survey deleted successfully")


@router.post(
    "/{survey_id}/responses",
    response_model=ApiResponse[SubmissionResult],
    status_code=status.HTTP_201_CREATED,
)
async def submit_survey_response(
    survey_id: UUID,
    submission: SurveySubmission,
    alumni: Alumni = Depends(get_current_alumni),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[SubmissionResult]:
    """Submit the caller's answers to every question of the survey."""
    result = await SurveyResponseService(db).submit_response(survey_id, alumni.alumni_id, submission)
    return ApiResponse(data=result, message="Survey response submitted successfully")


@router.get("/{survey_id}/responses", response_model=ApiResponse[SurveyResponsesReport])
async def get_survey_responses(
    survey_id: UUID,
    _admin: Alumni = Depends(get_admin_alumni),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[SurveyResponsesReport]:
    """Every respondent's answer under every question of the survey."""
    report = await SurveyAggregationService(db).get_responses_by_survey(survey_id)
    return ApiResponse(data=report)
