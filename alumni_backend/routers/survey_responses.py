"""Router for browsing stored survey responses (admin only)."""
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from alumni_backend.database import get_db
from alumni_backend.dependencies import get_admin_alumni
from alumni_backend.models.alumni import Alumni
from alumni_backend.schemas.base import ApiResponse
from alumni_backend.schemas.feedback import RespondentAnswerSheet, ResponseListItem
from alumni_backend.services.aggregation_service import SurveyAggregationService

router = APIRouter(prefix="/survey-responses", tags=["survey-responses"])


@router.get("", response_model=ApiResponse[list[ResponseListItem]])
async def list_survey_responses(
    _admin: Alumni = Depends(get_admin_alumni),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[list[ResponseListItem]]:
    responses = await SurveyAggregationService(db).list_all_responses()
    return ApiResponse(data=responses)


@router.get("/{response_id}", response_model=ApiResponse[RespondentAnswerSheet])
async def get_survey_response(
    response_id: UUID,
    _admin: Alumni = Depends(get_admin_alumni),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[RespondentAnswerSheet]:
    """One respondent's answer sheet laid over the survey schema."""
    sheet = await SurveyAggregationService(db).get_responses_by_respondent(response_id)
    return ApiResponse(data=sheet)
