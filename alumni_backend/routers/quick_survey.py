"""Router for the one-question quick survey poll."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from alumni_backend.database import get_db
from alumni_backend.dependencies import get_current_alumni
from alumni_backend.models.alumni import Alumni
from alumni_backend.schemas.base import ApiResponse
from alumni_backend.schemas.quick_survey import QuickSurveyStatus, QuickSurveySubmission
from alumni_backend.services.quick_survey_service import QuickSurveyService

router = APIRouter(prefix="/quick-survey", tags=["quick-survey"])


@router.post("", response_model=ApiResponse[QuickSurveyStatus])
async def submit_quick_survey(
    submission: QuickSurveySubmission,
    alumni: Alumni = Depends(get_current_alumni),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[QuickSurveyStatus]:
    """Store the caller's quick survey answer, replacing any earlier one."""
    result = await QuickSurveyService(db).submit_quick_survey(alumni.alumni_id, submission)
    return ApiResponse(data=result, message="Quick survey submitted successfully")


@router.get("/status", response_model=ApiResponse[QuickSurveyStatus])
async def get_quick_survey_status(
    alumni: Alumni = Depends(get_current_alumni),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[QuickSurveyStatus]:
    result = await QuickSurveyService(db).get_quick_survey_status(alumni.alumni_id)
    return ApiResponse(data=result)
