"""Router for the alumni notification inbox."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from alumni_backend.database import get_db
from alumni_backend.dependencies import get_current_alumni
from alumni_backend.models.alumni import Alumni
from alumni_backend.schemas.base import ApiResponse
from alumni_backend.schemas.notification import NotificationOut
from alumni_backend.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=ApiResponse[list[NotificationOut]])
async def list_unread_notifications(
    alumni: Alumni = Depends(get_current_alumni),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[list[NotificationOut]]:
    """Unread notifications for the caller, newest first."""
    notifications = await NotificationService(db).list_unread(alumni.alumni_id)
    return ApiResponse(data=notifications)
