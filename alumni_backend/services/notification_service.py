"""
Service for managing alumni notifications.

Handles:
- Creating notifications (survey invitations)
- Fanning a notification out to every alumni with one INSERT ... SELECT
- Marking a survey invitation read once the alumni has responded
- Listing an alumni's unread notifications

Methods that write do not commit; the caller owns the transaction so that
notification rows land atomically with the survey or response that caused them.
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, false, func, literal, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from alumni_backend.config import get_settings
from alumni_backend.models.alumni import Alumni
from alumni_backend.models.base import AdaptiveUUID, NotificationType
from alumni_backend.models.notification import AlumniNotification, Notification
from alumni_backend.models.survey import Survey
from alumni_backend.schemas.notification import NotificationOut
from alumni_backend.utils.datetime_helpers import ensure_utc

logger = logging.getLogger(__name__)


class NotificationService:
    """Service for creating, fanning out and reading notifications."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.settings = get_settings()

    async def create_notification(
        self,
        *,
        notification_type: NotificationType,
        title: str,
        message: str,
        alert: Optional[str] = None,
        link: Optional[str] = None,
        survey_id: Optional[UUID] = None,
    ) -> Notification:
        """Create a notification row (no recipients yet)."""
        notification = Notification(
            notification_type=notification_type.value,
            alert=alert,
            title=title,
            message=message,
            link=link,
            survey_id=survey_id,
        )
        self.db.add(notification)
        await self.db.flush()
        return notification

    async def fan_out_to_all_alumni(self, notification_id: UUID) -> int:
        """Link a notification to every alumni as unread.

        Issued as a single INSERT ... SELECT so the statement count does not
        grow with the alumni population.

        Returns:
            int: Number of recipient rows inserted (as reported by the driver)
        """
        stmt = AlumniNotification.__table__.insert().from_select(
            ["alumni_id", "notification_id", "is_read"],
            select(
                Alumni.alumni_id,
                literal(notification_id, AdaptiveUUID()),
                false(),
            ),
        )
        result = await self.db.execute(stmt)
        recipients = max(result.rowcount or 0, 0)
        logger.info(f"Fanned out notification {notification_id} to {recipients} alumni")
        return recipients

    async def create_survey_invitation(self, survey: Survey) -> Notification:
        """Create the new-survey invitation and deliver it to every alumni."""
        notification = await self.create_notification(
            notification_type=NotificationType.SURVEY_INVITATION,
            alert=self.settings.survey_invitation_alert,
            title=survey.title,
            message=(
                f"A new survey has been created: {survey.title}. "
                f"Please participate before {survey.end_date.isoformat()}"
            ),
            link=self.settings.survey_link(survey.survey_id),
            survey_id=survey.survey_id,
        )
        await self.fan_out_to_all_alumni(notification.notification_id)
        return notification

    async def mark_survey_invitation_read(self, alumni_id: UUID, survey_id: UUID) -> bool:
        """Mark the alumni's invitation for ``survey_id`` as read.

        Returns:
            bool: True if an unread invitation was found and updated
        """
        invitation_ids = select(Notification.notification_id).where(
            Notification.survey_id == survey_id,
            Notification.notification_type == NotificationType.SURVEY_INVITATION.value,
        )
        stmt = (
            update(AlumniNotification)
            .where(
                AlumniNotification.alumni_id == alumni_id,
                AlumniNotification.notification_id.in_(invitation_ids),
                AlumniNotification.is_read.is_(False),
            )
            .values(is_read=True, updated_at=func.now())
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        updated = bool(result.rowcount)
        if not updated:
            logger.info(f"No unread invitation for alumni {alumni_id} on survey {survey_id}")
        return updated

    async def delete_for_survey(self, survey_id: UUID) -> None:
        """Remove every notification (and its recipient links) tied to a survey."""
        notification_ids = select(Notification.notification_id).where(Notification.survey_id == survey_id)
        await self.db.execute(
            delete(AlumniNotification)
            .where(AlumniNotification.notification_id.in_(notification_ids))
            .execution_options(synchronize_session=False)
        )
        await self.db.execute(
            delete(Notification)
            .where(Notification.survey_id == survey_id)
            .execution_options(synchronize_session=False)
        )

    async def list_unread(self, alumni_id: UUID) -> List[NotificationOut]:
        """Return the alumni's unread notifications, newest first."""
        result = await self.db.execute(
            select(Notification, AlumniNotification)
            .join(AlumniNotification, AlumniNotification.notification_id == Notification.notification_id)
            .where(
                AlumniNotification.alumni_id == alumni_id,
                AlumniNotification.is_read.is_(False),
            )
            .order_by(AlumniNotification.created_at.desc())
        )
        return [
            NotificationOut(
                notification_id=notification.notification_id,
                notification_type=notification.notification_type,
                alert=notification.alert,
                title=notification.title,
                message=notification.message,
                link=notification.link,
                survey_id=notification.survey_id,
                is_read=link_row.is_read,
                received_at=ensure_utc(link_row.created_at),
            )
            for notification, link_row in result.all()
        ]
