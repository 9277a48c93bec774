"""Schemas for the notification inbox."""
from datetime import datetime
from typing import Optional
from uuid import UUID

from alumni_backend.schemas.base import BaseSchema


class NotificationOut(BaseSchema):
    """Notification as seen by one recipient."""

    notification_id: UUID
    notification_type: str
    alert: Optional[str] = None
    title: str
    message: str
    link: Optional[str] = None
    survey_id: Optional[UUID] = None
    is_read: bool
    received_at: datetime
