"""
Notification models.

A Notification is created once per event (e.g. a new survey) and linked to
each recipient through AlumniNotification, which carries the read flag.
Survey invitations reference their survey by foreign key; ``link`` is only
the display path handed to the frontend.
"""
import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, Text, false, func
from sqlalchemy.orm import relationship

from alumni_backend.database import Base
from alumni_backend.models.base import get_uuid_column, get_current_utc


class Notification(Base):
    """Notification content shared by all recipients."""

    __tablename__ = "notifications"

    notification_id = get_uuid_column(primary_key=True, default=uuid.uuid4)
    notification_type = Column(String(50), nullable=False)  # NotificationType value
    alert = Column(String(50), nullable=True)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    link = Column(String(255), nullable=True)
    survey_id = get_uuid_column(
        ForeignKey("surveys.survey_id", ondelete="CASCADE"), nullable=True
    )
    created_at = Column(DateTime(timezone=True), default=get_current_utc, nullable=False)

    recipients = relationship(
        "AlumniNotification",
        back_populates="notification",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("ix_notifications_survey_type", "survey_id", "notification_type"),
    )

    def __repr__(self) -> str:
        return f"<Notification(id={self.notification_id}, type={self.notification_type})>"


class AlumniNotification(Base):
    """Per-alumni delivery row for a notification."""

    __tablename__ = "alumni_notifications"

    alumni_id = get_uuid_column(
        ForeignKey("alumni.alumni_id", ondelete="CASCADE"), primary_key=True
    )
    notification_id = get_uuid_column(
        ForeignKey("notifications.notification_id", ondelete="CASCADE"), primary_key=True
    )
    is_read = Column(Boolean, nullable=False, default=False, server_default=false())
    # server defaults so bulk INSERT ... SELECT rows get timestamps too
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    notification = relationship("Notification", back_populates="recipients")

    __table_args__ = (
        Index("ix_alumni_notifications_alumni_read", "alumni_id", "is_read"),
    )
