"""Quick survey response model: a single checkbox poll answered once per alumni."""
import uuid

from sqlalchemy import Column, DateTime, ForeignKey, JSON, String

from alumni_backend.database import Base
from alumni_backend.models.base import get_uuid_column, get_current_utc


class QuickSurveyResponse(Base):
    """Latest quick survey answer of an alumni."""

    __tablename__ = "quick_survey_responses"

    quick_survey_response_id = get_uuid_column(primary_key=True, default=uuid.uuid4)
    alumni_id = get_uuid_column(
        ForeignKey("alumni.alumni_id", ondelete="CASCADE"), nullable=False, unique=True
    )
    selected_options = Column(JSON, nullable=False)
    other_response = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), default=get_current_utc, nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=get_current_utc, onupdate=get_current_utc, nullable=False
    )

    def __repr__(self) -> str:
        return f"<QuickSurveyResponse(alumni_id={self.alumni_id})>"
