"""Survey response models: one FeedbackResponse per alumni per survey."""
from __future__ import annotations

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Index, Text
from sqlalchemy.orm import relationship

from alumni_backend.database import Base
from alumni_backend.models.base import get_uuid_column, get_current_utc


class FeedbackResponse(Base):
    """One alumni's completed submission for one survey."""

    __tablename__ = "feedback_responses"

    response_id = get_uuid_column(primary_key=True, default=uuid.uuid4)
    survey_id = get_uuid_column(
        ForeignKey("surveys.survey_id", ondelete="CASCADE"), nullable=False, index=True
    )
    alumni_id = get_uuid_column(
        ForeignKey("alumni.alumni_id", ondelete="CASCADE"), nullable=False, index=True
    )
    response_date = Column(DateTime(timezone=True), nullable=False, default=get_current_utc)

    survey = relationship("Survey", back_populates="feedback_responses")
    alumni = relationship("Alumni")
    question_responses = relationship(
        "QuestionResponse",
        back_populates="feedback_response",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("ix_feedback_responses_survey_alumni", "survey_id", "alumni_id", unique=True),
    )

    def __repr__(self) -> str:
        return (
            f"<FeedbackResponse(response_id={self.response_id}, survey_id={self.survey_id}, "
            f"alumni_id={self.alumni_id})>")


class QuestionResponse(Base):
    """One answer (selected option and/or free text) to one question."""

    __tablename__ = "question_responses"

    question_response_id = get_uuid_column(primary_key=True, default=uuid.uuid4)
    response_id = get_uuid_column(
        ForeignKey("feedback_responses.response_id", ondelete="CASCADE"), nullable=False, index=True
    )
    question_id = get_uuid_column(
        ForeignKey("survey_questions.question_id", ondelete="CASCADE"), nullable=False, index=True
    )
    option_id = get_uuid_column(
        ForeignKey("survey_options.option_id", ondelete="CASCADE"), nullable=True
    )
    response_text = Column(Text, nullable=True)

    feedback_response = relationship("FeedbackResponse", back_populates="question_responses")
    question = relationship("SurveyQuestion")
    option = relationship("SurveyOption")
