"""
Survey schema models.

A survey owns an ordered tree of sections, questions and options. Order is
kept in an explicit ``position`` column on every level so that the authoring,
respondent and reporting views all render in the order the survey was built.
Deleting a survey cascades through the whole tree at the database level.
"""
import uuid

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from alumni_backend.database import Base
from alumni_backend.models.base import get_uuid_column, get_current_utc
from alumni_backend.utils.datetime_helpers import utc_today


class Survey(Base):
    """Time-bounded questionnaire composed of sections."""

    __tablename__ = "surveys"

    survey_id = get_uuid_column(primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=get_current_utc, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)

    sections = relationship(
        "SurveySection",
        back_populates="survey",
        order_by="SurveySection.position",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    feedback_responses = relationship(
        "FeedbackResponse",
        back_populates="survey",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("ix_surveys_created_at", "created_at"),
    )

    def is_open_on(self, day) -> bool:
        """Whether ``day`` falls inside the survey's validity window."""
        return self.start_date <= day <= self.end_date

    @property
    def is_open(self) -> bool:
        return self.is_open_on(utc_today())

    def __repr__(self) -> str:
        return f"<Survey(survey_id={self.survey_id}, title={self.title!r})>"


class SurveySection(Base):
    """Titled grouping of questions within a survey."""

    __tablename__ = "survey_sections"

    section_id = get_uuid_column(primary_key=True, default=uuid.uuid4)
    survey_id = get_uuid_column(
        ForeignKey("surveys.survey_id", ondelete="CASCADE"), nullable=False, index=True
    )
    section_title = Column(String(255), nullable=False)
    section_description = Column(Text, nullable=True)
    position = Column(Integer, nullable=False, default=0)

    survey = relationship("Survey", back_populates="sections")
    questions = relationship(
        "SurveyQuestion",
        back_populates="section",
        order_by="SurveyQuestion.position",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class SurveyQuestion(Base):
    """Single prompt of a fixed type."""

    __tablename__ = "survey_questions"

    question_id = get_uuid_column(primary_key=True, default=uuid.uuid4)
    # Denormalized so membership checks don't need to join through sections
    survey_id = get_uuid_column(
        ForeignKey("surveys.survey_id", ondelete="CASCADE"), nullable=False, index=True
    )
    section_id = get_uuid_column(
        ForeignKey("survey_sections.section_id", ondelete="CASCADE"), nullable=False, index=True
    )
    question_text = Column(String(255), nullable=False)
    question_type = Column(String(32), nullable=False)  # QuestionType value
    is_required = Column(Boolean, nullable=False, default=False)
    position = Column(Integer, nullable=False, default=0)

    section = relationship("SurveySection", back_populates="questions")
    options = relationship(
        "SurveyOption",
        back_populates="question",
        order_by="SurveyOption.position",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class SurveyOption(Base):
    """Selectable choice for a question."""

    __tablename__ = "survey_options"

    option_id = get_uuid_column(primary_key=True, default=uuid.uuid4)
    question_id = get_uuid_column(
        ForeignKey("survey_questions.question_id", ondelete="CASCADE"), nullable=False, index=True
    )
    option_text = Column(String(255), nullable=False)
    option_value = Column(Integer, nullable=True)
    is_other_option = Column(Boolean, nullable=False, default=False)
    position = Column(Integer, nullable=False, default=0)

    question = relationship("SurveyQuestion", back_populates="options")
