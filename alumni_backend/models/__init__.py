"""Database models."""
from alumni_backend.models.alumni import Alumni
from alumni_backend.models.survey import Survey, SurveySection, SurveyQuestion, SurveyOption
from alumni_backend.models.feedback_response import FeedbackResponse, QuestionResponse
from alumni_backend.models.notification import Notification, AlumniNotification
from alumni_backend.models.quick_survey_response import QuickSurveyResponse

__all__ = [
    "Alumni",
    "Survey",
    "SurveySection",
    "SurveyQuestion",
    "SurveyOption",
    "FeedbackResponse",
    "QuestionResponse",
    "Notification",
    "AlumniNotification",
    "QuickSurveyResponse",
]
