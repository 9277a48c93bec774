"""API routers."""
from alumni_backend.routers import health, notifications, quick_survey, survey_responses, surveys

__all__ = ["health", "notifications", "quick_survey", "survey_responses", "surveys"]
