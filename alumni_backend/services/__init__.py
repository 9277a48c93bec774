from alumni_backend.services.auth_service import AuthService, AuthError
from alumni_backend.services.notification_service import NotificationService
from alumni_backend.services.survey_service import SurveyService, load_survey_tree
from alumni_backend.services.survey_response_service import SurveyResponseService
from alumni_backend.services.aggregation_service import SurveyAggregationService
from alumni_backend.services.quick_survey_service import QuickSurveyService

__all__ = [
    'AuthService',
    'AuthError',
    'NotificationService',
    'SurveyService',
    'load_survey_tree',
    'SurveyResponseService',
    'SurveyAggregationService',
    'QuickSurveyService',
]
