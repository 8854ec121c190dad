"""Application use cases (orchestration over repositories, cache and integrations)."""

from lms.application.use_cases.analytics import AnalyticsService, last_twelve_months
from lms.application.use_cases.courses import CourseService
from lms.application.use_cases.layouts import LayoutService
from lms.application.use_cases.notifications import NotificationService
from lms.application.use_cases.oauth import OAuthService
from lms.application.use_cases.orders import OrderService
from lms.application.use_cases.users import UserService, issue_session_tokens

__all__ = [
    "AnalyticsService",
    "CourseService",
    "LayoutService",
    "NotificationService",
    "OAuthService",
    "OrderService",
    "UserService",
    "issue_session_tokens",
    "last_twelve_months",
]
