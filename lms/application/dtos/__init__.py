"""Application DTOs (no ORM dependency)."""

from lms.application.dtos.analytics import AnalyticsSeries, MonthlyCount
from lms.application.dtos.auth import (
    ActivationTicket,
    AuthTokens,
    PendingRegistration,
    TokenLifetimes,
)
from lms.application.dtos.course import (
    AnswerCreate,
    CourseCreate,
    CourseResult,
    QuestionCreate,
    ReviewCreate,
    ReviewReplyCreate,
)
from lms.application.dtos.layout import BannerContent, LayoutResult
from lms.application.dtos.media import ImageUpload, StoredImage
from lms.application.dtos.notification import NotificationResult
from lms.application.dtos.order import OrderResult
from lms.application.dtos.user import OAuthProfile, UserResult, UserSummary

__all__ = [
    "ActivationTicket",
    "AnalyticsSeries",
    "AnswerCreate",
    "AuthTokens",
    "BannerContent",
    "CourseCreate",
    "CourseResult",
    "ImageUpload",
    "LayoutResult",
    "MonthlyCount",
    "NotificationResult",
    "OAuthProfile",
    "OrderResult",
    "PendingRegistration",
    "QuestionCreate",
    "ReviewCreate",
    "ReviewReplyCreate",
    "StoredImage",
    "TokenLifetimes",
    "UserResult",
    "UserSummary",
]
