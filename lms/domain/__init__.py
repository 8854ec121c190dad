"""Domain layer: enums, exceptions, value objects and course content rules.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from lms.domain.enums import AuthProvider, LayoutType, NotificationStatus, UserRole
from lms.domain.exceptions import (
    AlreadyEnrolledException,
    AuthenticationException,
    AuthorizationException,
    CoursePurchaseRequiredException,
    DuplicateCategoryException,
    DuplicateEmailException,
    FieldNotAllowedException,
    LayoutAlreadyExistsException,
    LmsException,
    MailDeliveryException,
    ResourceNotFoundException,
    ValidationException,
)
from lms.domain.value_objects import CourseRating, ReviewScore

__all__ = [
    "AuthProvider",
    "LayoutType",
    "NotificationStatus",
    "UserRole",
    "AlreadyEnrolledException",
    "AuthenticationException",
    "AuthorizationException",
    "CoursePurchaseRequiredException",
    "DuplicateCategoryException",
    "DuplicateEmailException",
    "FieldNotAllowedException",
    "LayoutAlreadyExistsException",
    "LmsException",
    "MailDeliveryException",
    "ResourceNotFoundException",
    "ValidationException",
    "CourseRating",
    "ReviewScore",
]
