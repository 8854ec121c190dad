"""Domain exceptions for the LMS application.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class LmsException(Exception):
    """Base exception for all LMS application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON error body (error, message, details)."""
        body: dict[str, Any] = {"error": self.error_code, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationException(LmsException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class FieldNotAllowedException(LmsException):
    """Raised when a partial update submits fields outside the allowed shape.

    Carries every offending field name at once (not only the first one).
    """

    def __init__(self, fields: list[str]) -> None:
        """Initialize with the rejected field names.

        Args:
            fields: Rejected field names, in the order they were found.
        """
        super().__init__(
            f"Invalid fields: {', '.join(fields)}",
            "FIELDS_NOT_ALLOWED",
            {"fields": list(fields)},
        )
        self.fields = list(fields)


class AuthenticationException(LmsException):
    """Raised when authentication fails (e.g. invalid credentials or token)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        """Initialize with optional message.

        Args:
            message: Description of the authentication failure.
        """
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(LmsException):
    """Raised when the user lacks the role required for the operation."""

    def __init__(
        self,
        role: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        """Initialize with optional role and message.

        Args:
            role: Role the user currently holds (e.g. 'user').
            message: Human-readable message; default used when role omitted.
        """
        details: dict[str, Any] = {}
        if role:
            message = f"Role '{role}' is not allowed to access this resource"
            details["role"] = role
        super().__init__(message, "PERMISSION_DENIED", details)


class CoursePurchaseRequiredException(LmsException):
    """Raised when a student requests content of a course they have not bought."""

    def __init__(self, course_id: str) -> None:
        super().__init__(
            "You are not eligible to access this course",
            "PURCHASE_REQUIRED",
            {"course_id": course_id},
        )


class ResourceNotFoundException(LmsException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'course', 'user').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class DuplicateEmailException(LmsException):
    """Raised when registering an email that already belongs to an account."""

    def __init__(self, email: str | None = None) -> None:
        """Initialize with a generic message (email already registered)."""
        super().__init__(
            "Email is already registered",
            "DUPLICATE_EMAIL",
            {"email": email} if email else {},
        )


class DuplicateCategoryException(LmsException):
    """Raised when a category title (case-insensitive) already exists."""

    def __init__(self, titles: list[str]) -> None:
        super().__init__(
            f"Category already exists: {', '.join(titles)}",
            "DUPLICATE_CATEGORY",
            {"titles": list(titles)},
        )


class AlreadyEnrolledException(LmsException):
    """Raised when a user orders a course they already own."""

    def __init__(self, course_id: str) -> None:
        super().__init__(
            "You have already purchased this course",
            "ALREADY_ENROLLED",
            {"course_id": course_id},
        )


class LayoutAlreadyExistsException(LmsException):
    """Raised when creating a layout document for a type that already has one."""

    def __init__(self, layout_type: str) -> None:
        super().__init__(
            f"{layout_type} already exists",
            "LAYOUT_ALREADY_EXISTS",
            {"type": layout_type},
        )


class MailDeliveryException(LmsException):
    """Raised when outbound mail cannot be delivered."""

    def __init__(self, recipient: str, reason: str) -> None:
        super().__init__(
            f"Failed to send mail to {recipient}",
            "MAIL_DELIVERY_ERROR",
            {"reason": reason},
        )
