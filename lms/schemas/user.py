"""User and auth API schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, EmailStr, Field

from lms.domain.enums import AuthProvider, UserRole


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    email: EmailStr
    password: str = Field(..., min_length=6, description="Password (min 6 characters)")


class ActivationRequest(BaseModel):
    """Token returned by /register plus the 4-digit code from the activation mail."""

    activation_token: str = Field(..., min_length=1)
    activation_code: str = Field(..., pattern=r"^\d{4}$")


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshRequest(BaseModel):
    """Refresh token in the body; the refresh_token cookie is used when omitted."""

    refresh_token: str | None = None


class UpdatePasswordRequest(BaseModel):
    old_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)


class CreatePasswordRequest(BaseModel):
    password: str = Field(..., min_length=6)


class UpdateRoleRequest(BaseModel):
    email: EmailStr
    role: UserRole


class UserResponse(BaseModel):
    """Public user profile (never includes the password hash)."""

    id: str
    name: str
    email: str
    role: UserRole
    is_verified: bool
    provider: AuthProvider
    avatar: dict[str, Any] | None = None
    courses: list[str] = Field(default_factory=list)
    has_password: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ActivationTicketResponse(BaseModel):
    activation_token: str
    email: str


class SessionResponse(BaseModel):
    """Login/refresh payload; the same tokens are also set as HTTP-only cookies."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserResponse
