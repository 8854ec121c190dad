"""Response envelope shared by every endpoint."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

from lms.shared.utils.serialization import jsonable

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """``{"success": true, "message": ..., "payload": ...}``."""

    success: bool = True
    message: str
    payload: T | None = None


class MessageResponse(BaseModel):
    """Envelope without payload."""

    success: bool = True
    message: str = Field(..., description="Human-readable outcome")


def envelope(message: str, payload: Any = None) -> dict[str, Any]:
    """Build a success envelope; DTO payloads are converted to JSON types."""
    return {"success": True, "message": message, "payload": jsonable(payload)}
