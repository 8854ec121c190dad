"""Order API schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class OrderCreateRequest(BaseModel):
    course_id: str = Field(..., min_length=1)
    payment_info: dict[str, Any] = Field(default_factory=dict)


class OrderResponse(BaseModel):
    id: str
    course_id: str
    user_id: str
    payment_info: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None
