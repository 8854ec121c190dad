"""DTOs for order use cases."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class OrderResult:
    """Course purchase record."""

    id: str
    course_id: str
    user_id: str
    payment_info: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None
