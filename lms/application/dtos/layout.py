"""DTOs for site layout documents (banner, FAQ, categories)."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from lms.domain.enums import LayoutType


@dataclass(frozen=True)
class LayoutResult:
    """One layout document; only the section matching type is populated."""

    id: str
    type: LayoutType
    faq: list[dict[str, Any]] = field(default_factory=list)
    categories: list[dict[str, Any]] = field(default_factory=list)
    banner: dict[str, Any] | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class BannerContent:
    """Banner title/subtitle (the image is uploaded separately)."""

    title: str
    subtitle: str
