"""DTOs for course use cases.

Nested course content (benefits, lessons, links, questions, reviews) is kept
as JSON-compatible dicts; these documents are stored in JSON columns and
served from the cache as-is.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

# Lesson fields only purchasers (and admins) may see.
PRIVATE_LESSON_FIELDS = frozenset({"video_url", "suggestion", "questions", "links"})


@dataclass(frozen=True)
class CourseCreate:
    """Input for creating a course (thumbnail is uploaded separately)."""

    name: str
    description: str
    price: float
    tags: str
    level: str
    demo_url: str
    estimated_price: float | None = None
    benefits: list[dict[str, Any]] = field(default_factory=list)
    prerequisites: list[dict[str, Any]] = field(default_factory=list)
    course_data: list[dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class CourseResult:
    """Full course document."""

    id: str
    name: str
    description: str
    price: float
    estimated_price: float | None
    thumbnail: dict[str, Any] | None
    tags: str
    level: str
    demo_url: str
    benefits: list[dict[str, Any]]
    prerequisites: list[dict[str, Any]]
    course_data: list[dict[str, Any]]
    reviews: list[dict[str, Any]]
    rating: float
    purchased: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def find_lesson(self, lesson_id: str) -> dict[str, Any] | None:
        return next((item for item in self.course_data if item.get("id") == lesson_id), None)

    def find_review(self, review_id: str) -> dict[str, Any] | None:
        return next((item for item in self.reviews if item.get("id") == review_id), None)

    def public_lessons(self) -> list[dict[str, Any]]:
        """Lessons without video URLs, suggestions, links and Q&A threads."""
        return [
            {k: v for k, v in item.items() if k not in PRIVATE_LESSON_FIELDS}
            for item in self.course_data
        ]


@dataclass(frozen=True)
class QuestionCreate:
    course_id: str
    lesson_id: str
    question: str


@dataclass(frozen=True)
class AnswerCreate:
    course_id: str
    lesson_id: str
    question_id: str
    answer: str


@dataclass(frozen=True)
class ReviewCreate:
    course_id: str
    rating: float
    comment: str


@dataclass(frozen=True)
class ReviewReplyCreate:
    course_id: str
    review_id: str
    comment: str
