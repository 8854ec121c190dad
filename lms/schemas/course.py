"""Course API schemas.

Create and update arrive as multipart forms (an optional thumbnail file plus
a JSON-encoded ``data`` field). Update models only type-check the values they
know; the field authorization filter decides which fields may be changed.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TitleItem(BaseModel):
    title: str = Field(..., min_length=1)


class LinkItem(BaseModel):
    title: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)


class LessonItem(BaseModel):
    title: str = Field(..., min_length=1)
    video_description: str = ""
    video_url: str = Field(..., min_length=1)
    video_section: str = ""
    video_length: float = Field(default=0, ge=0)
    video_player: str = ""
    links: list[LinkItem] = Field(default_factory=list)
    suggestion: str = ""


class CourseCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=256)
    description: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    estimated_price: float | None = Field(default=None, ge=0)
    tags: str = ""
    level: str = Field(..., min_length=1)
    demo_url: str = Field(..., min_length=1)
    benefits: list[TitleItem] = Field(default_factory=list)
    prerequisites: list[TitleItem] = Field(default_factory=list)
    course_data: list[LessonItem] = Field(default_factory=list)


class _UpdateModel(BaseModel):
    # Unknown keys pass through to the field filter, which names them in its 400.
    model_config = ConfigDict(extra="ignore", strict=True)


class TitleItemUpdate(_UpdateModel):
    id: str | None = None
    title: str | None = None


class LinkItemUpdate(_UpdateModel):
    id: str | None = None
    title: str | None = None
    url: str | None = None


class LessonItemUpdate(_UpdateModel):
    id: str | None = None
    title: str | None = None
    video_description: str | None = None
    video_url: str | None = None
    video_section: str | None = None
    video_length: float | None = Field(default=None, ge=0)
    video_player: str | None = None
    links: list[LinkItemUpdate] | None = None
    suggestion: str | None = None
    questions: list[dict[str, Any]] | None = None


class CourseUpdateRequest(_UpdateModel):
    """Value types for a partial course update; every field optional."""

    name: str | None = Field(default=None, max_length=256)
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    estimated_price: float | None = Field(default=None, ge=0)
    tags: str | None = None
    level: str | None = None
    demo_url: str | None = None
    benefits: list[TitleItemUpdate] | None = None
    prerequisites: list[TitleItemUpdate] | None = None
    course_data: list[LessonItemUpdate] | None = None
    rating: float | None = Field(default=None, ge=0, le=5)
    purchased: int | None = Field(default=None, ge=0)


class QuestionRequest(BaseModel):
    course_id: str = Field(..., min_length=1)
    lesson_id: str = Field(..., min_length=1)
    question: str = Field(..., min_length=1)


class AnswerRequest(BaseModel):
    course_id: str = Field(..., min_length=1)
    lesson_id: str = Field(..., min_length=1)
    question_id: str = Field(..., min_length=1)
    answer: str = Field(..., min_length=1)


class ReviewRequest(BaseModel):
    rating: float = Field(..., ge=1, le=5)
    comment: str = Field(..., min_length=1)


class ReviewReplyRequest(BaseModel):
    course_id: str = Field(..., min_length=1)
    review_id: str = Field(..., min_length=1)
    comment: str = Field(..., min_length=1)
