"""Course API: catalog management, public catalog, purchased content and discussions."""

import json
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Form, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from lms.api.v1.dependencies import (
    AdminUser,
    CurrentUser,
    OptionalImage,
    get_course_service,
)
from lms.application.dtos.course import (
    AnswerCreate,
    CourseCreate,
    QuestionCreate,
    ReviewCreate,
    ReviewReplyCreate,
)
from lms.application.use_cases import CourseService
from lms.core.limiter import limit_upload, limit_writes
from lms.domain.exceptions import ValidationException
from lms.schemas.common import ApiResponse, MessageResponse, envelope
from lms.schemas.course import (
    AnswerRequest,
    CourseCreateRequest,
    CourseUpdateRequest,
    QuestionRequest,
    ReviewReplyRequest,
    ReviewRequest,
)

router = APIRouter()

Courses = Annotated[CourseService, Depends(get_course_service)]
Document = ApiResponse[dict[str, Any]]


def _parse_json_object(raw: str) -> dict[str, Any]:
    try:
        value = json.loads(raw or "{}")
    except json.JSONDecodeError as e:
        raise ValidationException(f"data is not valid JSON: {e.msg}", "data") from e
    if not isinstance(value, dict):
        raise ValidationException("data must be a JSON object", "data")
    return value


# ---- Admin ----


@router.post("/create", response_model=Document, status_code=201)
@limit_upload
async def create_course(
    request: Request,
    admin: AdminUser,
    courses: Courses,
    thumbnail: OptionalImage,
    data: str = Form(..., description="Course fields as a JSON object"),
):
    """Create a course from a multipart form (JSON ``data`` plus optional ``file``)."""
    try:
        body = CourseCreateRequest.model_validate(_parse_json_object(data))
    except ValidationError as e:
        raise RequestValidationError(e.errors()) from e
    course = await courses.create(CourseCreate(**body.model_dump()), thumbnail)
    return envelope("Course created successfully", course)


@router.put("/update/{course_id}", response_model=Document)
@limit_upload
async def update_course(
    request: Request,
    course_id: str,
    admin: AdminUser,
    courses: Courses,
    thumbnail: OptionalImage,
    data: str = Form("{}", description="Fields to change as a JSON object"),
):
    """Partial update; every field outside the editable shape is rejected in one 400.

    Values of known fields are type-checked first (422 on a wrong type).
    """
    payload = _parse_json_object(data)
    try:
        CourseUpdateRequest.model_validate(payload)
    except ValidationError as e:
        raise RequestValidationError(e.errors()) from e
    course = await courses.update(course_id, payload, thumbnail)
    return envelope("Course updated successfully", course)


@router.get("/get-courses/admin", response_model=ApiResponse[list[dict[str, Any]]])
async def get_admin_courses(admin: AdminUser, courses: Courses):
    return envelope("Courses retrieved successfully", await courses.list_admin(admin.id))


@router.delete("/delete/{course_id}", response_model=MessageResponse)
@limit_writes
async def delete_course(request: Request, course_id: str, admin: AdminUser, courses: Courses):
    await courses.delete(course_id)
    return MessageResponse(message="Course deleted successfully")


# ---- Public catalog ----


@router.get("/get-course/{course_id}", response_model=Document)
async def get_course(course_id: str, courses: Courses):
    """Course without lesson videos, links, suggestions or questions."""
    return envelope("Course retrieved successfully", await courses.get_public(course_id))


@router.get("/get-courses/all", response_model=ApiResponse[list[dict[str, Any]]])
async def get_courses(courses: Courses):
    return envelope("Courses retrieved successfully", await courses.list_public())


@router.get(
    "/get-course-content/{course_id}", response_model=ApiResponse[list[dict[str, Any]]]
)
async def get_course_content(course_id: str, current_user: CurrentUser, courses: Courses):
    """Full lesson list; students must have purchased the course."""
    content = await courses.get_content(course_id, current_user)
    return envelope("Course data retrieved successfully", content)


# ---- Discussions ----


@router.put("/add-question", response_model=Document)
@limit_writes
async def add_question(
    request: Request, body: QuestionRequest, current_user: CurrentUser, courses: Courses
):
    course = await courses.add_question(current_user, QuestionCreate(**body.model_dump()))
    return envelope("Question added successfully", course)


@router.put("/add-answer", response_model=Document)
@limit_writes
async def add_answer(
    request: Request, body: AnswerRequest, current_user: CurrentUser, courses: Courses
):
    course = await courses.add_answer(current_user, AnswerCreate(**body.model_dump()))
    return envelope("Your answer has been added successfully", course)


@router.put("/add-review/{course_id}", response_model=Document)
@limit_writes
async def add_review(
    request: Request,
    course_id: str,
    body: ReviewRequest,
    current_user: CurrentUser,
    courses: Courses,
):
    course = await courses.add_review(
        current_user,
        ReviewCreate(course_id=course_id, rating=body.rating, comment=body.comment),
    )
    return envelope("Thanks for your review!", course)


@router.put("/review-reply", response_model=Document)
@limit_writes
async def review_reply(
    request: Request, body: ReviewReplyRequest, admin: AdminUser, courses: Courses
):
    course = await courses.reply_review(admin, ReviewReplyCreate(**body.model_dump()))
    return envelope("Reply added successfully", course)
