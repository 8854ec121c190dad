"""Course use cases: catalog management, content access and discussions."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from lms.application.dtos.course import (
    AnswerCreate,
    CourseCreate,
    CourseResult,
    QuestionCreate,
    ReviewCreate,
    ReviewReplyCreate,
)
from lms.application.dtos.user import UserResult, UserSummary
from lms.application.services.cache_keys import (
    admin_courses_key,
    all_courses_key,
    course_content_key,
    course_key,
)
from lms.application.services.cache_policy import (
    CacheInvalidator,
    Mutation,
    read_through,
)
from lms.application.services.field_filter import COURSE_UPDATE_SHAPE, filter_or_raise
from lms.core.constants import FOLDER_COURSE_THUMBNAIL
from lms.domain.course_content import rating_of
from lms.domain.enums import UserRole
from lms.domain.exceptions import (
    CoursePurchaseRequiredException,
    ResourceNotFoundException,
    ValidationException,
)
from lms.domain.value_objects import ReviewScore
from lms.shared.telemetry.logging import get_logger
from lms.shared.utils.datetime import utc_now
from lms.shared.utils.generators import generate_cuid
from lms.shared.utils.serialization import jsonable

if TYPE_CHECKING:
    from lms.application.dtos.media import ImageUpload
    from lms.application.interfaces.repositories import (
        ICourseRepository,
        INotificationRepository,
        IUserRepository,
    )
    from lms.application.interfaces.services import (
        ICacheService,
        IImageStorage,
        IMailer,
        IUnitOfWork,
    )

logger = get_logger(__name__)


def _sent_id(raw: Any) -> str | None:
    value = raw.get("id") if isinstance(raw, Mapping) else None
    return value if isinstance(value, str) and value else None


def _with_ids(
    items: list[dict[str, Any]],
    existing: list[dict[str, Any]] | None = None,
    raw: list[Any] | None = None,
) -> list[dict[str, Any]]:
    """Give every item an id: the stored id its raw counterpart names, else a new one.

    ``raw`` is the unfiltered client list, index-aligned with ``items``; the
    field filter drops ``id`` but never reorders or removes elements.
    A stored id is claimed at most once.
    """
    known = {entry["id"] for entry in existing or [] if entry.get("id")}
    raw = raw or []
    result = []
    for index, item in enumerate(items):
        sent = _sent_id(raw[index]) if index < len(raw) else None
        if sent in known:
            known.discard(sent)
        else:
            sent = generate_cuid()
        result.append({**item, "id": sent})
    return result


def _lessons_with_ids(
    lessons: list[dict[str, Any]],
    existing: list[dict[str, Any]] | None = None,
    raw: list[Any] | None = None,
) -> list[dict[str, Any]]:
    """Assign lesson and link ids; a matched lesson that omits ``questions`` keeps its thread.

    Unmatched lessons are new: fresh ids and an empty thread.
    """
    stored = {lesson["id"]: lesson for lesson in existing or [] if lesson.get("id")}
    raw = raw or []
    result = []
    for index, lesson in enumerate(_with_ids(lessons, existing, raw)):
        sent = raw[index] if index < len(raw) and isinstance(raw[index], Mapping) else {}
        previous = stored.get(lesson["id"], {})
        lesson["links"] = _with_ids(
            lesson.get("links") or [], previous.get("links"), sent.get("links")
        )
        if "questions" not in lesson:
            lesson["questions"] = list(previous.get("questions") or [])
        result.append(lesson)
    return result


def public_view(course: CourseResult) -> dict[str, Any]:
    """Course document as served to anonymous visitors (private lesson fields stripped)."""
    data = jsonable(course)
    data["course_data"] = jsonable(course.public_lessons())
    return data


def _stamp() -> str:
    return utc_now().isoformat()


class CourseService:
    """Catalog, purchased content and the Q&A/review threads embedded in courses."""

    def __init__(
        self,
        course_repo: ICourseRepository,
        user_repo: IUserRepository,
        notification_repo: INotificationRepository,
        uow: IUnitOfWork,
        cache: ICacheService | None,
        storage: IImageStorage,
        mailer: IMailer,
    ) -> None:
        self.course_repo = course_repo
        self.user_repo = user_repo
        self.notification_repo = notification_repo
        self.uow = uow
        self.cache = cache
        self.invalidator = CacheInvalidator(cache)
        self.storage = storage
        self.mailer = mailer

    async def _require_course(self, course_id: str) -> CourseResult:
        course = await self.course_repo.get_by_id(course_id)
        if course is None:
            raise ResourceNotFoundException("course", course_id)
        return course

    @staticmethod
    def _require_purchase(user: UserResult, course_id: str) -> None:
        if user.role is UserRole.USER and not user.owns_course(course_id):
            raise CoursePurchaseRequiredException(course_id)

    # ---- Catalog (admin) ----

    async def create(
        self, data: CourseCreate, thumbnail: ImageUpload | None = None
    ) -> CourseResult:
        stored = (
            await self.storage.upload(thumbnail, FOLDER_COURSE_THUMBNAIL)
            if thumbnail is not None
            else None
        )
        data = CourseCreate(
            name=data.name,
            description=data.description,
            price=data.price,
            tags=data.tags,
            level=data.level,
            demo_url=data.demo_url,
            estimated_price=data.estimated_price,
            benefits=_with_ids(data.benefits),
            prerequisites=_with_ids(data.prerequisites),
            course_data=_lessons_with_ids(data.course_data),
        )
        async with self.uow:
            course = await self.course_repo.create(
                data, stored.as_dict() if stored else None
            )
        await self.invalidator.invalidate(Mutation.COURSE_CREATED)
        logger.info("Created course %s", course.id)
        return course

    async def update(
        self,
        course_id: str,
        payload: dict[str, Any],
        thumbnail: ImageUpload | None = None,
    ) -> CourseResult:
        """Apply a partial update restricted to COURSE_UPDATE_SHAPE.

        Every field outside the shape is reported in one FieldNotAllowedException
        before anything is read or written. Nested items are matched to stored
        ones by the ``id`` the client sends back with them.
        """
        fields = filter_or_raise(COURSE_UPDATE_SHAPE, payload)
        # The thumbnail only changes through an upload.
        fields.pop("thumbnail", None)
        course = await self._require_course(course_id)
        for name in ("benefits", "prerequisites"):
            if name in fields:
                fields[name] = _with_ids(
                    fields[name], getattr(course, name), payload.get(name)
                )
        if "course_data" in fields:
            fields["course_data"] = _lessons_with_ids(
                fields["course_data"], course.course_data, payload.get("course_data")
            )
        if thumbnail is not None:
            previous = (course.thumbnail or {}).get("public_id")
            if previous:
                await self.storage.destroy(previous)
            fields["thumbnail"] = (
                await self.storage.upload(thumbnail, FOLDER_COURSE_THUMBNAIL)
            ).as_dict()
        if not fields:
            raise ValidationException("No fields to update")
        async with self.uow:
            updated = await self.course_repo.update_fields(course_id, fields)
            if updated is None:
                raise ResourceNotFoundException("course", course_id)
        await self.invalidator.invalidate(Mutation.COURSE_UPDATED)
        return updated

    async def delete(self, course_id: str) -> None:
        async with self.uow:
            if not await self.course_repo.delete(course_id):
                raise ResourceNotFoundException("course", course_id)
        await self.invalidator.invalidate(Mutation.COURSE_DELETED)
        logger.info("Deleted course %s", course_id)

    async def list_admin(self, admin_id: str) -> list[dict[str, Any]]:
        """Full course documents, newest first, cached per admin."""
        return await read_through(
            self.cache, admin_courses_key(admin_id), self.course_repo.list_all
        )

    # ---- Public catalog ----

    async def get_public(self, course_id: str) -> dict[str, Any]:
        async def load() -> dict[str, Any]:
            return public_view(await self._require_course(course_id))

        return await read_through(self.cache, course_key(course_id), load)

    async def list_public(self) -> list[dict[str, Any]]:
        async def load() -> list[dict[str, Any]]:
            return [public_view(c) for c in await self.course_repo.list_all()]

        return await read_through(self.cache, all_courses_key(), load)

    async def get_content(self, course_id: str, user: UserResult) -> list[dict[str, Any]]:
        """Full lesson list for a purchaser (admins need no purchase)."""
        self._require_purchase(user, course_id)

        async def load() -> list[dict[str, Any]]:
            return (await self._require_course(course_id)).course_data

        return await read_through(
            self.cache, course_content_key(course_id, user.id), load
        )

    # ---- Discussions ----

    async def add_question(self, user: UserResult, data: QuestionCreate) -> CourseResult:
        self._require_purchase(user, data.course_id)
        course = await self._require_course(data.course_id)
        lesson = course.find_lesson(data.lesson_id)
        if lesson is None:
            raise ResourceNotFoundException("lesson", data.lesson_id)
        question = {
            "id": generate_cuid(),
            **UserSummary.of(user).as_entry(),
            "question": data.question,
            "answers": [],
            "created_at": _stamp(),
        }
        lessons = [
            {**item, "questions": [*(item.get("questions") or []), question]}
            if item.get("id") == data.lesson_id
            else item
            for item in course.course_data
        ]
        async with self.uow:
            updated = await self.course_repo.update_fields(
                course.id, {"course_data": lessons}
            )
            await self.notification_repo.create(
                user.id,
                "New Question Received",
                f"{user.name} has asked a question on {lesson.get('title', '')}",
            )
        await self.invalidator.invalidate(Mutation.QUESTION_ADDED)
        return updated or course

    async def add_answer(self, user: UserResult, data: AnswerCreate) -> CourseResult:
        """Answer a question.

        When the asker answers their own thread they get a notification;
        otherwise the asker is mailed with the ``question-reply`` template
        after the answer is committed.
        """
        self._require_purchase(user, data.course_id)
        course = await self._require_course(data.course_id)
        lesson = course.find_lesson(data.lesson_id)
        if lesson is None:
            raise ResourceNotFoundException("lesson", data.lesson_id)
        question = next(
            (q for q in lesson.get("questions") or [] if q.get("id") == data.question_id),
            None,
        )
        if question is None:
            raise ResourceNotFoundException("question", data.question_id)
        answer = {
            "id": generate_cuid(),
            **UserSummary.of(user).as_entry(),
            "answer": data.answer,
            "created_at": _stamp(),
        }
        lessons = []
        for item in course.course_data:
            if item.get("id") == data.lesson_id:
                item = {
                    **item,
                    "questions": [
                        {**q, "answers": [*(q.get("answers") or []), answer]}
                        if q.get("id") == data.question_id
                        else q
                        for q in item.get("questions") or []
                    ],
                }
            lessons.append(item)
        title = lesson.get("title", "")
        self_reply = question.get("user_id") == user.id
        async with self.uow:
            updated = await self.course_repo.update_fields(
                course.id, {"course_data": lessons}
            )
            if self_reply:
                await self.notification_repo.create(
                    user.id,
                    "You got a reply",
                    f"{user.name} has replied on your answer on {title}",
                )
        await self.invalidator.invalidate(Mutation.ANSWER_ADDED)
        if not self_reply:
            asker = await self.user_repo.get_by_id(question.get("user_id", ""))
            if asker is not None:
                await self.mailer.send(
                    asker.email,
                    "Question Reply",
                    "question-reply",
                    {"name": asker.name, "title": title},
                )
        return updated or course

    async def add_review(self, user: UserResult, data: ReviewCreate) -> CourseResult:
        """Add a review and recompute the rating (average rounded down to 0.5)."""
        self._require_purchase(user, data.course_id)
        try:
            score = ReviewScore(data.rating)
        except ValueError as e:
            raise ValidationException(str(e), "rating") from e
        course = await self._require_course(data.course_id)
        review = {
            "id": generate_cuid(),
            **UserSummary.of(user).as_entry(),
            "rating": score.value,
            "comment": data.comment,
            "replies": [],
            "created_at": _stamp(),
        }
        reviews = [*course.reviews, review]
        async with self.uow:
            updated = await self.course_repo.update_fields(
                course.id, {"reviews": reviews, "rating": rating_of(reviews)}
            )
            await self.notification_repo.create(
                user.id, "Review Received", f"{user.name} has reviewed {course.name}"
            )
        await self.invalidator.invalidate(Mutation.REVIEW_ADDED)
        return updated or course

    async def reply_review(self, user: UserResult, data: ReviewReplyCreate) -> CourseResult:
        course = await self._require_course(data.course_id)
        if course.find_review(data.review_id) is None:
            raise ResourceNotFoundException("review", data.review_id)
        reply = {
            "id": generate_cuid(),
            **UserSummary.of(user).as_entry(),
            "comment": data.comment,
            "created_at": _stamp(),
        }
        reviews = [
            {**r, "replies": [*(r.get("replies") or []), reply]}
            if r.get("id") == data.review_id
            else r
            for r in course.reviews
        ]
        async with self.uow:
            updated = await self.course_repo.update_fields(course.id, {"reviews": reviews})
        await self.invalidator.invalidate(Mutation.REVIEW_REPLIED)
        return updated or course
