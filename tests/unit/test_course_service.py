"""CourseService: partial updates, read-through views, purchase gate and discussions."""

import pytest

from lms.application.dtos.course import (
    AnswerCreate,
    CourseCreate,
    QuestionCreate,
    ReviewCreate,
    ReviewReplyCreate,
)
from lms.application.dtos.media import ImageUpload
from lms.application.services import cache_keys as keys
from lms.application.use_cases import CourseService
from lms.domain.enums import UserRole
from lms.domain.exceptions import (
    CoursePurchaseRequiredException,
    FieldNotAllowedException,
    ResourceNotFoundException,
    ValidationException,
)
from tests.fakes import make_user


@pytest.fixture
def service(course_repo, user_repo, notification_repo, uow, cache, storage, mailer) -> CourseService:
    return CourseService(
        course_repo=course_repo,
        user_repo=user_repo,
        notification_repo=notification_repo,
        uow=uow,
        cache=cache,
        storage=storage,
        mailer=mailer,
    )


def _course_create(**overrides) -> CourseCreate:
    data = {
        "name": "Intro to Python",
        "description": "Basics",
        "price": 10,
        "tags": "python",
        "level": "beginner",
        "demo_url": "demo",
        "benefits": [{"title": "Learn"}],
        "course_data": [
            {
                "title": "Lesson 1",
                "video_url": "secret-video",
                "suggestion": "read more",
                "links": [{"title": "docs", "url": "https://docs.python.org"}],
            }
        ],
    }
    data.update(overrides)
    return CourseCreate(**data)


@pytest.fixture
async def course(service):
    return await service.create(_course_create())


@pytest.fixture
def student(user_repo, course):
    return user_repo.add(make_user("u1", courses=(course.id,)))


@pytest.fixture
def admin(user_repo):
    return user_repo.add(make_user("a1", name="Admin", email="admin@example.com", role=UserRole.ADMIN))


class TestCatalog:
    async def test_create_assigns_ids_and_empty_threads(self, course) -> None:
        assert course.benefits[0]["id"]
        lesson = course.course_data[0]
        assert lesson["id"]
        assert lesson["links"][0]["id"]
        assert lesson["questions"] == []

    async def test_create_uploads_thumbnail(self, service, storage) -> None:
        image = ImageUpload(content=b"x", filename="t.png", content_type="image/png")
        created = await service.create(_course_create(), image)
        assert created.thumbnail["public_id"].startswith("lms/course-thumbnail/")
        assert len(storage.uploaded) == 1

    async def test_new_course_appears_in_cached_list(self, service, course) -> None:
        assert [c["id"] for c in await service.list_public()] == [course.id]
        second = await service.create(_course_create(name="Advanced"))
        assert [c["id"] for c in await service.list_public()] == [second.id, course.id]

    async def test_public_views_hide_private_lesson_fields(self, service, course, cache) -> None:
        public = await service.get_public(course.id)
        lesson = public["course_data"][0]
        assert lesson["title"] == "Lesson 1"
        for hidden in ("video_url", "suggestion", "links", "questions"):
            assert hidden not in lesson
        assert await cache.exists(keys.course_key(course.id))

    async def test_get_public_missing_course(self, service) -> None:
        with pytest.raises(ResourceNotFoundException):
            await service.get_public("nope")

    async def test_update_rejects_every_disallowed_field(self, service, course, uow) -> None:
        commits = uow.commits
        with pytest.raises(FieldNotAllowedException) as exc_info:
            await service.update(
                course.id,
                {"name": "New", "reviews": [], "course_data": [{"title": "x", "owner": "me"}]},
            )
        assert exc_info.value.fields == ["reviews", "owner"]
        assert uow.commits == commits

    async def test_update_is_visible_on_next_read(self, service, course) -> None:
        await service.get_public(course.id)
        await service.list_public()
        await service.update(course.id, {"name": "Renamed", "id": "ignored"})
        assert (await service.get_public(course.id))["name"] == "Renamed"
        assert (await service.list_public())[0]["name"] == "Renamed"

    async def test_update_keeps_ids_and_questions_of_returned_lessons(
        self, service, course, student
    ) -> None:
        lesson_id = course.course_data[0]["id"]
        await service.add_question(
            student, QuestionCreate(course_id=course.id, lesson_id=lesson_id, question="Why?")
        )
        updated = await service.update(
            course.id,
            {
                "course_data": [
                    {"id": lesson_id, "title": "Lesson 1 v2", "video_url": "v2"},
                    {"title": "Lesson 2"},
                ]
            },
        )
        first, second = updated.course_data
        assert first["id"] == lesson_id
        assert [q["question"] for q in first["questions"]] == ["Why?"]
        assert second["id"] != lesson_id
        assert second["questions"] == []

    async def test_removing_a_lesson_does_not_shift_threads(self, service, admin) -> None:
        created = await service.create(
            _course_create(
                course_data=[
                    {"title": "L0", "video_url": "v0"},
                    {"title": "L1", "video_url": "v1"},
                ]
            )
        )
        first, second = created.course_data
        await service.add_question(
            admin, QuestionCreate(course_id=created.id, lesson_id=first["id"], question="About L0?")
        )

        updated = await service.update(
            created.id, {"course_data": [{"id": second["id"], "title": "L1"}]}
        )

        (remaining,) = updated.course_data
        assert remaining["id"] == second["id"]
        assert remaining["questions"] == []

    async def test_reordered_links_keep_their_ids(self, service, course) -> None:
        lesson = course.course_data[0]
        link_id = lesson["links"][0]["id"]
        updated = await service.update(
            course.id,
            {
                "course_data": [
                    {
                        "id": lesson["id"],
                        "title": "Lesson 1",
                        "links": [
                            {"title": "new", "url": "https://example.com"},
                            {"id": link_id, "title": "docs", "url": "https://docs.python.org"},
                        ],
                    }
                ]
            },
        )
        new_link, old_link = updated.course_data[0]["links"]
        assert old_link["id"] == link_id
        assert new_link["id"] != link_id

    async def test_unknown_or_repeated_ids_get_fresh_ones(self, service, course) -> None:
        benefit_id = course.benefits[0]["id"]
        updated = await service.update(
            course.id,
            {
                "benefits": [
                    {"id": benefit_id, "title": "Learn"},
                    {"id": benefit_id, "title": "Copy"},
                    {"id": "forged", "title": "Other"},
                ]
            },
        )
        ids = [b["id"] for b in updated.benefits]
        assert ids[0] == benefit_id
        assert len(set(ids)) == 3
        assert "forged" not in ids

    async def test_thumbnail_in_json_is_ignored(self, service, storage) -> None:
        image = ImageUpload(content=b"x", filename="t.png", content_type="image/png")
        created = await service.create(_course_create(), image)
        original = created.thumbnail
        updated = await service.update(
            created.id,
            {"name": "Renamed", "thumbnail": {"url": "u", "public_id": "lms/avatars/someone.png"}},
        )
        assert updated.thumbnail == original

        await service.update(created.id, {}, image)
        assert storage.destroyed == [original["public_id"]]

    async def test_thumbnail_alone_is_not_an_update(self, service, course) -> None:
        with pytest.raises(ValidationException, match="No fields"):
            await service.update(course.id, {"thumbnail": {"url": "u", "public_id": "p"}})

    async def test_update_with_thumbnail_replaces_image(self, service, storage) -> None:
        image = ImageUpload(content=b"x", filename="t.png", content_type="image/png")
        created = await service.create(_course_create(), image)
        old_id = created.thumbnail["public_id"]
        updated = await service.update(created.id, {}, image)
        assert storage.destroyed == [old_id]
        assert updated.thumbnail["public_id"] != old_id

    async def test_update_needs_a_field(self, service, course) -> None:
        with pytest.raises(ValidationException, match="No fields"):
            await service.update(course.id, {})

    async def test_update_missing_course(self, service) -> None:
        with pytest.raises(ResourceNotFoundException):
            await service.update("nope", {"name": "x"})

    async def test_delete_invalidates_views(self, service, course, admin) -> None:
        await service.list_public()
        await service.list_admin(admin.id)
        await service.delete(course.id)
        assert await service.list_public() == []
        assert await service.list_admin(admin.id) == []
        with pytest.raises(ResourceNotFoundException):
            await service.delete(course.id)


class TestContent:
    async def test_student_without_purchase_is_refused(self, service, course) -> None:
        outsider = make_user("u9")
        with pytest.raises(CoursePurchaseRequiredException):
            await service.get_content(course.id, outsider)

    async def test_purchaser_gets_full_lessons(self, service, course, student, cache) -> None:
        content = await service.get_content(course.id, student)
        assert content[0]["video_url"] == "secret-video"
        assert await cache.exists(keys.course_content_key(course.id, student.id))

    async def test_admin_needs_no_purchase(self, service, course, admin) -> None:
        content = await service.get_content(course.id, admin)
        assert content[0]["title"] == "Lesson 1"


class TestDiscussions:
    async def test_add_question_notifies_and_invalidates(
        self, service, course, student, notification_repo, cache
    ) -> None:
        await service.get_content(course.id, student)
        lesson_id = course.course_data[0]["id"]
        updated = await service.add_question(
            student, QuestionCreate(course_id=course.id, lesson_id=lesson_id, question="Why?")
        )
        question = updated.course_data[0]["questions"][0]
        assert question["user_id"] == student.id
        assert question["user_name"] == "Ada"
        assert question["answers"] == []
        [notification] = notification_repo.notifications.values()
        assert notification.title == "New Question Received"
        assert not await cache.exists(keys.course_content_key(course.id, student.id))
        fresh = await service.get_content(course.id, student)
        assert fresh[0]["questions"][0]["question"] == "Why?"

    async def test_add_question_unknown_lesson(self, service, course, student) -> None:
        with pytest.raises(ResourceNotFoundException):
            await service.add_question(
                student, QuestionCreate(course_id=course.id, lesson_id="nope", question="?")
            )

    async def test_add_question_requires_purchase(self, service, course) -> None:
        with pytest.raises(CoursePurchaseRequiredException):
            await service.add_question(
                make_user("u9"),
                QuestionCreate(course_id=course.id, lesson_id="x", question="?"),
            )

    async def test_answer_by_someone_else_mails_the_asker(
        self, service, course, student, admin, mailer, notification_repo
    ) -> None:
        lesson_id = course.course_data[0]["id"]
        asked = await service.add_question(
            student, QuestionCreate(course_id=course.id, lesson_id=lesson_id, question="Why?")
        )
        question_id = asked.course_data[0]["questions"][0]["id"]
        answered = await service.add_answer(
            admin,
            AnswerCreate(
                course_id=course.id, lesson_id=lesson_id, question_id=question_id, answer="Because"
            ),
        )
        answers = answered.course_data[0]["questions"][0]["answers"]
        assert [a["answer"] for a in answers] == ["Because"]
        [mail] = mailer.sent
        assert mail["to"] == student.email
        assert mail["template"] == "question-reply"
        assert mail["data"] == {"name": "Ada", "title": "Lesson 1"}
        assert len(notification_repo.notifications) == 1

    async def test_answer_to_own_question_notifies_instead_of_mailing(
        self, service, course, student, mailer, notification_repo
    ) -> None:
        lesson_id = course.course_data[0]["id"]
        asked = await service.add_question(
            student, QuestionCreate(course_id=course.id, lesson_id=lesson_id, question="Why?")
        )
        question_id = asked.course_data[0]["questions"][0]["id"]
        await service.add_answer(
            student,
            AnswerCreate(
                course_id=course.id, lesson_id=lesson_id, question_id=question_id, answer="Found it"
            ),
        )
        assert mailer.sent == []
        titles = [n.title for n in notification_repo.notifications.values()]
        assert titles == ["New Question Received", "You got a reply"]

    async def test_answer_unknown_question(self, service, course, student) -> None:
        lesson_id = course.course_data[0]["id"]
        with pytest.raises(ResourceNotFoundException):
            await service.add_answer(
                student,
                AnswerCreate(course_id=course.id, lesson_id=lesson_id, question_id="q", answer="a"),
            )

    async def test_reviews_update_rating_rounded_down_to_half(
        self, service, course, student, user_repo
    ) -> None:
        other = user_repo.add(make_user("u2", name="Bob", email="bob@example.com", courses=(course.id,)))
        await service.add_review(student, ReviewCreate(course_id=course.id, rating=4, comment="ok"))
        updated = await service.add_review(other, ReviewCreate(course_id=course.id, rating=5, comment="great"))
        assert updated.rating == 4.5
        assert [r["user_name"] for r in updated.reviews] == ["Ada", "Bob"]
        assert (await service.get_public(course.id))["rating"] == 4.5

    async def test_review_rating_out_of_range(self, service, course, student) -> None:
        with pytest.raises(ValidationException, match="between 1 and 5"):
            await service.add_review(student, ReviewCreate(course_id=course.id, rating=6, comment="!"))

    async def test_reply_to_review(self, service, course, student, admin) -> None:
        reviewed = await service.add_review(
            student, ReviewCreate(course_id=course.id, rating=5, comment="great")
        )
        review_id = reviewed.reviews[0]["id"]
        await service.get_public(course.id)
        replied = await service.reply_review(
            admin, ReviewReplyCreate(course_id=course.id, review_id=review_id, comment="Thanks")
        )
        assert replied.reviews[0]["replies"][0]["comment"] == "Thanks"
        public = await service.get_public(course.id)
        assert public["reviews"][0]["replies"][0]["user_name"] == "Admin"

    async def test_reply_to_unknown_review(self, service, course, admin) -> None:
        with pytest.raises(ResourceNotFoundException):
            await service.reply_review(
                admin, ReviewReplyCreate(course_id=course.id, review_id="nope", comment="?")
            )
