"""Rules for the discussion content embedded in course documents.

Questions (with answers) hang off lessons in course_data; reviews (with
replies) hang off the course. Each entry embeds an author snapshot under
``user_id``/``user_name``/``user_avatar``.
"""

from typing import Any

from lms.domain.value_objects import CourseRating


def _not_by(entries: list[dict[str, Any]], user_id: str) -> list[dict[str, Any]]:
    return [e for e in entries if e.get("user_id") != user_id]


def without_user_content(
    course_data: list[dict[str, Any]],
    reviews: list[dict[str, Any]],
    user_id: str,
) -> tuple[list[dict[str, Any]], list[dict[str, Any]], bool]:
    """Return copies of course_data and reviews with every entry by user_id removed.

    Removes the user's questions (with their answer threads), the user's
    answers to other people's questions, the user's reviews (with replies)
    and the user's review replies.

    Returns:
        (course_data, reviews, changed)
    """
    changed = False
    lessons: list[dict[str, Any]] = []
    for lesson in course_data:
        questions = []
        for question in lesson.get("questions") or []:
            if question.get("user_id") == user_id:
                changed = True
                continue
            answers = question.get("answers") or []
            kept = _not_by(answers, user_id)
            changed = changed or len(kept) != len(answers)
            questions.append({**question, "answers": kept})
        if "questions" in lesson:
            lessons.append({**lesson, "questions": questions})
        else:
            lessons.append(dict(lesson))

    kept_reviews: list[dict[str, Any]] = []
    for review in reviews:
        if review.get("user_id") == user_id:
            changed = True
            continue
        replies = review.get("replies") or []
        kept = _not_by(replies, user_id)
        changed = changed or len(kept) != len(replies)
        kept_reviews.append({**review, "replies": kept})
    return lessons, kept_reviews, changed


def rating_of(reviews: list[dict[str, Any]]) -> float:
    """Course rating for the given review list."""
    return CourseRating.average(r.get("rating", 0) for r in reviews).value
