"""Course repository. Interface methods return application DTOs."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from lms.application.dtos.course import CourseCreate, CourseResult
from lms.domain.course_content import rating_of, without_user_content
from lms.infrastructure.persistence.models.course import Course
from lms.infrastructure.persistence.repositories.base import BaseRepository

_UPDATABLE = frozenset(
    {
        "name",
        "description",
        "price",
        "estimated_price",
        "thumbnail",
        "tags",
        "level",
        "demo_url",
        "benefits",
        "prerequisites",
        "course_data",
        "reviews",
        "rating",
        "purchased",
    }
)


def _course_to_result(c: Course) -> CourseResult:
    """Map ORM Course to application CourseResult."""
    return CourseResult(
        id=c.id,
        name=c.name,
        description=c.description,
        price=c.price,
        estimated_price=c.estimated_price,
        thumbnail=dict(c.thumbnail) if c.thumbnail else None,
        tags=c.tags,
        level=c.level,
        demo_url=c.demo_url,
        benefits=list(c.benefits or []),
        prerequisites=list(c.prerequisites or []),
        course_data=list(c.course_data or []),
        reviews=list(c.reviews or []),
        rating=c.rating,
        purchased=c.purchased,
        created_at=c.created_at,
        updated_at=c.updated_at,
    )


class CourseRepository(BaseRepository[Course]):
    """Course repository: documents with JSON content columns."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Course)

    async def get_by_id(self, course_id: str) -> CourseResult | None:
        course = await self._get(course_id)
        return _course_to_result(course) if course else None

    async def list_all(self) -> list[CourseResult]:
        return [_course_to_result(c) for c in await self._list_newest_first()]

    async def create(
        self, data: CourseCreate, thumbnail: dict[str, Any] | None = None
    ) -> CourseResult:
        course = Course(**asdict(data), thumbnail=thumbnail, reviews=[])
        return _course_to_result(await self._add(course))

    async def update_fields(
        self, course_id: str, fields: dict[str, Any]
    ) -> CourseResult | None:
        course = await self._get(course_id)
        if course is None:
            return None
        return _course_to_result(await self._assign(course, fields, _UPDATABLE))

    async def delete(self, course_id: str) -> bool:
        return await self._remove(course_id)

    async def increment_purchased(self, course_id: str) -> None:
        await self.db.execute(
            update(Course)
            .where(Course.id == course_id)
            .values(purchased=Course.purchased + 1)
        )

    async def remove_user_content(self, user_id: str) -> int:
        """Pull the user's reviews, questions and replies from every course; recompute ratings."""
        result = await self.db.execute(select(Course))
        changed_count = 0
        for course in result.scalars().all():
            lessons, reviews, changed = without_user_content(
                list(course.course_data or []), list(course.reviews or []), user_id
            )
            if not changed:
                continue
            await self._assign(
                course,
                {"course_data": lessons, "reviews": reviews, "rating": rating_of(reviews)},
                _UPDATABLE,
            )
            changed_count += 1
        return changed_count
