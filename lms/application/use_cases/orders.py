"""Order use cases: course purchase and admin order listing."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from lms.application.dtos.order import OrderResult
from lms.application.services.cache_keys import admin_orders_key
from lms.application.services.cache_policy import (
    CacheInvalidator,
    Mutation,
    read_through,
)
from lms.domain.exceptions import AlreadyEnrolledException, ResourceNotFoundException
from lms.shared.telemetry.logging import get_logger
from lms.shared.utils.datetime import utc_now

if TYPE_CHECKING:
    from lms.application.interfaces.repositories import (
        ICourseRepository,
        INotificationRepository,
        IOrderRepository,
        IUserRepository,
    )
    from lms.application.interfaces.services import ICacheService, IMailer, IUnitOfWork

logger = get_logger(__name__)


class OrderService:
    """Enrolment: order record, course access, purchase counter and admin notice."""

    def __init__(
        self,
        order_repo: IOrderRepository,
        user_repo: IUserRepository,
        course_repo: ICourseRepository,
        notification_repo: INotificationRepository,
        uow: IUnitOfWork,
        cache: ICacheService | None,
        mailer: IMailer,
    ) -> None:
        self.order_repo = order_repo
        self.user_repo = user_repo
        self.course_repo = course_repo
        self.notification_repo = notification_repo
        self.uow = uow
        self.cache = cache
        self.invalidator = CacheInvalidator(cache)
        self.mailer = mailer

    async def create(
        self, user_id: str, course_id: str, payment_info: dict[str, Any] | None = None
    ) -> OrderResult:
        """Enrol user in course.

        Order, course access, purchase counter and notification are written in
        one transaction. The confirmation mail is sent after commit; a mail
        failure is reported but leaves the enrolment in place.
        """
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise ResourceNotFoundException("user", user_id)
        if user.owns_course(course_id):
            raise AlreadyEnrolledException(course_id)
        course = await self.course_repo.get_by_id(course_id)
        if course is None:
            raise ResourceNotFoundException("course", course_id)

        async with self.uow:
            order = await self.order_repo.create(user_id, course_id, payment_info or {})
            await self.user_repo.add_course(user_id, course_id)
            await self.course_repo.increment_purchased(course_id)
            await self.notification_repo.create(
                user_id,
                "Course Purchased",
                f"You have successfully purchased the course {course.name}",
            )
        await self.invalidator.invalidate(Mutation.ORDER_CREATED, user_id)
        logger.info("User %s purchased course %s (order %s)", user_id, course_id, order.id)

        placed = order.created_at or utc_now()
        await self.mailer.send(
            user.email,
            "Order Confirmation",
            "order-confirmation",
            {
                "name": user.name,
                "order_number": order.id[:8],
                "course_name": course.name,
                "price": course.price,
                "date": f"{placed:%B} {placed.day}, {placed.year}",
            },
        )
        return order

    async def list_admin(self, admin_id: str) -> list[dict[str, Any]]:
        """All orders, newest first, cached per admin."""
        return await read_through(
            self.cache, admin_orders_key(admin_id), self.order_repo.list_all
        )
