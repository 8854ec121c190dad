"""Admin analytics: records created per month over the last twelve months."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import TYPE_CHECKING, Any

from lms.application.dtos.analytics import AnalyticsSeries, MonthlyCount
from lms.application.services.cache_keys import analytics_key
from lms.application.services.cache_policy import read_through
from lms.shared.telemetry.tracing import traced
from lms.shared.utils.datetime import (
    end_of_month,
    seconds_until_end_of_day,
    shift_months,
    start_of_month,
    utc_now,
)

if TYPE_CHECKING:
    from lms.application.interfaces.repositories import (
        ICourseRepository,
        IOrderRepository,
        IUserRepository,
    )
    from lms.application.interfaces.services import ICacheService

Counter = Callable[[datetime, datetime], Awaitable[int]]


def month_label(dt: datetime) -> str:
    """Label a window by its closing date, e.g. 'Oct 19, 2026'."""
    return f"{dt:%b} {dt.day}, {dt.year}"


async def last_twelve_months(counter: Counter, now: datetime | None = None) -> AnalyticsSeries:
    """Count records per calendar month for the current and previous eleven months.

    The current month window ends at now; earlier windows end on their last
    day. Returned oldest first.
    """
    now = now or utc_now()
    months: list[MonthlyCount] = []
    for offset in range(12):
        target = shift_months(now, -offset)
        start = start_of_month(target)
        end = now if offset == 0 else end_of_month(target)
        months.append(MonthlyCount(month=month_label(end), count=await counter(start, end)))
    months.reverse()
    return AnalyticsSeries(last_twelve_months=tuple(months))


class AnalyticsService:
    """User, course and order series, cached per admin under ``analytics:<kind>-<admin>``.

    The current month is labelled with today's date, so entries expire at the
    end of the UTC day.
    """

    def __init__(
        self,
        user_repo: IUserRepository,
        course_repo: ICourseRepository,
        order_repo: IOrderRepository,
        cache: ICacheService | None,
    ) -> None:
        self.counters: dict[str, Counter] = {
            "user": user_repo.count_created_between,
            "course": course_repo.count_created_between,
            "order": order_repo.count_created_between,
        }
        self.cache = cache

    @traced("analytics.series")
    async def series(self, *, kind: str, admin_id: str) -> dict[str, Any]:
        counter = self.counters[kind]
        return await read_through(
            self.cache,
            analytics_key(kind, admin_id),
            lambda: last_twelve_months(counter),
            ttl=seconds_until_end_of_day(utc_now()),
        )

    async def user_analytics(self, admin_id: str) -> dict[str, Any]:
        return await self.series(kind="user", admin_id=admin_id)

    async def course_analytics(self, admin_id: str) -> dict[str, Any]:
        return await self.series(kind="course", admin_id=admin_id)

    async def order_analytics(self, admin_id: str) -> dict[str, Any]:
        return await self.series(kind="order", admin_id=admin_id)
