"""Last-twelve-months analytics windows and the cached AnalyticsService."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

from lms.application.services import cache_keys as keys
from lms.application.use_cases import AnalyticsService, last_twelve_months
from lms.application.use_cases.analytics import month_label
from lms.shared.utils.datetime import seconds_until_end_of_day, shift_months
from tests.fakes import make_user


async def test_twelve_windows_oldest_first() -> None:
    now = datetime(2026, 10, 19, 15, 30, tzinfo=UTC)
    windows: list[tuple[datetime, datetime]] = []

    async def counter(start: datetime, end: datetime) -> int:
        windows.append((start, end))
        return start.month

    series = await last_twelve_months(counter, now=now)
    labels = [m.month for m in series.last_twelve_months]
    assert len(labels) == 12
    assert labels[0] == "Nov 30, 2025"
    assert labels[-2] == "Sep 30, 2026"
    assert labels[-1] == "Oct 19, 2026"
    assert [m.count for m in series.last_twelve_months][-1] == 10
    current_start, current_end = windows[0]
    assert current_start == datetime(2026, 10, 1, tzinfo=UTC)
    assert current_end == now


async def test_february_window_ends_on_last_day() -> None:
    now = datetime(2024, 3, 31, tzinfo=UTC)
    series = await last_twelve_months(AsyncMock(return_value=0), now=now)
    assert series.last_twelve_months[-2].month == "Feb 29, 2024"


def test_shift_months_clamps_day() -> None:
    assert shift_months(datetime(2026, 3, 31), -1) == datetime(2026, 2, 28)
    assert shift_months(datetime(2026, 1, 15), -2) == datetime(2025, 11, 15)


def test_month_label() -> None:
    assert month_label(datetime(2026, 1, 5)) == "Jan 5, 2026"


async def test_service_caches_series_per_admin(user_repo, course_repo, order_repo, cache) -> None:
    user_repo.add(make_user("u1"))
    service = AnalyticsService(user_repo, course_repo, order_repo, cache)
    series = await service.user_analytics("a1")
    assert series["last_twelve_months"][-1]["count"] == 1
    assert await cache.get(keys.analytics_key("user", "a1")) == series
    user_repo.add(make_user("u2", email="b@example.com"))
    assert await service.user_analytics("a1") == series
    assert (await service.order_analytics("a1"))["last_twelve_months"][-1]["count"] == 0


def test_seconds_until_end_of_day() -> None:
    assert seconds_until_end_of_day(datetime(2026, 10, 19, 23, 0, tzinfo=UTC)) == 3600
    assert seconds_until_end_of_day(datetime(2026, 10, 19, tzinfo=UTC)) == 86400
    assert seconds_until_end_of_day(datetime(2026, 10, 19, 23, 59, 59, 999_999, tzinfo=UTC)) == 1


async def test_cached_series_expires_by_end_of_day(user_repo, course_repo, order_repo, cache) -> None:
    service = AnalyticsService(user_repo, course_repo, order_repo, cache)
    await service.course_analytics("a1")
    ttl = cache.ttls[keys.analytics_key("course", "a1")]
    assert ttl is not None
    assert 1 <= ttl <= 86400
