"""DTOs for analytics (last twelve months series)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class MonthlyCount:
    """Records created in one month window; month is labelled e.g. 'Oct 31, 2026'."""

    month: str
    count: int


@dataclass(frozen=True)
class AnalyticsSeries:
    """Twelve month windows, oldest first."""

    last_twelve_months: tuple[MonthlyCount, ...]
