"""Shared utilities: datetime, generators, serialization."""

from lms.shared.utils.datetime import (
    end_of_month,
    ensure_utc,
    shift_months,
    start_of_month,
    utc_now,
)
from lms.shared.utils.generators import generate_cuid, generate_numeric_code
from lms.shared.utils.serialization import jsonable

__all__ = [
    "generate_cuid",
    "generate_numeric_code",
    "jsonable",
    "utc_now",
    "ensure_utc",
    "start_of_month",
    "end_of_month",
    "shift_months",
]
