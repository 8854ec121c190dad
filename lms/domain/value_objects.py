"""Domain value objects for the LMS.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class CourseRating:
    """Course rating: average of review scores rounded down to the nearest 0.5.

    Examples: [4, 5] -> 4.5, [4, 4, 5] -> 4.0, [] -> 0.0.
    """

    value: float

    MIN: ClassVar[float] = 0.0
    MAX: ClassVar[float] = 5.0

    def __post_init__(self) -> None:
        if not self.MIN <= self.value <= self.MAX:
            raise ValueError(
                f"Rating must be between {self.MIN} and {self.MAX}, got {self.value}"
            )

    @classmethod
    def average(cls, scores: Iterable[float]) -> "CourseRating":
        values = [float(s) for s in scores]
        if not values:
            return cls(0.0)
        return cls(math.floor(sum(values) / len(values) * 2) / 2)


@dataclass(frozen=True)
class ReviewScore:
    """A single review score, 1 to 5 inclusive."""

    value: float

    def __post_init__(self) -> None:
        if not 1 <= self.value <= 5:
            raise ValueError("Review rating must be between 1 and 5")
