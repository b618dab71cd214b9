"""Half-open time intervals and the single overlap predicate.

Every conflict check in PODIUM (block vs block, booking vs block, booking vs
booking) goes through `overlaps`. Intervals are ``[start, end)``: the end
instant is excluded, so back-to-back intervals never conflict.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TypeVar

from podium.domain.errors import InvalidIntervalError
from podium.domain.utils import is_aware, to_utc

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class TimeInterval:
    """A non-empty ``[start, end)`` span between two UTC instants.

    Raises:
        InvalidIntervalError: If either bound is naive or ``end <= start``.
    """

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if not (is_aware(self.start) and is_aware(self.end)):
            raise InvalidIntervalError(
                self.start, self.end, "bounds must be timezone-aware"
            )
        if self.end <= self.start:
            raise InvalidIntervalError(self.start, self.end)
        # frozen: normalize through object.__setattr__
        object.__setattr__(self, "start", to_utc(self.start))
        object.__setattr__(self, "end", to_utc(self.end))

    @property
    def duration(self) -> timedelta:
        """Length of the interval."""
        return self.end - self.start

    @property
    def duration_minutes(self) -> int:
        """Length of the interval in whole minutes."""
        return int(self.duration.total_seconds() // 60)

    def overlaps(self, other: TimeInterval) -> bool:
        """Shorthand for ``overlaps(self, other)``."""
        return overlaps(self, other)


def overlaps(a: TimeInterval, b: TimeInterval) -> bool:
    """Return True if the two half-open intervals share at least one instant."""
    return a.start < b.end and b.start < a.end


def first_overlapping(
    interval: TimeInterval,
    candidates: Iterable[T],
    key: Callable[[T], TimeInterval],
) -> T | None:
    """Return the first candidate whose interval overlaps `interval`.

    Args:
        interval: The interval being tested.
        candidates: Objects to scan, in the order they should be reported.
        key: Extracts the interval of a candidate.

    Returns:
        The first overlapping candidate, or None when there is none.
    """
    for candidate in candidates:
        if overlaps(interval, key(candidate)):
            return candidate
    return None
