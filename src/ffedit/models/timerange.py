"""Half-open time ranges on a media timeline."""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction
from typing import TypeAlias

from ffedit.tools.helpers import parse_timespan_to_ms

from .errors import InvalidRangeError

MS_PER_SECOND = 1000

Seconds: TypeAlias = int | float | Decimal | Fraction


def seconds_to_ms(value: Seconds) -> int:
    """Convert seconds to whole milliseconds, rounding to the nearest tick.

    Floats are converted through ``Fraction`` so the result only depends on the
    value itself, never on the order of previous operations.

    Raises:
        InvalidRangeError: If ``value`` is NaN or infinite.

    """
    if isinstance(value, Decimal):
        finite = value.is_finite()
    else:
        finite = not isinstance(value, float) or math.isfinite(value)
    if not finite:
        raise InvalidRangeError(f"Time value must be finite: {value}")
    if isinstance(value, float):
        value = Fraction(value).limit_denominator(10**9)
    return round(Fraction(value) * MS_PER_SECOND)


@dataclass(frozen=True, slots=True, order=True)
class TimeRange:
    """Immutable ``[start, end)`` interval in integer milliseconds.

    A zero-length range is valid and denotes an empty selection.

    Raises:
        InvalidRangeError: If a bound is negative or ``end < start``.

    """

    start_ms: int
    end_ms: int

    def __post_init__(self) -> None:
        if self.start_ms < 0 or self.end_ms < 0:
            raise InvalidRangeError(f"Time range bounds must not be negative: {self}")
        if self.end_ms < self.start_ms:
            raise InvalidRangeError(f"Time range ends before it starts: {self}")

    def __str__(self) -> str:
        return f"[{self.start_ms}ms, {self.end_ms}ms)"

    @classmethod
    def from_seconds(cls, start: Seconds, end: Seconds) -> TimeRange:
        """Build a range from second values."""
        return cls(seconds_to_ms(start), seconds_to_ms(end))

    @classmethod
    def from_duration(cls, duration_ms: int, *, start_ms: int = 0) -> TimeRange:
        """Build a range of ``duration_ms`` starting at ``start_ms``."""
        return cls(start_ms, start_ms + duration_ms)

    @classmethod
    def from_timespans(cls, start: str | None, end: str | None, *, default_end_ms: int) -> TimeRange:
        """Build a range from timespans such as ``"90s"`` or ``"00:01:30"``.

        A missing start means the beginning of the media, a missing end means
        ``default_end_ms``.
        """
        start_ms = parse_timespan_to_ms(start)
        end_ms = parse_timespan_to_ms(end)
        return cls(start_ms or 0, default_end_ms if end_ms is None else end_ms)

    @property
    def duration_ms(self) -> int:
        """Length of the range in milliseconds."""
        return self.end_ms - self.start_ms

    @property
    def is_empty(self) -> bool:
        """Whether the range covers no time."""
        return self.end_ms == self.start_ms

    @property
    def start_seconds(self) -> float:
        return self.start_ms / MS_PER_SECOND

    @property
    def duration_seconds(self) -> float:
        return self.duration_ms / MS_PER_SECOND

    def contains(self, ms: int) -> bool:
        """Whether the instant ``ms`` lies inside the range."""
        return self.start_ms <= ms < self.end_ms

    def overlaps(self, other: TimeRange) -> bool:
        """Whether both ranges share a non-empty stretch of time."""
        return self.start_ms < other.end_ms and other.start_ms < self.end_ms

    def intersect(self, other: TimeRange) -> TimeRange | None:
        """Return the common part of both ranges.

        Touching ranges yield an empty range at the shared boundary; disjoint
        ranges yield ``None``.
        """
        start = max(self.start_ms, other.start_ms)
        end = min(self.end_ms, other.end_ms)
        if end < start:
            return None
        return TimeRange(start, end)

    def shift(self, offset_ms: int) -> TimeRange:
        """Return the range moved by ``offset_ms``."""
        return TimeRange(self.start_ms + offset_ms, self.end_ms + offset_ms)

    def clamp(self, limit_ms: int) -> TimeRange:
        """Clip the end of the range to ``limit_ms``.

        Raises:
            InvalidRangeError: If the range starts after ``limit_ms``.

        """
        if self.start_ms > limit_ms:
            raise InvalidRangeError(f"Range {self} starts after the media ends at {limit_ms}ms")
        return TimeRange(self.start_ms, min(self.end_ms, limit_ms))


__all__ = ["MS_PER_SECOND", "Seconds", "TimeRange", "seconds_to_ms"]
