"""Trim range selection from the command line."""

from __future__ import annotations

from typing import ClassVar

from cyclopts import Parameter
from pydantic import BaseModel, Field, field_validator, model_validator

from ffedit.models.timerange import TimeRange
from ffedit.tools.helpers import parse_timespan_to_ms

from .groups import TIME_GROUP


@Parameter(group=TIME_GROUP)
class TimeOptions(BaseModel):
    """Where the trimmed range starts, and where it ends or how long it lasts."""

    EXAMPLES: ClassVar[str] = "Examples: '90s', '1m20s', '00:01:30.250'."

    start: str | None = Field(None, description=f"Range start; defaults to the beginning. {EXAMPLES}")
    end: str | None = Field(None, description=f"Range end; defaults to the end of the media. {EXAMPLES}")
    duration: str | None = Field(None, description=f"Range length, instead of an end. {EXAMPLES}")

    @field_validator("start", "end", "duration")
    @classmethod
    def _check_timespan(cls, v: str | None) -> str | None:
        try:
            parse_timespan_to_ms(v)
        except ValueError as exc:
            raise ValueError(f"Invalid time format: {v}") from exc
        return v

    @model_validator(mode="after")
    def _check_bounds(self) -> TimeOptions:
        if self.end is not None and self.duration is not None:
            raise ValueError("Cannot specify both 'end' and 'duration'")
        start_ms = parse_timespan_to_ms(self.start) or 0
        end_ms = parse_timespan_to_ms(self.end)
        if end_ms is not None and end_ms < start_ms:
            raise ValueError("'end' must not be before 'start'")
        return self

    def to_range(self, media_duration_ms: int) -> TimeRange:
        """Resolve the selection against a media duration.

        Without an end or duration the range runs to ``media_duration_ms``.
        """
        if self.duration is None:
            return TimeRange.from_timespans(self.start, self.end, default_end_ms=media_duration_ms)
        start_ms = parse_timespan_to_ms(self.start) or 0
        return TimeRange(start_ms, start_ms + (parse_timespan_to_ms(self.duration) or 0))


__all__ = ["TimeOptions"]
