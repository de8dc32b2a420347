"""Time range argument helpers."""

from ffedit.models.composition import Segment
from ffedit.tools import format_ms

START: tuple[str, ...] = ("-ss",)  #: Seek to this start timestamp before decoding.
DURATION: tuple[str, ...] = ("-t",)  #: Duration to read from the start position.
OFFSET: tuple[str, ...] = ("-itsoffset",)  #: Delay the input on the destination timeline.


def input_args(segment: Segment, stream_duration_ms: int) -> tuple[str, ...]:
    """Return pre-input args placing ``segment`` on the destination timeline.

    Seeking happens on the input so that every track is cut independently.
    A segment covering the whole stream from zero needs no duration flag.
    """
    source = segment.source_range
    args: list[str] = []
    if segment.at_ms:
        args += [*OFFSET, format_ms(segment.at_ms)]
    if source.start_ms:
        args += [*START, format_ms(source.start_ms)]
    if source.start_ms or source.end_ms < stream_duration_ms:
        args += [*DURATION, format_ms(source.duration_ms)]
    return tuple(args)


def is_trimmed(segment: Segment, stream_duration_ms: int) -> bool:
    """Whether ``segment`` covers less than the full stream."""
    source = segment.source_range
    return bool(source.start_ms) or source.end_ms < stream_duration_ms
