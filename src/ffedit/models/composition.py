"""In-memory compositions assembled from source asset streams."""

from __future__ import annotations

import weakref
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .errors import InsertionError, TrackCreationError
from .timerange import TimeRange
from .types import MediaKind

if TYPE_CHECKING:
    from collections.abc import Iterator

    from .asset import Asset, Stream


@dataclass(frozen=True, slots=True)
class Segment:
    """A source range placed on a composition track."""

    source_range: TimeRange
    at_ms: int  #: Destination start of the segment.

    @property
    def target_range(self) -> TimeRange:
        """Destination range covered by the segment."""
        return TimeRange.from_duration(self.source_range.duration_ms, start_ms=self.at_ms)


class Track:
    """Non-owning reference to one stream of a source asset.

    The asset must outlive every export built from the track; the track only
    keeps a weak reference to it.
    """

    __slots__ = ("_source", "kind", "stream_index")

    def __init__(self, kind: MediaKind, source: Asset, stream_index: int = 0) -> None:
        if not isinstance(kind, MediaKind):
            raise TrackCreationError(f"Unsupported track kind: {kind!r}")
        try:
            self._source = weakref.ref(source)
        except TypeError as e:
            raise TrackCreationError(f"Source asset does not support weak references: {source!r}") from e
        self.kind = kind
        self.stream_index = stream_index

    def __repr__(self) -> str:
        return f"Track(kind={self.kind.value!r}, stream_index={self.stream_index}, alive={self.is_alive})"

    @property
    def is_alive(self) -> bool:
        """Whether the source asset still exists."""
        return self._source() is not None

    @property
    def source(self) -> Asset:
        """Return the source asset.

        Raises:
            ReferenceError: If the asset was released before use.

        """
        asset = self._source()
        if asset is None:
            raise ReferenceError(f"Source asset of {self.kind.value} stream {self.stream_index} was released")
        return asset

    @property
    def stream(self) -> Stream:
        """Return the source stream this track reads from."""
        for s in self.source.streams(self.kind):
            if s.index == self.stream_index:
                return s
        raise TrackCreationError(f"Source has no {self.kind.value} stream {self.stream_index}")


class CompositionTrack:
    """Destination track holding ordered, non-overlapping segments."""

    def __init__(self, track_id: int, track: Track) -> None:
        self.track_id = track_id
        self.track = track
        self._segments: list[Segment] = []

    def __repr__(self) -> str:
        return f"CompositionTrack(id={self.track_id}, {self.track!r}, segments={len(self._segments)})"

    @property
    def kind(self) -> MediaKind:
        return self.track.kind

    @property
    def segments(self) -> tuple[Segment, ...]:
        return tuple(self._segments)

    @property
    def end_ms(self) -> int:
        """Destination time at which the last segment ends."""
        return self._segments[-1].target_range.end_ms if self._segments else 0

    @property
    def duration_ms(self) -> int:
        """Total media time carried by the track."""
        return sum(seg.source_range.duration_ms for seg in self._segments)

    def insert_time_range(self, source_range: TimeRange, at_ms: int = 0) -> Segment:
        """Insert ``source_range`` of the source stream at destination ``at_ms``.

        Raises:
            InsertionError: If the range leaves the source stream, the
                destination is negative, or it would overlap or precede an
                already inserted segment.

        """
        kind, index = self.track.kind, self.track.stream_index
        if at_ms < 0:
            raise InsertionError(f"negative insertion time {at_ms}ms", kind=kind, stream_index=index)
        try:
            stream = self.track.stream
        except (ReferenceError, TrackCreationError) as e:
            raise InsertionError(str(e), kind=kind, stream_index=index) from e
        if source_range.end_ms > stream.duration_ms:
            raise InsertionError(
                f"range {source_range} exceeds stream duration {stream.duration_ms}ms",
                kind=kind,
                stream_index=index,
            )
        segment = Segment(source_range=source_range, at_ms=at_ms)
        if at_ms < self.end_ms:
            raise InsertionError(
                f"segment at {at_ms}ms overlaps or precedes existing content ending at {self.end_ms}ms",
                kind=kind,
                stream_index=index,
            )
        self._segments.append(segment)
        return segment


class Composition:
    """Ordered collection of destination tracks forming a new timeline."""

    def __init__(self) -> None:
        self._tracks: list[CompositionTrack] = []
        self._next_id = 1

    def __repr__(self) -> str:
        return f"Composition(tracks={self._tracks!r}, duration_ms={self.duration_ms})"

    def __iter__(self) -> Iterator[CompositionTrack]:
        return iter(self._tracks)

    def __len__(self) -> int:
        return len(self._tracks)

    @property
    def tracks(self) -> tuple[CompositionTrack, ...]:
        return tuple(self._tracks)

    def tracks_of(self, kind: MediaKind) -> tuple[CompositionTrack, ...]:
        """Return destination tracks of ``kind`` in insertion order."""
        return tuple(t for t in self._tracks if t.kind is kind)

    @property
    def duration_ms(self) -> int:
        """Destination end of the longest track."""
        return max((t.end_ms for t in self._tracks), default=0)

    @property
    def is_empty(self) -> bool:
        """Whether the composition carries no media time."""
        return self.duration_ms == 0

    def add_track(self, kind: MediaKind, source: Asset, stream_index: int = 0) -> CompositionTrack:
        """Create a destination track reading from ``source``.

        Raises:
            TrackCreationError: If the track cannot reference the source.

        """
        comp_track = CompositionTrack(self._next_id, Track(kind, source, stream_index))
        self._next_id += 1
        self._tracks.append(comp_track)
        return comp_track

    def validate(self) -> None:
        """Check segment ordering on every track.

        Raises:
            InsertionError: If any track holds overlapping or unordered segments.

        """
        for comp_track in self._tracks:
            previous_end = 0
            for seg in comp_track.segments:
                if seg.at_ms < previous_end:
                    raise InsertionError(
                        f"segment at {seg.at_ms}ms overlaps content ending at {previous_end}ms",
                        kind=comp_track.kind,
                        stream_index=comp_track.track.stream_index,
                    )
                previous_end = seg.target_range.end_ms


__all__ = ["Composition", "CompositionTrack", "Segment", "Track"]
