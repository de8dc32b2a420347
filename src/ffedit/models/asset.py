"""Source media assets and their streams."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from .types import MediaKind

if TYPE_CHECKING:
    from fractions import Fraction


@dataclass(frozen=True, slots=True)
class Stream:
    """A single decodable stream inside an asset."""

    kind: MediaKind
    index: int  #: Position among streams of the same kind, as ffmpeg's ``v:N``/``a:N`` selectors count them.
    duration_ms: int
    time_base: Fraction | None = None
    codec: str | None = None


@runtime_checkable
class Asset(Protocol):
    """Decodable source media owned by the caller.

    Implementations must support weak references: composition tracks point
    back at their asset without keeping it alive.
    """

    @property
    def location(self) -> str:
        """File path or URL the media is read from."""
        ...

    @property
    def duration_ms(self) -> int:
        """Container duration in milliseconds."""
        ...

    def streams(self, kind: MediaKind) -> tuple[Stream, ...]:
        """Return the streams of ``kind`` in index order."""
        ...


@dataclass(frozen=True, slots=True, weakref_slot=True)
class MediaAsset:
    """Asset backed by ffprobe metadata."""

    location: str
    duration_ms: int
    all_streams: tuple[Stream, ...] = field(default_factory=tuple)

    def streams(self, kind: MediaKind) -> tuple[Stream, ...]:
        """Return the streams of ``kind`` in index order."""
        return tuple(sorted((s for s in self.all_streams if s.kind is kind), key=lambda s: s.index))

    def stream(self, kind: MediaKind, index: int = 0) -> Stream:
        """Return a single stream of ``kind``.

        Raises:
            LookupError: If no such stream exists.

        """
        for s in self.streams(kind):
            if s.index == index:
                return s
        raise LookupError(f"{self.location} has no {kind.value} stream {index}")

    @property
    def has_video(self) -> bool:
        return bool(self.streams(MediaKind.VIDEO))

    @property
    def has_audio(self) -> bool:
        return bool(self.streams(MediaKind.AUDIO))


__all__ = ["Asset", "MediaAsset", "Stream"]
