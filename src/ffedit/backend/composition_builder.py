"""Build compositions that trim an asset or drop its audio."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ffedit.models.composition import Composition
from ffedit.models.errors import InvalidRangeError, MissingStreamError
from ffedit.models.timerange import TimeRange
from ffedit.models.types import MediaKind

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ffedit.models.asset import Asset

logger = logging.getLogger(__name__)

EDITABLE_KINDS: tuple[MediaKind, ...] = (MediaKind.VIDEO, MediaKind.AUDIO)


def trim(asset: Asset, time_range: TimeRange, *, require: Iterable[MediaKind] = ()) -> Composition:
    """Return a composition holding ``time_range`` of every stream of ``asset``.

    Each stream gets its own destination track starting at time zero. The range
    end is clipped to each stream's own duration, so a range running past the
    end of the media still succeeds.

    Args:
        asset: Source media. Must stay alive until every export built from the
            composition has finished.
        time_range: Source range to keep.
        require: Stream kinds that must be present in the asset.

    Raises:
        MissingStreamError: If the asset has no video and no audio stream, or
            lacks a kind listed in ``require``.
        InvalidRangeError: If the range starts after the media or one of its
            streams ends.
        InsertionError: If a stream cannot take the range. The error names
            the failing stream.

    """
    streams = {kind: asset.streams(kind) for kind in EDITABLE_KINDS}
    if not any(streams.values()):
        raise MissingStreamError(f"{asset.location} has neither a video nor an audio stream")
    for kind in require:
        if not streams.get(kind):
            raise MissingStreamError(f"{asset.location} has no {kind.value} stream")
    if time_range.start_ms > asset.duration_ms:
        raise InvalidRangeError(f"Range {time_range} starts after the media ends at {asset.duration_ms}ms")

    composition = Composition()
    for kind in EDITABLE_KINDS:
        for stream in streams[kind]:
            try:
                clipped = time_range.clamp(stream.duration_ms)
            except InvalidRangeError as e:
                raise InvalidRangeError(f"{kind.value} stream {stream.index}: {e}") from e
            if clipped != time_range:
                logger.debug("Clipped %s to %s for %s stream %d", time_range, clipped, kind.value, stream.index)
            comp_track = composition.add_track(kind, asset, stream.index)
            comp_track.insert_time_range(clipped, at_ms=0)
    return composition


def strip_audio(asset: Asset) -> Composition:
    """Return a composition with every video stream of ``asset`` and no audio.

    Video streams are copied over their full duration. Audio streams are never
    added to the composition.

    Raises:
        MissingStreamError: If the asset has no video stream.
        InsertionError: If a video stream cannot be inserted.

    """
    videos = asset.streams(MediaKind.VIDEO)
    if not videos:
        raise MissingStreamError(f"{asset.location} has no video stream")
    composition = Composition()
    for stream in videos:
        comp_track = composition.add_track(MediaKind.VIDEO, asset, stream.index)
        comp_track.insert_time_range(TimeRange(0, stream.duration_ms), at_ms=0)
    skipped = len(asset.streams(MediaKind.AUDIO))
    if skipped:
        logger.debug("Dropped %d audio stream(s) from %s", skipped, asset.location)
    return composition


__all__ = ["EDITABLE_KINDS", "strip_audio", "trim"]
