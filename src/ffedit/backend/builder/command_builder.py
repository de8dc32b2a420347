"""Build FFmpeg command arguments from a composition."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ffedit.models.errors import ExporterUnavailableError, TrackCreationError
from ffedit.models.types import MediaKind

from . import encode, mux, trim
from .command_args import INPUT_FLAG, NO_STDIN, OVERWRITE_OUTPUT, PROGRESS
from .stream_args import disable_stream, map_spec

if TYPE_CHECKING:
    from pathlib import Path

    from ffedit.models.composition import Composition, CompositionTrack
    from ffedit.models.types import Container, Encoder, QualityPreset

GLOBAL_FLAGS: tuple[str, ...] = (*OVERWRITE_OUTPUT, *NO_STDIN)


def _track_input(comp_track: CompositionTrack) -> tuple[tuple[str, ...], bool]:
    """Return the seeked input args for one track and whether it is trimmed.

    Raises:
        ExporterUnavailableError: If the track holds more than one segment.
        TrackCreationError: If the track's source asset is gone.

    """
    segments = comp_track.segments
    if len(segments) != 1:
        raise ExporterUnavailableError(
            f"Track {comp_track.track_id} holds {len(segments)} segments; exactly one is supported"
        )
    try:
        source = comp_track.track.source
        stream = comp_track.track.stream
    except ReferenceError as e:
        raise TrackCreationError(str(e)) from e
    segment = segments[0]
    args = trim.input_args(segment, stream.duration_ms) + INPUT_FLAG + (source.location,)
    return args, trim.is_trimmed(segment, stream.duration_ms)


def build_command(
    composition: Composition,
    output_path: Path,
    preset: QualityPreset,
    container: Container,
    encoders: dict[MediaKind, Encoder] | None = None,
    *,
    progress: bool = True,
) -> tuple[str, ...]:
    """Return the FFmpeg command rendering ``composition`` to ``output_path``.

    Every destination track reads its own seeked input, so video and audio
    can be clipped to different lengths.

    Raises:
        ExporterUnavailableError: If the composition is empty or cannot be
            expressed as a single FFmpeg invocation.
        TrackCreationError: If a track's source asset is gone.

    """
    if composition.is_empty:
        raise ExporterUnavailableError("Composition is empty; nothing to export")
    encoders = encoders or {}
    args = GLOBAL_FLAGS + (PROGRESS if progress else ())
    maps: tuple[str, ...] = ()
    trimmed = False
    for input_index, comp_track in enumerate(composition):
        input_args, track_trimmed = _track_input(comp_track)
        args = args + input_args
        trimmed = trimmed or track_trimmed
        maps = maps + map_spec(comp_track.kind, comp_track.track.stream_index, input_index=input_index)

    args = args + maps
    if composition.tracks_of(MediaKind.VIDEO):
        args = args + encode.video(preset, encoders.get(MediaKind.VIDEO))
    else:
        args = args + disable_stream(MediaKind.VIDEO)
    if composition.tracks_of(MediaKind.AUDIO):
        args = args + encode.audio(preset, encoders.get(MediaKind.AUDIO))
    else:
        args = args + disable_stream(MediaKind.AUDIO)
    args = args + mux.build(container, trimmed=trimmed, passthrough=preset.is_copy)
    return args + (str(output_path),)


__all__ = ["GLOBAL_FLAGS", "build_command"]
