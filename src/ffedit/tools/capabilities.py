"""FFmpeg capability detection helpers."""

from __future__ import annotations

import subprocess
from typing import TYPE_CHECKING

from ffedit.models.errors import ExporterUnavailableError
from ffedit.models.types import Container, Encoder, MediaKind, QualityPreset

from .cli import FFMPEG, cache_key, run_ffmpeg

if TYPE_CHECKING:
    from ffedit.models.context import RuntimeContext

_PROBE_SOURCES: dict[MediaKind, str] = {
    MediaKind.VIDEO: "color=c=black:s=200x200:d=0.1",
    MediaKind.AUDIO: "anullsrc=r=48000:cl=stereo:d=0.1",
}


def check_encoder(ctx: RuntimeContext, encoder: Encoder) -> bool:
    """Whether ``encoder`` can encode one frame of a synthetic lavfi source.

    The answer is cached per encoder in ``ctx``.
    """
    sel = encoder.kind.selector
    args = ["-hide_banner", "-loglevel", "error", "-f", "lavfi", "-i", _PROBE_SOURCES[encoder.kind]]
    args += [f"-frames:{sel}", "1", f"-c:{sel}", encoder.ffmpeg_name, "-f", "null", "-"]
    key = cache_key([FFMPEG, *args])
    usable = ctx.cache.get(key)
    if not isinstance(usable, bool):
        try:
            run_ffmpeg(args)
        except (OSError, subprocess.CalledProcessError):
            usable = False
        else:
            usable = True
        ctx.cache[key] = usable
    return usable


def resolve_encoders(
    ctx: RuntimeContext,
    preset: QualityPreset,
    container: Container,
    kinds: set[MediaKind],
) -> dict[MediaKind, Encoder]:
    """Pick the encoder used for each stream kind of an export.

    Encoders are chosen in the container's order of preference. Stream copy
    presets need no encoder and return an empty mapping.

    Raises:
        ExporterUnavailableError: If a kind has no usable encoder for the
            container.

    """
    if preset.is_copy:
        return {}
    compat = container.compatibility
    candidates = {MediaKind.VIDEO: compat.video_encoders, MediaKind.AUDIO: compat.audio_encoders}
    chosen: dict[MediaKind, Encoder] = {}
    for kind in sorted(kinds, key=lambda k: k.value, reverse=True):
        options = candidates[kind]
        if not options:
            raise ExporterUnavailableError(
                f"Container '{container.value}' cannot carry {kind.value} with preset '{preset.value}'"
            )
        for enc in options:
            if check_encoder(ctx, enc):
                chosen[kind] = enc
                break
        else:
            names = ", ".join(e.ffmpeg_name for e in options)
            raise ExporterUnavailableError(f"No {kind.value} encoder available for '{container.value}' (tried {names})")
    return chosen


__all__ = ["check_encoder", "resolve_encoders"]
