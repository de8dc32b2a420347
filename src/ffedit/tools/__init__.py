"""FFmpeg-related helper utilities."""

from . import probe
from .capabilities import check_encoder, resolve_encoders
from .cli import (
    check_ffmpeg_version,
    format_ffmpeg_cmd,
    get_ffmpeg_version,
    get_ffprobe_version,
    run_ffmpeg,
    run_ffprobe,
    spawn_ffmpeg,
)
from .helpers import emit_status, format_ms, parse_timespan_to_ms

__all__ = [
    "check_encoder",
    "check_ffmpeg_version",
    "emit_status",
    "format_ffmpeg_cmd",
    "format_ms",
    "get_ffmpeg_version",
    "get_ffprobe_version",
    "parse_timespan_to_ms",
    "probe",
    "resolve_encoders",
    "run_ffmpeg",
    "run_ffprobe",
    "spawn_ffmpeg",
]
