"""ffprobe helpers and the ffprobe-backed asset provider."""

from __future__ import annotations

import json
import logging
import subprocess
from fractions import Fraction
from typing import TYPE_CHECKING, TypeVar

from ffedit.models.asset import MediaAsset, Stream
from ffedit.models.context import RuntimeContext
from ffedit.models.types import MediaKind
from ffedit.models.verbosity import Verbosity

from .cli import FFPROBE, cache_key, cached_tool_version, get_ffprobe_version, join_command, run_ffprobe
from .helpers import emit_status, log_command

if TYPE_CHECKING:
    from collections.abc import Callable

ASSET_ENTRIES = (
    "format=duration:stream=index,codec_type,codec_name,duration,time_base:stream_disposition=attached_pic"
)

logger = logging.getLogger(__name__)

_MISS = object()

T = TypeVar("T")


def check_version(ctx: RuntimeContext) -> str:
    """Return the ``ffprobe`` version banner, probing it once per cache."""
    return cached_tool_version(ctx, FFPROBE, get_ffprobe_version)


def run(ctx: RuntimeContext, cmd: list[str]) -> str | None:
    """Run ``ffprobe`` with ``cmd`` and return its stripped output.

    Failures and empty output give ``None``. Either outcome is cached under a
    key that includes the size and mtime of the probed file.
    """
    key = cache_key([FFPROBE, *cmd])
    command = join_command(FFPROBE, cmd)
    hit = ctx.cache.get(key, default=_MISS)
    log_command(command, verbosity=ctx.verbosity, status_callback=ctx.status_callback, cached=hit is not _MISS)
    if hit is not _MISS:
        return hit if isinstance(hit, str) else None
    try:
        out = run_ffprobe(cmd, verbose=ctx.verbosity >= Verbosity.OUTPUT, status_callback=ctx.status_callback)
    except subprocess.CalledProcessError as exc:
        logger.warning("ffprobe exited with status %s: %s", exc.returncode, command)
        if ctx.verbosity >= Verbosity.COMMANDS:
            emit_status(f"ffprobe failed ({exc.returncode}): {command}", status_callback=ctx.status_callback)
        out = ""
    result = out.strip() or None
    ctx.cache[key] = result
    return result


def query(
    ctx: RuntimeContext,
    path: str,
    entries: str,
    stream: str = "",
    *,
    convert: Callable[[str], T] | None = None,
) -> T | str | None:
    """Read ``-show_entries`` values from ``path`` as CSV.

    ``convert`` turns the raw text into a value; conversion errors yield ``None``.
    """
    selector = ["-select_streams", stream] if stream else []
    out = run(ctx, ["-v", "quiet", *selector, "-show_entries", entries, "-of", "csv=p=0", path])
    if not out or convert is None:
        return out
    try:
        return convert(out)
    except (ValueError, TypeError):
        return None


def seconds_text_to_ms(value: str) -> int:
    """Convert an ffprobe decimal seconds string to whole milliseconds."""
    return round(Fraction(value.strip()) * 1000)


def get_duration_ms(ctx: RuntimeContext, path: str) -> int | None:
    """Get the container duration in milliseconds."""
    dur = query(ctx, path, "format=duration", convert=seconds_text_to_ms)
    return dur if isinstance(dur, int) else None


def _parse_time_base(raw: object) -> Fraction | None:
    if not isinstance(raw, str) or "/" not in raw:
        return None
    try:
        tb = Fraction(raw)
    except (ValueError, ZeroDivisionError):
        return None
    return tb if tb > 0 else None


def parse_asset(location: str, payload: str) -> MediaAsset:
    """Build a ``MediaAsset`` from ffprobe JSON output.

    Streams without their own duration inherit the container duration.
    Cover-art video streams are skipped but still occupy their ``v:N`` index.

    Raises:
        ValueError: If the payload is not valid ffprobe JSON or has no duration.

    """
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise ValueError(f"Could not parse ffprobe output for: {location}") from e
    raw_duration = data.get("format", {}).get("duration")
    try:
        duration_ms = seconds_text_to_ms(str(raw_duration))
    except (ValueError, ZeroDivisionError) as e:
        raise ValueError(f"Could not read media duration from: {location}") from e

    streams: list[Stream] = []
    counters = dict.fromkeys(MediaKind, 0)
    for raw in data.get("streams", []):
        try:
            kind = MediaKind(raw.get("codec_type"))
        except ValueError:
            continue
        index = counters[kind]
        counters[kind] += 1
        # Cover art keeps its slot in ffmpeg's per-kind numbering.
        if raw.get("disposition", {}).get("attached_pic"):
            continue
        try:
            stream_ms = seconds_text_to_ms(str(raw["duration"]))
        except (KeyError, ValueError, ZeroDivisionError):
            stream_ms = duration_ms
        streams.append(
            Stream(
                kind=kind,
                index=index,
                duration_ms=min(stream_ms, duration_ms) if stream_ms else duration_ms,
                time_base=_parse_time_base(raw.get("time_base")),
                codec=raw.get("codec_name"),
            )
        )
    return MediaAsset(location=location, duration_ms=duration_ms, all_streams=tuple(streams))


def load_asset(ctx: RuntimeContext, location: str) -> MediaAsset:
    """Probe ``location`` and return its asset description.

    Raises:
        ValueError: If the media cannot be probed.

    """
    try:
        check_version(ctx)
    except (OSError, RuntimeError) as e:
        raise ValueError(str(e)) from e
    out = run(ctx, ["-v", "quiet", "-show_entries", ASSET_ENTRIES, "-of", "json", location])
    if not out:
        raise ValueError(f"Could not probe media: {location}")
    asset = parse_asset(location, out)
    logger.debug("Probed %s: %s", location, asset)
    return asset


__all__ = [
    "RuntimeContext",
    "check_version",
    "get_duration_ms",
    "load_asset",
    "parse_asset",
    "query",
    "run",
    "seconds_text_to_ms",
]
