"""Time formatting and status routing shared by the CLI and the engine."""

from __future__ import annotations

import logging
from collections.abc import Callable

from pytimeparse2 import parse as parse_duration

from ffedit.models.verbosity import Verbosity

StatusCallback = Callable[[str], None]

logger = logging.getLogger(__name__)


def parse_timespan_to_ms(s: str | None) -> int | None:
    """Parse ``"90s"``, ``"1m30s"`` or ``"00:01:30.5"`` into whole milliseconds.

    Empty input yields ``None``.

    Raises:
        ValueError: If ``s`` is not a recognizable timespan.

    """
    if not s:
        return None
    seconds = parse_duration(s)
    if seconds is None:
        raise ValueError(f"Unable to parse timespan: {s}")
    return round(float(seconds) * 1000)


def format_ms(ms: int) -> str:
    """Render milliseconds as ``HH:MM:SS.mmm``."""
    hours, rest = divmod(ms, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    seconds, millis = divmod(rest, 1000)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{millis:03d}"


def format_progress(fraction: float) -> str:
    return f"{fraction:6.1%}"


def emit_status(message: str, *, status_callback: StatusCallback | None) -> None:
    """Route a status line.

    ``None`` logs at INFO level. The builtin ``print`` writes straight to the
    terminal, leaving the cursor on the line for carriage-return updates. Any
    other callable receives the message unchanged.
    """
    if status_callback is print:
        overwrite = message.endswith("\r")
        print(message, end="" if overwrite else "\n", flush=True)  # noqa: T201
    elif status_callback is not None:
        status_callback(message)
    else:
        logger.info(message)


def log_command(
    command: str,
    *,
    verbosity: Verbosity,
    status_callback: StatusCallback | None,
    cached: bool = False,
) -> None:
    """Announce an external command once verbosity reaches ``COMMANDS``."""
    if verbosity < Verbosity.COMMANDS:
        return
    label = "Cached" if cached else "Running"
    emit_status(f"{label}: {command}", status_callback=status_callback)


__all__ = [
    "StatusCallback",
    "emit_status",
    "format_ms",
    "format_progress",
    "log_command",
    "parse_timespan_to_ms",
]
