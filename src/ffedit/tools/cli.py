"""Process helpers for the FFmpeg and ffprobe executables."""

import logging
import os
import shlex
import subprocess
from collections.abc import Callable, Sequence
from functools import partial
from pathlib import Path
from typing import Any

from ffedit.models.context import RuntimeContext

from .helpers import emit_status

FFMPEG = "ffmpeg"
FFPROBE = "ffprobe"

logger = logging.getLogger(__name__)

CREATION_FLAGS = getattr(subprocess, "CREATE_NO_WINDOW", 0)  #: Keep Windows consoles hidden.


def cache_key(cmd: Sequence[str | Path]) -> tuple[Any, ...]:
    """Key ``cmd`` by its tokens plus size and mtime of any file it names.

    Re-encoding a file in place therefore invalidates cached probe results.
    """
    parts: list[Any] = []
    for token in map(str, cmd):
        parts.append(token)
        if token.startswith("-"):
            continue
        try:
            stat = Path(token).stat()
        except OSError:
            continue
        if Path(token).is_file():
            parts += [stat.st_mtime_ns, stat.st_size]
    return tuple(parts)


def spawn(exe: str | Path, args: Sequence[str | Path]) -> subprocess.Popen[str]:
    """Start ``exe`` with stdout and stderr merged into one line-buffered pipe."""
    logger.debug("Spawning: %s", join_command(exe, args))
    return subprocess.Popen(  # noqa: S603
        [str(exe), *map(str, args)],
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        errors="replace",
        bufsize=1,
        creationflags=CREATION_FLAGS,
    )


def run(
    exe: str | Path,
    args: Sequence[str | Path],
    *,
    verbose: bool = False,
    status_callback: Callable[[str], None] | None = None,
) -> str:
    """Run ``exe`` to completion and return its combined output.

    With ``verbose`` each output line is forwarded to ``status_callback`` (or
    the logger) while the process runs.

    Raises:
        FileNotFoundError: If ``exe`` is not installed.
        subprocess.CalledProcessError: If the process exits with a non-zero status.

    """
    lines: list[str] = []
    with spawn(exe, args) as proc:
        if proc.stdout is None:  # pragma: no cover - defensive
            raise RuntimeError("Failed to capture subprocess stdout")
        for line in iter(proc.stdout.readline, ""):
            lines.append(line)
            if verbose:
                emit_status(line.rstrip("\n"), status_callback=status_callback)
        returncode = proc.wait()
    output = "".join(lines)
    if returncode:
        raise subprocess.CalledProcessError(returncode, [str(exe), *map(str, args)], output)
    return output


run_ffmpeg = partial(run, FFMPEG)
run_ffprobe = partial(run, FFPROBE)
spawn_ffmpeg = partial(spawn, FFMPEG)


def _first_line(run_func: Callable[[Sequence[str | Path]], str], name: str) -> str:
    """Return the banner line of ``name -version``."""
    try:
        out = run_func(["-version"])
    except FileNotFoundError as e:  # pragma: no cover - system-dependent
        raise FileNotFoundError(f"{name} not found") from e
    except subprocess.CalledProcessError as e:  # pragma: no cover - unlikely
        raise RuntimeError(f"{name} failed: {e}") from e
    return out.splitlines()[0].strip()


def get_ffmpeg_version() -> str:
    """Return the ``ffmpeg`` version string."""
    return _first_line(run_ffmpeg, FFMPEG)


def get_ffprobe_version() -> str:
    """Return the ``ffprobe`` version string."""
    return _first_line(run_ffprobe, FFPROBE)


def cached_tool_version(ctx: RuntimeContext, name: str, probe: Callable[[], str]) -> str:
    """Return ``name``'s version banner, calling ``probe`` only on a cache miss.

    Raises:
        RuntimeError: If the tool is missing or broken.

    """
    key = f"__{name}_version__"
    cached = ctx.cache.get(key)
    if isinstance(cached, str):
        return cached
    try:
        version = probe()
    except FileNotFoundError as e:  # pragma: no cover - system-dependent
        raise RuntimeError(f"{name} not found") from e
    ctx.cache[key] = version
    return version


def check_ffmpeg_version(ctx: RuntimeContext) -> str:
    """Return the ``ffmpeg`` version string, cached in ``ctx``."""
    return cached_tool_version(ctx, FFMPEG, get_ffmpeg_version)


def quote_arg(arg: str) -> str:
    """Quote ``arg`` for the current platform's shell."""
    return subprocess.list2cmdline([arg]) if os.name == "nt" else shlex.quote(arg)


def join_command(exe: str | Path, args: Sequence[str | Path]) -> str:
    """Format a command for display."""
    return " ".join(quote_arg(str(part)) for part in (exe, *args))


def format_ffmpeg_cmd(args: Sequence[str | Path]) -> str:
    """Format an ``ffmpeg`` command for display."""
    return join_command(FFMPEG, args)


__all__ = [
    "FFMPEG",
    "FFPROBE",
    "cache_key",
    "cached_tool_version",
    "check_ffmpeg_version",
    "format_ffmpeg_cmd",
    "get_ffmpeg_version",
    "get_ffprobe_version",
    "join_command",
    "quote_arg",
    "run",
    "run_ffmpeg",
    "run_ffprobe",
    "spawn",
    "spawn_ffmpeg",
]
