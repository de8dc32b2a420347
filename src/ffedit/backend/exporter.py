"""Exporter sessions that render a composition to a file."""

from __future__ import annotations

import logging
import re
import threading
from collections import deque
from collections.abc import Callable
from contextlib import suppress
from typing import TYPE_CHECKING, Protocol

from ffedit.models.errors import EditError, ExporterUnavailableError
from ffedit.models.types import ExporterStatus, MediaKind
from ffedit.models.verbosity import Verbosity
from ffedit.tools import check_ffmpeg_version, resolve_encoders, spawn_ffmpeg
from ffedit.tools.cli import format_ffmpeg_cmd
from ffedit.tools.helpers import emit_status, log_command

from .builder import build_command

if TYPE_CHECKING:
    import subprocess
    from pathlib import Path

    from ffedit.models.composition import Composition
    from ffedit.models.context import RuntimeContext
    from ffedit.models.types import Container, QualityPreset

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]
FinishedCallback = Callable[[ExporterStatus, BaseException | None], None]

_PROGRESS_LINE = re.compile(r"^(\w+)=(\S*)$")
OUT_TIME_KEYS = ("out_time_us", "out_time_ms")  #: Both carry microseconds.
PROGRESS_STATE_KEY = "progress"
PROGRESS_END = "end"
ERROR_TAIL_LINES = 20


class ExportSession(Protocol):
    """Asynchronous renderer for one composition.

    A session reports any number of progress fractions followed by exactly one
    terminal callback. ``confirms_cancellation`` tells whether a cancel request
    is acknowledged through that terminal callback.
    """

    status: ExporterStatus
    progress: float
    error: BaseException | None
    confirms_cancellation: bool

    def export_async(self, on_progress: ProgressCallback, on_finished: FinishedCallback) -> None:
        """Begin rendering without blocking."""
        ...

    def cancel(self) -> None:
        """Ask the renderer to stop."""
        ...


class ExporterFactory(Protocol):
    """Construct a session, raising ``ExporterUnavailableError`` on unsupported settings."""

    def __call__(
        self,
        composition: Composition,
        output_path: Path,
        preset: QualityPreset,
        container: Container,
    ) -> ExportSession: ...


class FFmpegExporter:
    """Run an FFmpeg command on a background thread and track its progress."""

    confirms_cancellation = True

    def __init__(self, args: tuple[str, ...], duration_ms: int, *, ctx: RuntimeContext) -> None:
        self.args = args
        self.duration_ms = duration_ms
        self.ctx = ctx
        self.status = ExporterStatus.WAITING
        self.progress = 0.0
        self.error: BaseException | None = None
        self._cancel_requested = threading.Event()
        self._lock = threading.Lock()
        self._process: subprocess.Popen[str] | None = None
        self._thread: threading.Thread | None = None

    def export_async(self, on_progress: ProgressCallback, on_finished: FinishedCallback) -> None:
        """Start FFmpeg on a daemon thread and return immediately."""
        if self._thread is not None:
            raise RuntimeError("Export already started")
        log_command(
            format_ffmpeg_cmd(self.args),
            verbosity=self.ctx.verbosity,
            status_callback=self.ctx.status_callback,
        )
        self.status = ExporterStatus.EXPORTING
        self._thread = threading.Thread(
            target=self._run,
            args=(on_progress, on_finished),
            name="ffedit-export",
            daemon=True,
        )
        self._thread.start()

    def cancel(self) -> None:
        """Terminate FFmpeg; the terminal callback reports ``CANCELLED``."""
        self._cancel_requested.set()
        with self._lock:
            proc = self._process
        if proc is not None and proc.poll() is None:
            with suppress(OSError):
                proc.terminate()

    def join(self, timeout: float | None = None) -> None:
        """Wait for the worker thread to exit."""
        if self._thread is not None:
            self._thread.join(timeout)

    def _fraction(self, key: str, value: str) -> float | None:
        if key == PROGRESS_STATE_KEY:
            return 1.0 if value == PROGRESS_END else None
        if key not in OUT_TIME_KEYS or not self.duration_ms:
            return None
        try:
            out_us = int(value)
        except ValueError:
            return None
        return min(max(out_us / (self.duration_ms * 1000), 0.0), 1.0)

    def _report(self, fraction: float, on_progress: ProgressCallback) -> None:
        if fraction <= self.progress or self._cancel_requested.is_set():
            return
        self.progress = fraction
        on_progress(fraction)

    def _consume(self, line: str, tail: deque[str], on_progress: ProgressCallback) -> None:
        if not line:
            return
        match = _PROGRESS_LINE.match(line)
        if match:
            fraction = self._fraction(*match.groups())
            if fraction is not None:
                self._report(fraction, on_progress)
            return
        tail.append(line)
        if self.ctx.verbosity >= Verbosity.OUTPUT:
            emit_status(line, status_callback=self.ctx.status_callback)

    def _finish(self, status: ExporterStatus, error: BaseException | None, on_finished: FinishedCallback) -> None:
        self.status = status
        self.error = error
        logger.debug("FFmpeg export finished: %s", status.value)
        on_finished(status, error)

    def _run(self, on_progress: ProgressCallback, on_finished: FinishedCallback) -> None:
        finished = False

        def finish(status: ExporterStatus, error: BaseException | None) -> None:
            nonlocal finished
            finished = True
            self._finish(status, error, on_finished)

        try:
            self._export(on_progress, finish)
        except Exception as e:
            logger.exception("FFmpeg export worker failed")
            if not finished:
                self._finish(ExporterStatus.FAILED, e, on_finished)

    def _export(
        self,
        on_progress: ProgressCallback,
        finish: Callable[[ExporterStatus, BaseException | None], None],
    ) -> None:
        if self._cancel_requested.is_set():
            finish(ExporterStatus.CANCELLED, None)
            return
        try:
            proc = spawn_ffmpeg(self.args)
        except OSError as e:
            finish(ExporterStatus.FAILED, e)
            return
        with self._lock:
            self._process = proc
        if self._cancel_requested.is_set():
            with suppress(OSError):
                proc.terminate()

        tail: deque[str] = deque(maxlen=ERROR_TAIL_LINES)
        with proc:
            if proc.stdout is None:  # pragma: no cover - defensive
                raise RuntimeError("Failed to capture subprocess stdout")
            try:
                for raw_line in iter(proc.stdout.readline, ""):
                    self._consume(raw_line.strip(), tail, on_progress)
            except Exception:
                with suppress(OSError):
                    proc.kill()
                raise
            proc.wait()

        if self._cancel_requested.is_set():
            finish(ExporterStatus.CANCELLED, None)
        elif proc.returncode == 0:
            finish(ExporterStatus.COMPLETED, None)
        else:
            detail = "\n".join(tail)
            message = f"ffmpeg exited with status {proc.returncode}"
            finish(ExporterStatus.FAILED, RuntimeError(f"{message}: {detail}" if detail else message))


def prepare_command(
    ctx: RuntimeContext,
    composition: Composition,
    output_path: Path,
    preset: QualityPreset,
    container: Container,
) -> tuple[str, ...]:
    """Resolve encoders and return the FFmpeg command for an export.

    Raises:
        ExporterUnavailableError: If FFmpeg, an encoder, or the requested
            preset/container combination is unavailable.
        TrackCreationError: If a track's source asset is gone.

    """
    try:
        check_ffmpeg_version(ctx)
    except (OSError, RuntimeError) as e:
        raise ExporterUnavailableError(str(e)) from e
    kinds: set[MediaKind] = {t.kind for t in composition}
    try:
        encoders = resolve_encoders(ctx, preset, container, kinds)
        return build_command(composition, output_path, preset, container, encoders)
    except EditError:
        raise
    except (OSError, ValueError) as e:
        raise ExporterUnavailableError(f"Cannot build FFmpeg command: {e}") from e


def create_ffmpeg_exporter(
    ctx: RuntimeContext,
    composition: Composition,
    output_path: Path,
    preset: QualityPreset,
    container: Container,
) -> FFmpegExporter:
    """Exporter factory backed by FFmpeg; bind ``ctx`` with ``functools.partial``."""
    args = prepare_command(ctx, composition, output_path, preset, container)
    return FFmpegExporter(args, composition.duration_ms, ctx=ctx)


__all__ = [
    "ExportSession",
    "ExporterFactory",
    "FFmpegExporter",
    "FinishedCallback",
    "ProgressCallback",
    "create_ffmpeg_exporter",
    "prepare_command",
]
