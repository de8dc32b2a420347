"""Export job state machine and the handle returned to callers.

A job moves ``IDLE -> EXPORTING -> COMPLETED | FAILED | CANCELLED`` (or
straight from ``IDLE`` to ``FAILED`` when no exporter can be built). Terminal
states never change. Progress only grows, and the terminal notification is the
last one a subscriber receives.
"""

from __future__ import annotations

import logging
import threading
import uuid
from pathlib import Path
from typing import TYPE_CHECKING

from ffedit.models.errors import EditError, ExporterUnavailableError, ExportRuntimeError, OutputCleanupError
from ffedit.models.types import ExporterStatus, JobStatus

if TYPE_CHECKING:
    from collections.abc import Callable

    from ffedit.models.composition import Composition
    from ffedit.models.types import Container, QualityPreset

    from .exporter import ExporterFactory, ExportSession

    TerminalCallback = Callable[[JobStatus, EditError | None], None]
    ProgressCallback = Callable[[float], None]

logger = logging.getLogger(__name__)


def _as_edit_error(error: BaseException | None) -> EditError:
    """Wrap an exporter failure; the message is never empty."""
    if isinstance(error, EditError):
        return error
    wrapped = ExportRuntimeError(str(error) if error is not None else None)
    wrapped.__cause__ = error
    return wrapped


def _unavailable(error: Exception) -> ExporterUnavailableError:
    wrapped = ExporterUnavailableError(str(error) or type(error).__name__)
    wrapped.__cause__ = error
    return wrapped


class ExportJob:
    """Track one export from dispatch to its terminal outcome."""

    def __init__(self, exporter_factory: ExporterFactory) -> None:
        self.id = uuid.uuid4().hex
        self._factory = exporter_factory
        self._lock = threading.RLock()
        self._done = threading.Event()
        self._status = JobStatus.IDLE
        self._progress = 0.0
        self._error: EditError | None = None
        self._composition: Composition | None = None
        self._session: ExportSession | None = None
        self._cancel_requested = False
        self._progress_subscribers: list[ProgressCallback] = []
        self._terminal_subscribers: list[TerminalCallback] = []
        self.output_path: Path | None = None
        self.preset: QualityPreset | None = None
        self.container: Container | None = None
        self.cleanup_error: OutputCleanupError | None = None

    def __repr__(self) -> str:
        return f"ExportJob(id={self.id!r}, status={self._status.value!r}, progress={self._progress:.3f})"

    @property
    def status(self) -> JobStatus:
        return self._status

    @property
    def progress(self) -> float:
        return self._progress

    @property
    def error(self) -> EditError | None:
        return self._error

    @property
    def composition(self) -> Composition | None:
        """The composition being exported; released once the job is terminal."""
        return self._composition

    def subscribe(
        self,
        on_progress: ProgressCallback | None = None,
        on_terminal: TerminalCallback | None = None,
    ) -> None:
        """Register notification callbacks.

        A terminal callback registered after the job finished is invoked
        immediately.
        """
        with self._lock:
            if on_progress is not None and not self._status.is_terminal:
                self._progress_subscribers.append(on_progress)
            if on_terminal is None:
                return
            if not self._status.is_terminal:
                self._terminal_subscribers.append(on_terminal)
                return
            status, error = self._status, self._error
        on_terminal(status, error)

    def start(
        self,
        composition: Composition,
        output_path: Path,
        preset: QualityPreset,
        container: Container,
    ) -> JobHandle:
        """Dispatch the export and return without waiting for it.

        Any file already at ``output_path`` is deleted first. Deletion is
        best-effort; a failure is logged and kept in ``cleanup_error``.

        Raises:
            RuntimeError: If the job was already started.

        """
        with self._lock:
            if self._status is not JobStatus.IDLE or self._composition is not None:
                raise RuntimeError(f"Export job {self.id} was already started")
            self._composition = composition
            self.output_path = Path(output_path)
            self.preset = preset
            self.container = container
            self._remove_stale_output()
            self._ensure_output_parent()
            try:
                session = self._factory(composition, self.output_path, preset, container)
            except Exception as e:
                error = e if isinstance(e, EditError) else _unavailable(e)
                logger.warning("Export %s could not start: %s", self.id, error)
                self._settle(JobStatus.FAILED, error)
                return JobHandle(self)
            self._session = session
            self._status = JobStatus.EXPORTING
        logger.info("Export %s started: %s", self.id, self.output_path)
        try:
            session.export_async(self._on_progress, self._on_finished)
        except Exception as e:
            self._on_finished(ExporterStatus.FAILED, e)
        return JobHandle(self)

    def cancel(self) -> bool:
        """Request cancellation of a running export.

        Returns ``False`` when the job is not exporting. The job settles in
        ``CANCELLED`` when the exporter confirms, or right away for exporters
        that never confirm. Any terminal callback arriving after the request,
        including a late completion, settles as ``CANCELLED``.
        """
        with self._lock:
            if self._status is not JobStatus.EXPORTING or self._cancel_requested or self._session is None:
                return False
            self._cancel_requested = True
            session = self._session
        logger.info("Cancelling export %s", self.id)
        session.cancel()
        if not session.confirms_cancellation:
            with self._lock:
                if not self._status.is_terminal:
                    self._settle(JobStatus.CANCELLED, None)
        return True

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the job is terminal; return whether it is."""
        return self._done.wait(timeout)

    def _on_progress(self, fraction: float) -> None:
        with self._lock:
            if self._status.is_terminal:
                return
            self._advance(min(max(fraction, 0.0), 1.0))

    def _on_finished(self, status: ExporterStatus, error: BaseException | None) -> None:
        with self._lock:
            if self._status.is_terminal:
                logger.debug("Ignoring %s callback for finished export %s", status.value, self.id)
                return
            if self._cancel_requested or status is ExporterStatus.CANCELLED:
                self._settle(JobStatus.CANCELLED, None)
            elif status is ExporterStatus.COMPLETED:
                self._settle(JobStatus.COMPLETED, None)
            else:
                self._settle(JobStatus.FAILED, _as_edit_error(error))

    def _advance(self, fraction: float) -> None:
        if fraction <= self._progress:
            return
        self._progress = fraction
        for callback in list(self._progress_subscribers):
            try:
                callback(fraction)
            except Exception:
                logger.exception("Progress subscriber failed for export %s", self.id)

    def _settle(self, status: JobStatus, error: EditError | None) -> None:
        """Enter a terminal state and notify subscribers. Caller holds the lock."""
        if status is JobStatus.COMPLETED:
            self._advance(1.0)
        self._status = status
        self._error = error
        if status is not JobStatus.COMPLETED and self._session is not None:
            self._discard_partial_output()
        self._composition = None
        self._session = None
        self._progress_subscribers.clear()
        subscribers, self._terminal_subscribers = self._terminal_subscribers, []
        self._done.set()
        if error is None:
            logger.info("Export %s %s", self.id, status.value)
        else:
            logger.info("Export %s %s: %s", self.id, status.value, error)
        for callback in subscribers:
            try:
                callback(status, error)
            except Exception:
                logger.exception("Terminal subscriber failed for export %s", self.id)

    def _remove_stale_output(self) -> None:
        path = self.output_path
        if path is None or not (path.exists() or path.is_symlink()):
            return
        try:
            path.unlink()
        except OSError as e:
            cleanup = OutputCleanupError(f"Could not remove existing output {path}: {e}")
            cleanup.__cause__ = e
            self.cleanup_error = cleanup
            logger.warning("%s", cleanup)
            return
        logger.info("Removed existing output %s", path)

    def _ensure_output_parent(self) -> None:
        if self.output_path is None:
            return
        parent = self.output_path.parent
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning("Could not create output directory %s: %s", parent, e)

    def _discard_partial_output(self) -> None:
        if self.output_path is None:
            return
        try:
            self.output_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove partial output %s: %s", self.output_path, e)


class JobHandle:
    """Caller-facing view of an export job."""

    __slots__ = ("_job",)

    def __init__(self, job: ExportJob) -> None:
        self._job = job

    def __repr__(self) -> str:
        return f"JobHandle({self._job!r})"

    @property
    def id(self) -> str:
        return self._job.id

    @property
    def status(self) -> JobStatus:
        return self._job.status

    @property
    def progress(self) -> float:
        return self._job.progress

    @property
    def error(self) -> EditError | None:
        return self._job.error

    @property
    def output_path(self) -> Path | None:
        return self._job.output_path

    @property
    def is_done(self) -> bool:
        return self._job.status.is_terminal

    def subscribe(
        self,
        on_progress: ProgressCallback | None = None,
        on_terminal: TerminalCallback | None = None,
    ) -> None:
        """Register progress and terminal callbacks."""
        self._job.subscribe(on_progress, on_terminal)

    def cancel(self) -> bool:
        """Request cancellation; see ``ExportJob.cancel``."""
        return self._job.cancel()

    def wait(self, timeout: float | None = None) -> JobStatus:
        """Block until the job settles or ``timeout`` expires; return the status."""
        self._job.wait(timeout)
        return self._job.status


__all__ = ["ExportJob", "JobHandle"]
