"""Error taxonomy for edit and export operations.

Every failure is scoped to a single edit operation. Composition errors are
raised synchronously before anything is exported; exporter errors only show up
on a job that settled in ``JobStatus.FAILED``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .types import MediaKind


class EditError(Exception):
    """Base class for all ffedit errors."""


class InvalidRangeError(EditError, ValueError):
    """A time range is negative, reversed, or starts past the media end."""


class MissingStreamError(EditError, LookupError):
    """The asset has no stream of a kind the operation needs."""


class TrackCreationError(EditError):
    """A destination track could not be created in the composition."""


class InsertionError(EditError):
    """A time range could not be inserted into a composition track."""

    def __init__(self, message: str, *, kind: MediaKind | None = None, stream_index: int | None = None) -> None:
        if kind is not None:
            where = f"{kind.value} stream" if stream_index is None else f"{kind.value} stream {stream_index}"
            message = f"{where}: {message}"
        super().__init__(message)
        self.kind = kind
        self.stream_index = stream_index


class ExporterUnavailableError(EditError):
    """The exporter could not be constructed for the requested settings."""


class ExportRuntimeError(EditError):
    """The exporter reported a failure while rendering."""

    DEFAULT_MESSAGE = "Export failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message.strip() if message and message.strip() else self.DEFAULT_MESSAGE)


class OutputCleanupError(EditError):
    """A stale output file could not be removed. Logged, never fatal."""


__all__ = [
    "EditError",
    "ExportRuntimeError",
    "ExporterUnavailableError",
    "InsertionError",
    "InvalidRangeError",
    "MissingStreamError",
    "OutputCleanupError",
    "TrackCreationError",
]
