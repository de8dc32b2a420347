"""Expose models and type definitions."""

from .asset import Asset, MediaAsset, Stream
from .composition import Composition, CompositionTrack, Segment, Track
from .context import RuntimeContext
from .errors import (
    EditError,
    ExporterUnavailableError,
    ExportRuntimeError,
    InsertionError,
    InvalidRangeError,
    MissingStreamError,
    OutputCleanupError,
    TrackCreationError,
)
from .options import EditOptions, EngineSettings, TrimOptions
from .timerange import TimeRange
from .types import (
    Container,
    Encoder,
    ExporterStatus,
    JobStatus,
    MediaKind,
    OutputPolicy,
    QualityPreset,
)
from .verbosity import Verbosity

__all__ = [
    "Asset",
    "Composition",
    "CompositionTrack",
    "Container",
    "EditError",
    "EditOptions",
    "Encoder",
    "EngineSettings",
    "ExportRuntimeError",
    "ExporterStatus",
    "ExporterUnavailableError",
    "InsertionError",
    "InvalidRangeError",
    "JobStatus",
    "MediaAsset",
    "MediaKind",
    "MissingStreamError",
    "OutputCleanupError",
    "OutputPolicy",
    "QualityPreset",
    "RuntimeContext",
    "Segment",
    "Stream",
    "TimeRange",
    "TrackCreationError",
    "Track",
    "TrimOptions",
    "Verbosity",
]
