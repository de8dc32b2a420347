"""Core package for ffedit trimming and audio removal."""

from .backend import EditEngine, ExportJob, JobHandle, build_command
from .models import EngineSettings, JobStatus, MediaAsset, TimeRange

__all__ = [
    "EditEngine",
    "EngineSettings",
    "ExportJob",
    "JobHandle",
    "JobStatus",
    "MediaAsset",
    "TimeRange",
    "build_command",
]
