"""Composition building, export jobs and the edit engine."""

from . import composition_builder
from .builder import build_command
from .engine import EditEngine
from .export_job import ExportJob, JobHandle
from .exporter import ExporterFactory, ExportSession, FFmpegExporter, create_ffmpeg_exporter

__all__ = [
    "EditEngine",
    "ExportJob",
    "ExportSession",
    "ExporterFactory",
    "FFmpegExporter",
    "JobHandle",
    "build_command",
    "composition_builder",
    "create_ffmpeg_exporter",
]
