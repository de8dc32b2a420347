"""Options package exports."""

from __future__ import annotations

from ffedit.models.verbosity import Verbosity

from .defaults import (
    DEFAULT_CONTAINER,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_POLICY,
    DEFAULT_PRESET,
    STRIP_AUDIO_BASENAME,
    TRIM_BASENAME,
)
from .engine import EngineSettings
from .options import EditOptions, TrimOptions, is_remote
from .runtime import RuntimeOptions
from .time import TimeOptions

__all__ = [
    "DEFAULT_CONTAINER",
    "DEFAULT_OUTPUT_DIR",
    "DEFAULT_POLICY",
    "DEFAULT_PRESET",
    "STRIP_AUDIO_BASENAME",
    "TRIM_BASENAME",
    "EditOptions",
    "EngineSettings",
    "RuntimeOptions",
    "TimeOptions",
    "TrimOptions",
    "Verbosity",
    "is_remote",
]
