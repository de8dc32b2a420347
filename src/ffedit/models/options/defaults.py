"""Default constants for option models."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from ffedit.models.types import Container, OutputPolicy, QualityPreset

DEFAULT_CONTAINER = Container.MP4
DEFAULT_PRESET = QualityPreset.HIGHEST
DEFAULT_POLICY = OutputPolicy.FIXED
DEFAULT_OUTPUT_DIR = Path(os.getenv("FFEDIT_OUTPUT_DIR", tempfile.gettempdir()))
TRIM_BASENAME = "editedVideo"  #: Well-known output name for trimmed exports.
STRIP_AUDIO_BASENAME = "videoWithoutAudio"  #: Well-known output name for audio-less exports.

__all__ = [
    "DEFAULT_CONTAINER",
    "DEFAULT_OUTPUT_DIR",
    "DEFAULT_POLICY",
    "DEFAULT_PRESET",
    "STRIP_AUDIO_BASENAME",
    "TRIM_BASENAME",
]
