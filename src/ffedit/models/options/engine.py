"""Engine configuration."""

from __future__ import annotations

import uuid
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ffedit.models.types import Container, OutputPolicy, QualityPreset

from .defaults import DEFAULT_CONTAINER, DEFAULT_OUTPUT_DIR, DEFAULT_POLICY, DEFAULT_PRESET


class EngineSettings(BaseModel):
    """Export settings and output-path policy for an ``EditEngine``.

    With ``OutputPolicy.FIXED`` every operation writes one well-known file in
    ``output_dir`` and replaces the previous export. Callers running edits
    concurrently should pick ``OutputPolicy.UNIQUE``.
    """

    output_dir: Path = Field(default=DEFAULT_OUTPUT_DIR, description="Directory receiving exports.")
    policy: OutputPolicy = Field(default=DEFAULT_POLICY, description="Output file naming policy.")
    preset: QualityPreset = Field(default=DEFAULT_PRESET, description="Export quality preset.")
    container: Container = Field(default=DEFAULT_CONTAINER, description="Output container format.")

    model_config = ConfigDict(frozen=True)

    @field_validator("output_dir")
    @classmethod
    def normalize_output_dir(cls, v: Path) -> Path:
        return Path(v).expanduser().absolute()

    def output_path(self, basename: str) -> Path:
        """Resolve the output file for an operation named ``basename``."""
        if self.policy is OutputPolicy.UNIQUE:
            basename = f"{basename}-{uuid.uuid4().hex[:12]}"
        return self.output_dir / f"{basename}{self.container.extension}"


__all__ = ["EngineSettings"]
