"""Command option models and validation logic."""

from __future__ import annotations

from contextlib import suppress
from pathlib import Path
from typing import Annotated
from urllib.parse import urlparse

from cyclopts import Parameter
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ffedit.models.types import Container, OutputPolicy, QualityPreset

from .defaults import DEFAULT_CONTAINER, DEFAULT_OUTPUT_DIR, DEFAULT_POLICY, DEFAULT_PRESET
from .engine import EngineSettings
from .groups import EXPORT_GROUP, OUTPUT_GROUP, SOURCE_GROUP
from .runtime import RuntimeOptions
from .time import TimeOptions

REMOTE_SCHEMES = {"http", "https"}


def is_remote(location: str) -> bool:
    """Whether ``location`` is an http(s) URL."""
    return urlparse(location).scheme in REMOTE_SCHEMES


@Parameter(name="*")
class EditOptions(BaseModel):
    """Options shared by every edit command."""

    source: Annotated[
        Path | str,
        Parameter(group=SOURCE_GROUP),
    ] = Field(
        description="Path or URL to the source video.",
    )
    output: Annotated[
        Path | None,
        Parameter(group=OUTPUT_GROUP),
    ] = Field(
        default=None,
        description="Path for the output file. Defaults to a well-known file in the output directory.",
    )
    output_dir: Annotated[
        Path,
        Parameter(group=OUTPUT_GROUP),
    ] = Field(
        default=DEFAULT_OUTPUT_DIR,
        description="Directory receiving exports when no explicit output is given.",
    )
    unique_output: Annotated[
        bool,
        Parameter(group=OUTPUT_GROUP),
    ] = Field(
        default=False,
        description="Write a new uniquely named file instead of replacing the previous export.",
    )
    container: Annotated[
        Container,
        Parameter(group=EXPORT_GROUP),
    ] = Field(
        DEFAULT_CONTAINER,
        description=f"Container format for the output file. [default: {DEFAULT_CONTAINER.value}]",
    )
    preset: Annotated[
        QualityPreset,
        Parameter(group=EXPORT_GROUP),
    ] = Field(
        DEFAULT_PRESET,
        description=f"Export quality preset. [default: {DEFAULT_PRESET.value}]",
    )
    runtime: RuntimeOptions = Field(default_factory=RuntimeOptions)

    model_config = ConfigDict(extra="forbid")

    @field_validator("source")
    @classmethod
    def _resolve_source(cls, v: Path | str) -> Path | str:
        """Keep http(s) URLs as given; local sources must be existing files."""
        if isinstance(v, str) and is_remote(v):
            return v
        path = Path(v).expanduser().absolute()
        if path.is_file():
            return path
        raise ValueError(f"Input path is not a file: {path}")

    @field_validator("output", "output_dir")
    @classmethod
    def _absolute(cls, v: Path | None) -> Path | None:
        return None if v is None else Path(v).expanduser().absolute()

    @model_validator(mode="after")
    def _reconcile_container(self) -> EditOptions:
        """Let an ``--output`` extension pick the container unless one was given.

        An explicit container must agree with the extension. Extensionless
        outputs get the container's extension later in ``output_path``.
        """
        suffix = self.output.suffix.lower() if self.output is not None else ""
        if not suffix:
            return self
        if "container" not in self.model_fields_set:
            with suppress(ValueError):
                self.container = Container(suffix.removeprefix("."))
        if suffix != self.container.extension:
            raise ValueError(f"Output extension '{suffix}' conflicts with container '{self.container.value}'.")
        return self

    def settings(self) -> EngineSettings:
        """Return engine settings derived from these options."""
        return EngineSettings(
            output_dir=self.output_dir,
            policy=OutputPolicy.UNIQUE if self.unique_output else DEFAULT_POLICY,
            preset=self.preset,
            container=self.container,
        )

    def output_path(self) -> Path | None:
        """Explicit output path with the container extension applied."""
        if self.output is None:
            return None
        return self.output if self.output.suffix else self.output.with_suffix(self.container.extension)


@Parameter(name="*")
class TrimOptions(EditOptions):
    """Options for trimming a video to a time range."""

    time: TimeOptions = Field(default_factory=TimeOptions)


__all__ = ["EditOptions", "TrimOptions", "is_remote"]
