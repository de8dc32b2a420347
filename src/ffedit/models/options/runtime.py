"""Options controlling diagnostics and caching for a single CLI run."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Annotated

from cyclopts import Parameter
from pydantic import BaseModel, Field, field_validator

from ffedit.models.context import RuntimeContext
from ffedit.models.verbosity import Verbosity

from .groups import RUNTIME_GROUP


@Parameter(group=RUNTIME_GROUP)
class RuntimeOptions(BaseModel):
    """How much to report, whether to export at all, and where to cache probes."""

    verbosity: Verbosity = Field(
        default=Verbosity.QUIET,
        description="quiet, commands (show FFmpeg/ffprobe invocations) or output (also stream their output).",
    )
    dry_run: bool = Field(default=False, description="Print the FFmpeg command without exporting.")
    cache_dir: Annotated[Path | None, Parameter(show_default=False)] = Field(
        default=None,
        description="Directory for cached probe results. Defaults to $FFEDIT_CACHE or the temp dir.",
    )

    @field_validator("verbosity", mode="before")
    @classmethod
    def _coerce_verbosity(cls, v: object) -> object:
        """Map ``"commands"`` or ``"1"`` onto ``Verbosity`` members."""
        if not isinstance(v, str):
            return v
        token = v.strip()
        if token.isdigit():
            return int(token)
        member = Verbosity.__members__.get(token.upper())
        if member is None:
            names = ", ".join(name.lower() for name in Verbosity.__members__)
            raise ValueError(f"verbosity must be one of {names}, or 0/1/2")
        return member

    def context(self, status_callback: Callable[[str], None] | None = None) -> RuntimeContext:
        """Open a ``RuntimeContext`` configured from these options."""
        return RuntimeContext.open(
            self.cache_dir,
            verbosity=self.verbosity,
            dry_run=self.dry_run,
            status_callback=status_callback,
        )


__all__ = ["RuntimeOptions"]
