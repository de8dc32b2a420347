"""Runtime context shared by the engine, the exporter and the probe helpers."""

from __future__ import annotations

import os
import tempfile
from contextlib import suppress
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Self

from diskcache import Cache

from ffedit.models.verbosity import Verbosity

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

CACHE_ENV = "FFEDIT_CACHE"


def default_cache_dir() -> Path:
    """``$FFEDIT_CACHE/ffedit-cache``, falling back to the system temp dir."""
    return Path(os.getenv(CACHE_ENV) or tempfile.gettempdir()) / "ffedit-cache"


@dataclass(slots=True)
class RuntimeContext:
    """Verbosity, status routing and the probe/encoder cache.

    Use as a context manager so the cache is closed when the work is done.
    """

    verbosity: Verbosity = Verbosity.QUIET
    dry_run: bool = False
    status_callback: Callable[[str], None] | None = None
    cache: Cache = field(default_factory=lambda: Cache(str(default_cache_dir())))

    @classmethod
    def open(
        cls,
        cache_dir: Path | None = None,
        *,
        verbosity: Verbosity = Verbosity.QUIET,
        dry_run: bool = False,
        status_callback: Callable[[str], None] | None = None,
    ) -> Self:
        """Create a context whose cache lives in ``cache_dir``."""
        directory = cache_dir if cache_dir is not None else default_cache_dir()
        return cls(
            verbosity=verbosity,
            dry_run=dry_run,
            status_callback=status_callback,
            cache=Cache(str(directory)),
        )

    def close(self) -> None:
        self.cache.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __del__(self) -> None:  # pragma: no cover - cleanup
        with suppress(Exception):
            self.close()


__all__ = ["CACHE_ENV", "RuntimeContext", "default_cache_dir"]
