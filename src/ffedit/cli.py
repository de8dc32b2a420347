"""Command-line interface entry point."""

from __future__ import annotations

import sys
from collections.abc import Callable
from functools import partial
from typing import TYPE_CHECKING, Annotated

from cyclopts import App, Parameter

from .backend import EditEngine, composition_builder
from .backend.exporter import prepare_command
from .models import EditError, EditOptions, JobStatus, TrimOptions
from .models.options import STRIP_AUDIO_BASENAME, TRIM_BASENAME
from .tools.cli import format_ffmpeg_cmd
from .tools.helpers import emit_status, format_progress

if TYPE_CHECKING:
    from pathlib import Path

    from .backend import JobHandle
    from .models import Composition, MediaAsset

app = App(name="ffedit", help="Trim videos or strip their audio track.")


def _export(
    opts: EditOptions,
    basename: str,
    compose: Callable[[MediaAsset], Composition],
    start: Callable[[EditEngine, MediaAsset, Path], JobHandle],
    status_callback: Callable[[str], None] | None,
) -> int:
    """Probe the source, then print the command or run the export to completion."""
    status_func = print if status_callback is None else status_callback
    err_func = partial(print, file=sys.stderr, flush=True) if status_callback is None else status_callback
    settings = opts.settings()
    with opts.runtime.context(status_func) as ctx:
        engine = EditEngine(settings, ctx=ctx)
        output_path = opts.output_path() or settings.output_path(basename)
        try:
            asset = engine.open_asset(opts.source)
            if opts.runtime.dry_run:
                args = prepare_command(ctx, compose(asset), output_path, settings.preset, settings.container)
                emit_status(
                    f"Command: {format_ffmpeg_cmd(args)}",
                    status_callback=status_func,
                )
                return 0
            handle = start(engine, asset, output_path)
        except (EditError, ValueError) as e:
            err_func(str(e))
            return 1

        handle.subscribe(
            on_progress=lambda fraction: emit_status(
                f"Exporting: {format_progress(fraction)}\r",
                status_callback=status_func,
            )
        )
        try:
            status = handle.wait()
        except KeyboardInterrupt:
            handle.cancel()
            status = handle.wait()

        if status is JobStatus.COMPLETED:
            emit_status(str(handle.output_path), status_callback=status_func)
            return 0
        err_func(str(handle.error) if handle.error is not None else f"Export {status.value}")
        return 1


@app.command
def trim(
    opts: TrimOptions,
    status_callback: Annotated[Callable[[str], None] | None, Parameter(show=False)] = None,  # type: ignore[call-arg]
) -> int:
    """Trim a video to a time range."""

    def compose(asset: MediaAsset) -> Composition:
        return composition_builder.trim(asset, opts.time.to_range(asset.duration_ms))

    def start(engine: EditEngine, asset: MediaAsset, output_path: Path) -> JobHandle:
        return engine.trim_range(asset, opts.time.to_range(asset.duration_ms), output_path=output_path)

    return _export(opts, TRIM_BASENAME, compose, start, status_callback)


@app.command
def remove_audio(
    opts: EditOptions,
    status_callback: Annotated[Callable[[str], None] | None, Parameter(show=False)] = None,  # type: ignore[call-arg]
) -> int:
    """Export a video without its audio tracks."""

    def start(engine: EditEngine, asset: MediaAsset, output_path: Path) -> JobHandle:
        return engine.remove_audio(asset, output_path=output_path)

    return _export(opts, STRIP_AUDIO_BASENAME, composition_builder.strip_audio, start, status_callback)


def main(argv: list[str] | None = None) -> int:
    """Run the ffedit CLI."""
    argv = sys.argv[1:] if argv is None else argv
    result = app(argv)
    return result if isinstance(result, int) else 0


if __name__ == "__main__":
    raise SystemExit(main())
