"""Edit engine façade wiring compositions into export jobs."""

from __future__ import annotations

import logging
from functools import partial
from typing import TYPE_CHECKING

from ffedit.models.context import RuntimeContext
from ffedit.models.options import STRIP_AUDIO_BASENAME, TRIM_BASENAME, EngineSettings
from ffedit.models.timerange import TimeRange
from ffedit.tools import probe

from . import composition_builder
from .export_job import ExportJob, JobHandle
from .exporter import create_ffmpeg_exporter

if TYPE_CHECKING:
    from pathlib import Path

    from ffedit.models.asset import Asset, MediaAsset
    from ffedit.models.composition import Composition
    from ffedit.models.timerange import Seconds

    from .exporter import ExporterFactory

logger = logging.getLogger(__name__)


class EditEngine:
    """Trim videos or strip their audio and export the result asynchronously.

    Both operations build their composition synchronously, so range and stream
    errors are raised before anything is exported. The export itself runs in
    the background; the returned ``JobHandle`` reports progress and the final
    outcome.

    Side effect: an existing file at the resolved output path is deleted
    before the export starts. With the default ``OutputPolicy.FIXED`` each
    operation replaces its previous result, so callers must not run two edits
    of the same kind concurrently.

    Source assets must stay alive until the returned jobs have finished; the
    engine only holds weak references to them.
    """

    def __init__(
        self,
        settings: EngineSettings | None = None,
        *,
        ctx: RuntimeContext | None = None,
        exporter_factory: ExporterFactory | None = None,
    ) -> None:
        self.settings = settings or EngineSettings()
        self.ctx = ctx or RuntimeContext()
        self.exporter_factory: ExporterFactory = exporter_factory or partial(create_ffmpeg_exporter, self.ctx)

    def open_asset(self, location: str | Path) -> MediaAsset:
        """Probe a local file or http(s) URL.

        Raises:
            ValueError: If the media cannot be probed.

        """
        return probe.load_asset(self.ctx, str(location))

    def trim_video(
        self,
        asset: Asset,
        start: Seconds,
        end: Seconds,
        *,
        output_path: Path | None = None,
    ) -> JobHandle:
        """Export ``[start, end)`` seconds of ``asset``.

        Raises:
            InvalidRangeError: If the range is invalid or starts after the media.
            MissingStreamError: If the asset has no video and no audio stream.
            InsertionError: If a stream cannot take the range.

        """
        return self.trim_range(asset, TimeRange.from_seconds(start, end), output_path=output_path)

    def trim_range(self, asset: Asset, time_range: TimeRange, *, output_path: Path | None = None) -> JobHandle:
        """Export ``time_range`` of ``asset``; see ``trim_video``."""
        composition = composition_builder.trim(asset, time_range)
        logger.debug("Trim %s to %s", asset.location, time_range)
        return self._export(composition, output_path or self.settings.output_path(TRIM_BASENAME))

    def remove_audio(self, asset: Asset, *, output_path: Path | None = None) -> JobHandle:
        """Export the video streams of ``asset`` without any audio.

        Raises:
            MissingStreamError: If the asset has no video stream.

        """
        composition = composition_builder.strip_audio(asset)
        logger.debug("Strip audio from %s", asset.location)
        return self._export(composition, output_path or self.settings.output_path(STRIP_AUDIO_BASENAME))

    def _export(self, composition: Composition, output_path: Path) -> JobHandle:
        job = ExportJob(self.exporter_factory)
        return job.start(composition, output_path, self.settings.preset, self.settings.container)


__all__ = ["EditEngine"]
