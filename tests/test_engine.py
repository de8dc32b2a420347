"""Tests for the edit engine."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from ffedit.backend import EditEngine
from ffedit.models import (
    Container,
    EngineSettings,
    InvalidRangeError,
    JobStatus,
    MediaKind,
    MissingStreamError,
    OutputPolicy,
    QualityPreset,
    TimeRange,
)
from ffedit.models.types import ExporterStatus
from ffedit.tools import probe

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from conftest import FakeExporterFactory

    from ffedit.models import MediaAsset, RuntimeContext


def test_trim_video_exports_range(
    engine: EditEngine, asset: MediaAsset, exporter_factory: FakeExporterFactory, tmp_path: Path
) -> None:
    """Trimming seconds 2 to 5 exports three seconds of every stream."""
    handle = engine.trim_video(asset, 2, 5)
    assert handle.status is JobStatus.EXPORTING
    comp, path, preset, container = exporter_factory.calls[0]
    assert [seg.source_range for t in comp for seg in t.segments] == [TimeRange(2000, 5000)] * 2
    assert path == tmp_path / "out" / "editedVideo.mp4"
    assert handle.output_path == path
    assert (preset, container) == (QualityPreset.HIGHEST, Container.MP4)
    exporter_factory.session.emit_progress(0.5)
    exporter_factory.session.finish(ExporterStatus.COMPLETED)
    assert handle.wait(1) is JobStatus.COMPLETED
    assert handle.progress == 1.0


def test_trim_video_past_end_raises(
    engine: EditEngine, asset: MediaAsset, exporter_factory: FakeExporterFactory
) -> None:
    """A range starting after the media fails before any job exists."""
    with pytest.raises(InvalidRangeError):
        engine.trim_video(asset, 12, 15)
    assert exporter_factory.calls == []


def test_trim_video_reversed_range_raises(
    engine: EditEngine, asset: MediaAsset, exporter_factory: FakeExporterFactory
) -> None:
    """Reversed ranges are rejected synchronously."""
    with pytest.raises(InvalidRangeError):
        engine.trim_video(asset, 5, 2)
    assert exporter_factory.calls == []


@pytest.mark.parametrize("bound", [float("nan"), float("inf")])
def test_trim_video_non_finite_raises(
    engine: EditEngine, asset: MediaAsset, exporter_factory: FakeExporterFactory, bound: float
) -> None:
    """NaN or infinite seconds raise a range error before any job exists."""
    with pytest.raises(InvalidRangeError):
        engine.trim_video(asset, 0, bound)
    assert exporter_factory.calls == []


def test_trim_video_fractional_seconds(
    engine: EditEngine, asset: MediaAsset, exporter_factory: FakeExporterFactory
) -> None:
    """Fractional seconds keep millisecond precision."""
    engine.trim_video(asset, 1.25, 2.5)
    comp = exporter_factory.calls[0][0]
    assert comp.tracks[0].segments[0].source_range == TimeRange(1250, 2500)


def test_remove_audio_exports_video_only(
    engine: EditEngine, asset: MediaAsset, exporter_factory: FakeExporterFactory, tmp_path: Path
) -> None:
    """Audio removal exports every video stream and no audio."""
    handle = engine.remove_audio(asset)
    comp, path, _, _ = exporter_factory.calls[0]
    assert path == tmp_path / "out" / "videoWithoutAudio.mp4"
    assert comp.tracks_of(MediaKind.AUDIO) == ()
    assert comp.duration_ms == 10_000
    assert handle.status is JobStatus.EXPORTING


def test_remove_audio_without_video_raises(
    engine: EditEngine, make_asset: Callable[..., MediaAsset], exporter_factory: FakeExporterFactory
) -> None:
    """Audio-only assets are rejected before exporting."""
    with pytest.raises(MissingStreamError):
        engine.remove_audio(make_asset(video=()))
    assert exporter_factory.calls == []


def test_fixed_policy_replaces_previous_export(
    engine: EditEngine, asset: MediaAsset, exporter_factory: FakeExporterFactory, tmp_path: Path
) -> None:
    """The well-known output file is deleted before the next export."""
    previous = tmp_path / "out" / "editedVideo.mp4"
    previous.parent.mkdir(parents=True)
    previous.write_bytes(b"old")
    handle = engine.trim_video(asset, 0, 1)
    assert handle.output_path == previous
    assert not previous.exists()


def test_unique_policy_uses_fresh_paths(
    tmp_path: Path, ctx: RuntimeContext, asset: MediaAsset, exporter_factory: FakeExporterFactory
) -> None:
    """Unique outputs never collide between calls."""
    settings = EngineSettings(output_dir=tmp_path, policy=OutputPolicy.UNIQUE, container=Container.MKV)
    engine = EditEngine(settings, ctx=ctx, exporter_factory=exporter_factory)
    first = engine.trim_video(asset, 0, 1).output_path
    second = engine.trim_video(asset, 0, 1).output_path
    assert first != second
    assert first is not None
    assert first.name.startswith("editedVideo-")
    assert first.suffix == ".mkv"


def test_explicit_output_path(
    engine: EditEngine, asset: MediaAsset, exporter_factory: FakeExporterFactory, tmp_path: Path
) -> None:
    """Callers can choose the output path."""
    target = tmp_path / "custom" / "clip.mp4"
    handle = engine.remove_audio(asset, output_path=target)
    assert handle.output_path == target
    assert target.parent.is_dir()


def test_jobs_are_independent(engine: EditEngine, asset: MediaAsset, exporter_factory: FakeExporterFactory) -> None:
    """Each call creates its own job."""
    trim_handle = engine.trim_video(asset, 0, 1)
    strip_handle = engine.remove_audio(asset)
    assert trim_handle.id != strip_handle.id
    exporter_factory.sessions[0].finish(ExporterStatus.FAILED, RuntimeError("boom"))
    assert trim_handle.status is JobStatus.FAILED
    assert strip_handle.status is JobStatus.EXPORTING


def test_open_asset_probes_location(engine: EditEngine, monkeypatch: pytest.MonkeyPatch) -> None:
    """Opening an asset describes its streams from ffprobe output."""
    payload = {
        "format": {"duration": "10.000000"},
        "streams": [
            {"index": 0, "codec_type": "video", "codec_name": "h264", "duration": "10.000000"},
            {"index": 1, "codec_type": "audio", "codec_name": "aac", "duration": "9.980000"},
        ],
    }
    monkeypatch.setattr(probe, "run", lambda _ctx, _cmd: json.dumps(payload))
    asset = engine.open_asset("/media/clip.mp4")
    assert asset.location == "/media/clip.mp4"
    assert asset.duration_ms == 10_000
    assert asset.stream(MediaKind.AUDIO).duration_ms == 9_980


def test_open_asset_failure(engine: EditEngine, monkeypatch: pytest.MonkeyPatch) -> None:
    """Unprobeable media raises ``ValueError``."""
    monkeypatch.setattr(probe, "run", lambda _ctx, _cmd: None)
    with pytest.raises(ValueError, match="Could not probe"):
        engine.open_asset("/media/missing.mp4")


def test_trim_real_file(source_file: Path, tmp_path: Path, ctx: RuntimeContext) -> None:
    """Trim a synthetic clip end-to-end with FFmpeg."""
    engine = EditEngine(EngineSettings(output_dir=tmp_path / "out"), ctx=ctx)
    asset = engine.open_asset(source_file)
    handle = engine.trim_video(asset, 1, 2)
    assert handle.wait(120) is JobStatus.COMPLETED, handle.error
    assert handle.progress == 1.0
    assert handle.output_path is not None
    assert handle.output_path.is_file()
    duration = probe.get_duration_ms(ctx, str(handle.output_path))
    assert duration is not None
    assert 900 <= duration <= 1100


def test_remove_audio_real_file(source_file: Path, tmp_path: Path, ctx: RuntimeContext) -> None:
    """Strip the audio of a synthetic clip end-to-end with FFmpeg."""
    engine = EditEngine(EngineSettings(output_dir=tmp_path / "out", preset=QualityPreset.PASSTHROUGH), ctx=ctx)
    asset = engine.open_asset(source_file)
    handle = engine.remove_audio(asset)
    assert handle.wait(120) is JobStatus.COMPLETED, handle.error
    assert handle.output_path is not None
    exported = engine.open_asset(handle.output_path)
    assert exported.has_video
    assert not exported.has_audio
