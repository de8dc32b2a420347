"""Shared pytest fixtures.

Stubs tool version checks, provides an isolated probe cache, and offers a
hand-driven exporter so job and engine tests never spawn FFmpeg.
"""

from __future__ import annotations

import shutil
import subprocess
from typing import TYPE_CHECKING

import pytest
from diskcache import Cache

from ffedit.backend import EditEngine
from ffedit.models import EngineSettings, MediaAsset, MediaKind, RuntimeContext, Stream
from ffedit.models.types import ExporterStatus

if TYPE_CHECKING:  # pragma: no cover - typing only
    from collections.abc import Callable, Iterator
    from pathlib import Path

    from ffedit.models import Composition
    from ffedit.models.types import Container, QualityPreset

# Duration in seconds used by synthetic sample videos in tests.
VIDEO_DURATION_SEC: float = 4.0


@pytest.fixture(autouse=True)
def _tools_version_sanity(monkeypatch: pytest.MonkeyPatch) -> None:
    """Stub tool version checks to avoid flaky native calls in tests."""
    monkeypatch.setattr("ffedit.backend.exporter.check_ffmpeg_version", lambda _ctx: "test", raising=True)
    monkeypatch.setattr("ffedit.tools.probe.check_version", lambda *args, **kwargs: "test", raising=True)


@pytest.fixture
def ctx(tmp_path: Path) -> Iterator[RuntimeContext]:
    """Runtime context backed by a throwaway cache."""
    with RuntimeContext(cache=Cache(str(tmp_path / "cache"))) as context:
        yield context


@pytest.fixture
def make_asset() -> Callable[..., MediaAsset]:
    """Build in-memory assets from stream durations in milliseconds."""

    def factory(
        duration_ms: int = 10_000,
        *,
        video: tuple[int, ...] = (10_000,),
        audio: tuple[int, ...] = (10_000,),
        location: str = "/media/source.mp4",
    ) -> MediaAsset:
        streams = tuple(Stream(MediaKind.VIDEO, i, ms) for i, ms in enumerate(video)) + tuple(
            Stream(MediaKind.AUDIO, i, ms) for i, ms in enumerate(audio)
        )
        return MediaAsset(location=location, duration_ms=duration_ms, all_streams=streams)

    return factory


@pytest.fixture
def asset(make_asset: Callable[..., MediaAsset]) -> MediaAsset:
    """Ten second asset with one video and one audio stream."""
    return make_asset()


class FakeSession:
    """Exporter session driven by the test instead of FFmpeg."""

    def __init__(self, *, confirms_cancellation: bool = True, start_error: Exception | None = None) -> None:
        self.status = ExporterStatus.WAITING
        self.progress = 0.0
        self.error: BaseException | None = None
        self.confirms_cancellation = confirms_cancellation
        self.start_error = start_error
        self.cancel_calls = 0
        self._on_progress: Callable[[float], None] | None = None
        self._on_finished: Callable[[ExporterStatus, BaseException | None], None] | None = None

    def export_async(
        self,
        on_progress: Callable[[float], None],
        on_finished: Callable[[ExporterStatus, BaseException | None], None],
    ) -> None:
        if self.start_error is not None:
            raise self.start_error
        self.status = ExporterStatus.EXPORTING
        self._on_progress = on_progress
        self._on_finished = on_finished

    def cancel(self) -> None:
        self.cancel_calls += 1

    def emit_progress(self, fraction: float) -> None:
        assert self._on_progress is not None
        self.progress = fraction
        self._on_progress(fraction)

    def finish(self, status: ExporterStatus, error: BaseException | None = None) -> None:
        assert self._on_finished is not None
        self.status = status
        self.error = error
        self._on_finished(status, error)


class FakeExporterFactory:
    """Record factory calls and hand out ``FakeSession`` objects."""

    def __init__(self) -> None:
        self.calls: list[tuple[Composition, Path, QualityPreset, Container]] = []
        self.sessions: list[FakeSession] = []
        self.error: Exception | None = None
        self.confirms_cancellation = True
        self.start_error: Exception | None = None

    def __call__(
        self,
        composition: Composition,
        output_path: Path,
        preset: QualityPreset,
        container: Container,
    ) -> FakeSession:
        self.calls.append((composition, output_path, preset, container))
        if self.error is not None:
            raise self.error
        session = FakeSession(confirms_cancellation=self.confirms_cancellation, start_error=self.start_error)
        self.sessions.append(session)
        return session

    @property
    def session(self) -> FakeSession:
        return self.sessions[-1]


@pytest.fixture
def exporter_factory() -> FakeExporterFactory:
    """Exporter factory returning hand-driven sessions."""
    return FakeExporterFactory()


@pytest.fixture
def engine(tmp_path: Path, ctx: RuntimeContext, exporter_factory: FakeExporterFactory) -> EditEngine:
    """Engine writing into ``tmp_path / "out"`` through the fake exporter."""
    return EditEngine(EngineSettings(output_dir=tmp_path / "out"), ctx=ctx, exporter_factory=exporter_factory)


@pytest.fixture
def source_file(tmp_path: Path) -> Path:
    """Provide a small synthetic MP4 video for tests.

    Creates a 4-second 200x200 color clip with silent stereo audio. Tests
    using it are skipped when ffmpeg is not installed.
    """
    ffmpeg = shutil.which("ffmpeg")
    if not ffmpeg or not shutil.which("ffprobe"):
        pytest.skip("ffmpeg and ffprobe must be available in PATH")
    data_dir = tmp_path / "data"
    data_dir.mkdir(parents=True, exist_ok=True)
    out = data_dir / "video.mp4"
    subprocess.run(  # noqa: S603
        [
            ffmpeg,
            "-v",
            "error",
            # Video source
            "-f",
            "lavfi",
            "-i",
            f"color=s=200x200:d={VIDEO_DURATION_SEC}",
            # Audio source (silent stereo)
            "-f",
            "lavfi",
            "-i",
            f"anullsrc=r=48000:cl=stereo:d={VIDEO_DURATION_SEC}",
            # Shortest to match streams
            "-shortest",
            # Encode video and audio
            "-c:v",
            "libx264",
            "-pix_fmt",
            "yuv420p",
            "-c:a",
            "aac",
            "-b:a",
            "128k",
            "-y",
            str(out),
        ],
        check=True,
    )
    return out
