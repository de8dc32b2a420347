"""Tests for option helpers."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from ffedit.models import EditOptions, EngineSettings, TimeRange, TrimOptions
from ffedit.models.options import RuntimeOptions, TimeOptions
from ffedit.models.types import Container, OutputPolicy, QualityPreset
from ffedit.models.context import CACHE_ENV, default_cache_dir
from ffedit.models.verbosity import Verbosity

START_TS = "00:00:01"
END_TS = "00:00:03"


@pytest.fixture
def source(tmp_path: Path) -> Path:
    path = tmp_path / "in.mp4"
    path.write_bytes(b"")
    return path


def test_time_options_to_range() -> None:
    """Resolve timestamps against the media duration."""
    assert TimeOptions(start=START_TS, end=END_TS).to_range(4000) == TimeRange(1000, 3000)
    assert TimeOptions(start=START_TS).to_range(4000) == TimeRange(1000, 4000)
    assert TimeOptions(end="2s").to_range(4000) == TimeRange(0, 2000)


def test_time_options_rejects_invalid_format() -> None:
    """Reject invalid time strings."""
    with pytest.raises(ValueError):
        TimeOptions(start="notatime")


def test_time_options_rejects_reversed_range() -> None:
    """Reject an end before the start."""
    with pytest.raises(ValueError, match="must not be before"):
        TimeOptions(start=END_TS, end=START_TS)


def test_time_options_duration() -> None:
    """A duration measures the range from its start."""
    assert TimeOptions(start=START_TS, duration="1.5s").to_range(4000) == TimeRange(1000, 2500)
    assert TimeOptions(duration="2s").to_range(4000) == TimeRange(0, 2000)


def test_time_options_rejects_end_with_duration() -> None:
    """End and duration are mutually exclusive."""
    with pytest.raises(ValueError, match="both"):
        TimeOptions(end=END_TS, duration="1s")


@pytest.mark.parametrize(
    ("value", "expected"),
    [("commands", Verbosity.COMMANDS), ("OUTPUT", Verbosity.OUTPUT), ("0", Verbosity.QUIET), (2, Verbosity.OUTPUT)],
)
def test_runtime_verbosity_parsing(value: object, expected: Verbosity) -> None:
    """Accept verbosity names and numbers."""
    assert RuntimeOptions(verbosity=value).verbosity is expected


def test_runtime_verbosity_rejects_unknown() -> None:
    """Reject unknown verbosity levels."""
    with pytest.raises(ValidationError):
        RuntimeOptions(verbosity="loud")


def test_edit_options_defaults(source: Path) -> None:
    """Default options export a fixed mp4 at the highest quality."""
    opts = EditOptions(source=source)
    settings = opts.settings()
    assert settings.policy is OutputPolicy.FIXED
    assert settings.preset is QualityPreset.HIGHEST
    assert settings.container is Container.MP4
    assert opts.output_path() is None


def test_edit_options_unique_output(source: Path, tmp_path: Path) -> None:
    """``unique_output`` switches to uniquely named files."""
    opts = EditOptions(source=source, unique_output=True, output_dir=tmp_path / "exports")
    settings = opts.settings()
    assert settings.policy is OutputPolicy.UNIQUE
    assert settings.output_dir == tmp_path / "exports"


def test_source_must_exist(tmp_path: Path) -> None:
    """Reject local sources that are not files."""
    with pytest.raises(ValidationError, match="not a file"):
        EditOptions(source=tmp_path / "missing.mp4")


def test_remote_source_allowed() -> None:
    """Allow http(s) sources without checking the filesystem."""
    opts = EditOptions(source="https://example.com/video.mp4")
    assert opts.source == "https://example.com/video.mp4"


def test_output_extension_selects_container(source: Path, tmp_path: Path) -> None:
    """An output suffix picks the container when none is given."""
    opts = EditOptions(source=source, output=tmp_path / "clip.mkv")
    assert opts.container is Container.MKV
    assert opts.output_path() == tmp_path / "clip.mkv"


def test_output_extension_conflict(source: Path, tmp_path: Path) -> None:
    """Reject an output suffix contradicting the container."""
    with pytest.raises(ValidationError, match="conflicts"):
        EditOptions(source=source, output=tmp_path / "clip.mkv", container=Container.WEBM)


def test_output_without_extension(source: Path, tmp_path: Path) -> None:
    """Append the container extension to a bare output name."""
    opts = EditOptions(source=source, output=tmp_path / "clip", container=Container.MOV)
    assert opts.output_path() == tmp_path / "clip.mov"


def test_unknown_option_rejected(source: Path) -> None:
    """Reject unknown options."""
    with pytest.raises(ValidationError):
        EditOptions(source=source, bogus=True)


def test_trim_options_time(source: Path) -> None:
    """Trim options carry a time selection."""
    opts = TrimOptions(source=source, time=TimeOptions(start=START_TS))
    assert opts.time.to_range(4000) == TimeRange(1000, 4000)


def test_engine_settings_output_paths(tmp_path: Path) -> None:
    """Fixed outputs reuse one name, unique outputs add a suffix."""
    fixed = EngineSettings(output_dir=tmp_path)
    assert fixed.output_path("editedVideo") == tmp_path / "editedVideo.mp4"
    assert fixed.output_path("editedVideo") == fixed.output_path("editedVideo")
    unique = EngineSettings(output_dir=tmp_path, policy=OutputPolicy.UNIQUE, container=Container.WEBM)
    first, second = unique.output_path("videoWithoutAudio"), unique.output_path("videoWithoutAudio")
    assert first != second
    assert first.name.startswith("videoWithoutAudio-")
    assert first.suffix == ".webm"


def test_engine_settings_are_frozen(tmp_path: Path) -> None:
    """Engine settings cannot change after construction."""
    settings = EngineSettings(output_dir=tmp_path)
    with pytest.raises(ValidationError):
        settings.preset = QualityPreset.LOW  # type: ignore[misc]


def test_runtime_context_uses_cache_dir(tmp_path: Path) -> None:
    """Runtime options open a context with the requested cache directory."""
    opts = RuntimeOptions(verbosity="commands", dry_run=True, cache_dir=tmp_path / "probe-cache")
    with opts.context(print) as ctx:
        assert ctx.verbosity is Verbosity.COMMANDS
        assert ctx.dry_run
        assert ctx.status_callback is print
        assert Path(ctx.cache.directory) == tmp_path / "probe-cache"


def test_default_cache_dir_follows_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """``FFEDIT_CACHE`` relocates the default cache."""
    monkeypatch.setenv(CACHE_ENV, str(tmp_path))
    assert default_cache_dir() == tmp_path / "ffedit-cache"
