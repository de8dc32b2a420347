"""Media, codec, container and status type definitions."""

from dataclasses import dataclass
from enum import Enum


class MediaKind(str, Enum):
    """Kind of media carried by a stream or track."""

    VIDEO = "video"
    AUDIO = "audio"

    @property
    def selector(self) -> str:
        """Single-letter ffmpeg stream selector for this kind."""
        return self.value[0]


class Encoder(str, Enum):
    """Encoders used when an export re-encodes its streams."""

    X264 = "x264"
    VP9 = "vp9"
    AAC = "aac"
    OPUS = "opus"

    @property
    def ffmpeg_name(self) -> str:
        """Return the FFmpeg encoder name for this enum."""
        return {
            Encoder.X264: "libx264",
            Encoder.VP9: "libvpx-vp9",
            Encoder.AAC: "aac",
            Encoder.OPUS: "libopus",
        }[self]

    @property
    def kind(self) -> MediaKind:
        """Kind of stream this encoder produces."""
        return MediaKind.VIDEO if self in {Encoder.X264, Encoder.VP9} else MediaKind.AUDIO


class QualityPreset(str, Enum):
    """Export quality presets.

    ``PASSTHROUGH`` copies the source streams without re-encoding, the other
    presets trade encode time for quality.
    """

    HIGHEST = "highest"
    MEDIUM = "medium"
    LOW = "low"
    PASSTHROUGH = "passthrough"

    @property
    def is_copy(self) -> bool:
        """Whether the preset stream copies instead of encoding."""
        return self is QualityPreset.PASSTHROUGH


class Container(str, Enum):
    """Supported output container formats."""

    MP4 = "mp4"
    MOV = "mov"
    MKV = "mkv"
    WEBM = "webm"

    @property
    def compatibility(self) -> "ContainerCompatibility":
        """Encoders supported by this container."""
        return _CONTAINER_COMPATIBILITY[self]

    @property
    def extension(self) -> str:
        """Canonical filename extension for this container, including dot."""
        return f".{self.value}"

    @property
    def muxer(self) -> str:
        """FFmpeg muxer name for this container."""
        return {Container.MKV: "matroska"}.get(self, self.value)


@dataclass(frozen=True)
class ContainerCompatibility:
    """Encoders an output container accepts, in order of preference."""

    video_encoders: tuple[Encoder, ...]
    audio_encoders: tuple[Encoder, ...]
    faststart: bool = False


_CONTAINER_COMPATIBILITY: dict[Container, ContainerCompatibility] = {
    Container.MP4: ContainerCompatibility(
        video_encoders=(Encoder.X264,),
        audio_encoders=(Encoder.AAC,),
        faststart=True,
    ),
    Container.MOV: ContainerCompatibility(
        video_encoders=(Encoder.X264,),
        audio_encoders=(Encoder.AAC,),
        faststart=True,
    ),
    Container.MKV: ContainerCompatibility(
        video_encoders=(Encoder.X264, Encoder.VP9),
        audio_encoders=(Encoder.AAC, Encoder.OPUS),
    ),
    Container.WEBM: ContainerCompatibility(
        video_encoders=(Encoder.VP9,),
        audio_encoders=(Encoder.OPUS,),
    ),
}


class OutputPolicy(str, Enum):
    """How the engine names the files it exports."""

    FIXED = "fixed"  #: One well-known file per operation, replaced on every call.
    UNIQUE = "unique"  #: A fresh uuid-suffixed file per call.


class JobStatus(str, Enum):
    """Lifecycle states of an export job."""

    IDLE = "idle"
    EXPORTING = "exporting"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        """Whether the state is final."""
        return self in {JobStatus.COMPLETED, JobStatus.FAILED, JobStatus.CANCELLED}


class ExporterStatus(str, Enum):
    """Status reported by an exporter session."""

    WAITING = "waiting"
    EXPORTING = "exporting"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        """Whether the exporter has finished."""
        return self in {ExporterStatus.COMPLETED, ExporterStatus.FAILED, ExporterStatus.CANCELLED}
