"""Encoder flags per quality preset."""

from ffedit.models.types import Encoder, MediaKind, QualityPreset

from .stream_args import bitrate_flag, codec_flag, copy_stream

PIX_FMT: tuple[str, ...] = ("-pix_fmt", "yuv420p")  #: Pixel format for broad player compatibility.
PROFILE_HIGH: tuple[str, ...] = ("-profile:v", "high")  #: High profile for broad compatibility.
VP9_CONSTANT_QUALITY: tuple[str, ...] = ("-b:v", "0")  #: Let CRF alone drive VP9 rate control.
VP9_ROW_MT: tuple[str, ...] = ("-row-mt", "1")  #: Row based multithreading for VP9.

VIDEO_FLAGS: dict[Encoder, dict[QualityPreset, tuple[str, ...]]] = {
    Encoder.X264: {
        QualityPreset.HIGHEST: ("-preset", "slow", "-crf", "18", *PROFILE_HIGH),
        QualityPreset.MEDIUM: ("-preset", "medium", "-crf", "23", *PROFILE_HIGH),
        QualityPreset.LOW: ("-preset", "veryfast", "-crf", "28"),
    },
    Encoder.VP9: {
        QualityPreset.HIGHEST: ("-crf", "24", *VP9_CONSTANT_QUALITY, "-deadline", "good", *VP9_ROW_MT),
        QualityPreset.MEDIUM: ("-crf", "32", *VP9_CONSTANT_QUALITY, *VP9_ROW_MT),
        QualityPreset.LOW: ("-crf", "40", *VP9_CONSTANT_QUALITY, "-deadline", "realtime", "-cpu-used", "8"),
    },
}  #: Encoder-specific quality flags.

AUDIO_KBPS: dict[QualityPreset, int] = {
    QualityPreset.HIGHEST: 192,
    QualityPreset.MEDIUM: 128,
    QualityPreset.LOW: 96,
}  #: Audio bitrate per preset.


def video(preset: QualityPreset, encoder: Encoder | None) -> tuple[str, ...]:
    """Return output args for the video streams."""
    if preset.is_copy:
        return copy_stream(MediaKind.VIDEO)
    if encoder is None:
        raise ValueError("video encoder not resolved")
    return (*codec_flag(MediaKind.VIDEO), encoder.ffmpeg_name, *VIDEO_FLAGS[encoder][preset], *PIX_FMT)


def audio(preset: QualityPreset, encoder: Encoder | None) -> tuple[str, ...]:
    """Return output args for the audio streams."""
    if preset.is_copy:
        return copy_stream(MediaKind.AUDIO)
    if encoder is None:
        raise ValueError("audio encoder not resolved")
    return (
        *codec_flag(MediaKind.AUDIO),
        encoder.ffmpeg_name,
        *bitrate_flag(MediaKind.AUDIO),
        f"{AUDIO_KBPS[preset]}k",
    )
