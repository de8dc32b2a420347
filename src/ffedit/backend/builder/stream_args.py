"""Stream argument helpers."""

from ffedit.models.types import MediaKind

MAP_FLAG = "-map"  #: Flag to map a stream.


def spec(kind: MediaKind, index: int | None = 0, *, input_index: int = 0) -> str:
    """Return a formatted stream spec.

    Args:
        kind: Stream kind.
        index: Stream index within the kind or ``None`` to omit the index.
        input_index: Input file index.

    Returns:
        Formatted stream selector like ``0:v:0`` or ``1:a``.

    """
    idx = "" if index is None else f":{index}"
    return f"{input_index}:{kind.selector}{idx}"


def map_spec(kind: MediaKind, index: int | None = 0, *, input_index: int = 0) -> tuple[str, ...]:
    """Return ``-map`` argument for a stream spec."""
    return (MAP_FLAG, spec(kind, index, input_index=input_index))


def codec_flag(kind: MediaKind) -> tuple[str, ...]:
    """Return codec flag for a stream kind."""
    return (f"-c:{kind.selector}",)


def copy_stream(kind: MediaKind) -> tuple[str, ...]:
    """Return stream copy flags for a stream kind."""
    return (*codec_flag(kind), "copy")


def bitrate_flag(kind: MediaKind) -> tuple[str, ...]:
    """Return bitrate flag for a stream kind."""
    return (f"-b:{kind.selector}",)


def disable_stream(kind: MediaKind) -> tuple[str, ...]:
    """Return flag to disable all streams of a kind."""
    return (f"-{kind.selector}n",)
