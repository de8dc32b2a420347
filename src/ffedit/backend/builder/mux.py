"""Container flags."""

from ffedit.models.types import Container

from .command_args import FORMAT_FLAG

FASTSTART: tuple[str, ...] = ("-movflags", "+faststart")  #: Optimize MP4/MOV files for streaming.
PASSTHROUGH: tuple[str, ...] = (
    "-avoid_negative_ts",  # Avoid negative timestamps by shifting.
    "make_zero",  # Shift timestamps so first is zero.
)  #: Flags to keep timestamps stable when copying streams.
DROP_CHAPTERS: tuple[str, ...] = (
    "-map_chapters",
    "-1",
)  #: Remove inherited chapters when trimming to avoid incorrect metadata.


def build(container: Container, *, trimmed: bool, passthrough: bool) -> tuple[str, ...]:
    """Return container muxing args."""
    args: tuple[str, ...] = ()
    if container.compatibility.faststart:
        args = args + FASTSTART
    if trimmed:
        args = args + DROP_CHAPTERS
    if passthrough:
        args = args + PASSTHROUGH
    return args + FORMAT_FLAG + (container.muxer,)
