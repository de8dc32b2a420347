"""Common FFmpeg command arguments."""

INPUT_FLAG: tuple[str, ...] = ("-i",)  #: Introduce an input file path.
OVERWRITE_OUTPUT: tuple[str, ...] = ("-y",)  #: Overwrite existing files.
NO_STDIN: tuple[str, ...] = ("-nostdin",)  #: Never read interactive commands from stdin.
FORMAT_FLAG: tuple[str, ...] = ("-f",)  #: Select the output muxer.
PROGRESS: tuple[str, ...] = (
    "-progress",  # Machine-readable key=value progress blocks.
    "pipe:1",
    "-nostats",  # Suppress the interactive stats line.
    "-loglevel",
    "error",
)  #: Report progress on stdout and keep stderr to errors only.
