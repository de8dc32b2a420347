"""Verbosity levels for status output."""

from enum import IntEnum


class Verbosity(IntEnum):
    """Status verbosity levels.

    ``COMMANDS`` surfaces the ffmpeg/ffprobe invocations, ``OUTPUT`` also
    streams the tools' own output.
    """

    QUIET = 0
    COMMANDS = 1
    OUTPUT = 2


__all__ = ["Verbosity"]
