"""Translate compositions into FFmpeg invocations."""

from .command_builder import GLOBAL_FLAGS, build_command

__all__ = ["GLOBAL_FLAGS", "build_command"]
