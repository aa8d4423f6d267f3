#!/usr/bin/env python3
"""
Exception types raised by the Skia build pipeline.

Nothing in the pipeline is retried; every error propagates to the caller
as the terminal outcome of a build.
"""

from typing import Iterable, Sequence


class BuildError(RuntimeError):
    """Base class for all build pipeline failures."""


class TargetParseError(BuildError, ValueError):
    """A platform triple could not be split into its parts."""


class PrerequisiteError(BuildError):
    """A required external executable could not be located."""

    def __init__(self, tool: str, candidates: Iterable[str]):
        self.tool = tool
        self.candidates = [str(c) for c in candidates]
        super().__init__(
            f"Unable to locate {tool}, probed: {', '.join(self.candidates)}"
        )


class ToolFailedError(BuildError):
    """An external tool exited with a non-zero status."""

    def __init__(self, command: Sequence[str], returncode: int, output: str = ""):
        self.command = [str(c) for c in command]
        self.returncode = returncode
        self.output = output
        super().__init__(
            f"`{' '.join(self.command)}` failed with exit code {returncode}"
        )


class DefinitionsParseError(BuildError):
    """A generated build descriptor did not have the expected format."""


class EnumRewriteError(BuildError):
    """An enum variant did not match the pattern its rewrite rule expects."""

    def __init__(self, enum_name: str, variant: str, expected: str):
        self.enum_name = enum_name
        self.variant = variant
        self.expected = expected
        super().__init__(
            f"failed to match '{expected}' on enum variant '{variant}' of enum '{enum_name}'"
        )


class EnumTableError(BuildError, ValueError):
    """The enum rewrite table is inconsistent."""


class BinariesDownloadError(BuildError):
    """Prebuilt binaries could not be downloaded or are incomplete."""
