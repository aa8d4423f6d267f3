#!/usr/bin/env python3
"""
Utility functions for the Skia bindings build system
Command execution, executable discovery, and other helper functions
"""

import os
import shutil
import subprocess
from collections import deque
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Sequence, Union

import sh
from rich.console import Console
from rich.live import Live
from rich.markup import escape
from rich.panel import Panel

from .config import PYTHON_CANDIDATES
from .errors import PrerequisiteError

console = Console(markup=True, highlight=False)

PathLike = Union[str, Path]


def command_exists(cmd: PathLike) -> bool:
    """Check whether a command/binary is available on the system."""
    cmd = str(cmd)
    if "/" in cmd or "\\" in cmd:
        cmd_path = Path(cmd)
        return cmd_path.exists() and os.access(cmd_path, os.X_OK)
    return shutil.which(cmd) is not None


# =============================================================================
# Command Execution
# =============================================================================


@dataclass(frozen=True)
class ToolResult:
    """Exit status and combined output of an external tool."""

    command: List[str]
    returncode: int
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def run_streaming_cmd(
    cmd: Sequence[PathLike],
    cwd: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
    title: str = "Processing...",
    max_lines: int = 8,
) -> ToolResult:
    """
    Executes a command using rich's Live display to show the last few lines of output.

    The full output is captured as well, so that callers can surface it
    when the command fails.

    Args:
        cmd: Command and arguments
        cwd: Working directory
        env: Full environment for the child process (default: inherited)
        title: Title for the output panel
        max_lines: Max lines to show in the rolling buffer

    Returns:
        ToolResult with the exit code and the captured output

    Raises:
        PrerequisiteError: If the command can not be found
    """
    cmd = [str(c) for c in cmd]

    if not command_exists(cmd[0]):
        console.print(f"[bold red]Command not found: {cmd[0]}[/]")
        raise PrerequisiteError(cmd[0], [cmd[0]])

    # Buffer to store recent lines
    buffer = deque(maxlen=max_lines)
    captured = []

    # Compilers may print in the console's code page, undecodable bytes are replaced.
    proc = subprocess.Popen(
        cmd,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        encoding="utf-8",
        errors="replace",
        bufsize=1,
        cwd=cwd,
        env=dict(env) if env is not None else None,
    )

    try:
        with Live(console=console, refresh_per_second=10) as live:
            live.update(Panel("\n" * max_lines, title=title))
            for line in proc.stdout:
                captured.append(line)
                buffer.append(escape(line.rstrip()))
                live.update(Panel("\n".join(buffer), title=f"{title} (last {max_lines} lines)"))
            proc.wait()
    finally:
        if proc.poll() is None:
            proc.kill()
            proc.wait()
        proc.stdout.close()

    if proc.returncode != 0:
        console.print(f"[bold red]Command failed with exit code {proc.returncode}[/]")
    return ToolResult(cmd, proc.returncode, "".join(captured))


class ToolRunner:
    """Runs external tools, blocking until each of them exits."""

    def run(
        self,
        cmd: Sequence[PathLike],
        cwd: Optional[Path] = None,
        env: Optional[Mapping[str, str]] = None,
        title: str = "Processing...",
    ) -> ToolResult:
        return run_streaming_cmd(cmd, cwd=cwd, env=env, title=title)


# =============================================================================
# Prerequisites
# =============================================================================


def is_python3(exe: str) -> Optional[bool]:
    """
    Returns True if the executable identifies itself as Python 3, None if
    it could not be started.
    """
    try:
        result = sh.Command(exe)("--version", _err_to_out=True)
    except (sh.CommandNotFound, sh.ErrorReturnCode):
        return None
    # Don't parse the version, it may look like "Python 2.7.15+"
    return str(result).strip().startswith("Python 3.")


def locate_python3(candidates: Iterable[str] = PYTHON_CANDIDATES) -> str:
    """Try the candidates in order and return the first Python 3."""
    candidates = list(candidates)
    for exe in candidates:
        console.print(f"Probing '{exe}'")
        if is_python3(exe):
            return exe
    raise PrerequisiteError("Python 3", candidates)


def locate_executable(name: str, candidates: Iterable[PathLike]) -> Path:
    """
    Return the first candidate that exists as an executable.

    Candidates may be paths or bare names looked up on PATH.
    """
    candidates = [c for c in candidates if c]
    for candidate in candidates:
        if command_exists(candidate):
            found = shutil.which(str(candidate))
            return Path(found) if found else Path(candidate)
    raise PrerequisiteError(name, candidates)


# =============================================================================
# Git
# =============================================================================


def git_short_hash(repo_path: Path, length: int = 20) -> Optional[str]:
    """Return a `length` digit hash of HEAD, None outside of a repository."""
    try:
        return str(sh.git("rev-parse", f"--short={length}", "HEAD", _cwd=repo_path)).strip()
    except (sh.CommandNotFound, sh.ErrorReturnCode):
        return None
