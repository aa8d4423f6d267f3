"""Tests for command execution and executable discovery."""

from __future__ import annotations

import pathlib
import sys

import pytest

from skia_build_utils.errors import PrerequisiteError
from skia_build_utils.utils import (
    ToolResult,
    ToolRunner,
    command_exists,
    locate_executable,
    locate_python3,
    run_streaming_cmd,
)


def test_tool_result_ok() -> None:
    assert ToolResult(["true"], 0).ok
    assert not ToolResult(["false"], 1).ok


def test_command_exists() -> None:
    assert command_exists(sys.executable)
    assert not command_exists("/does/not/exist/tool")


def test_run_streaming_cmd_captures_output() -> None:
    result = run_streaming_cmd([sys.executable, "-c", "print('hello'); print('[bold]')"])
    assert result.ok
    assert result.output.splitlines() == ["hello", "[bold]"]


def test_run_streaming_cmd_reports_exit_code() -> None:
    result = run_streaming_cmd([sys.executable, "-c", "import sys; sys.exit(4)"])
    assert result.returncode == 4


def test_run_streaming_cmd_missing_command() -> None:
    with pytest.raises(PrerequisiteError) as excinfo:
        run_streaming_cmd(["/does/not/exist/tool", "--version"])
    assert excinfo.value.candidates == ["/does/not/exist/tool"]


def test_run_streaming_cmd_replaces_undecodable_output() -> None:
    script = "import sys; sys.stdout.buffer.write(b'ok\\n\\xff\\xfe\\n')"
    result = run_streaming_cmd([sys.executable, "-c", script])
    assert result.ok
    assert result.output.splitlines() == ["ok", "\ufffd\ufffd"]


def test_tool_runner_missing_command() -> None:
    with pytest.raises(PrerequisiteError):
        ToolRunner().run(["bindgen-not-installed"])


def test_locate_executable(tmp_path) -> None:
    assert locate_executable("python", [tmp_path / "missing", sys.executable]) == pathlib.Path(sys.executable)
    with pytest.raises(PrerequisiteError) as excinfo:
        locate_executable("gn", [tmp_path / "gn"])
    assert excinfo.value.tool == "gn"


def test_locate_python3() -> None:
    assert locate_python3([sys.executable]) == sys.executable
    with pytest.raises(PrerequisiteError):
        locate_python3(["/does/not/exist/python"])
