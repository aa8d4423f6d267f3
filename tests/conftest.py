"""Shared pytest fixtures for the skia_build_utils tests."""

from __future__ import annotations

import pathlib
from typing import Callable, Dict, List, Optional

import pytest

from skia_build_utils.config import initialize_paths
from skia_build_utils.utils import ToolResult

SKIA_NINJA = (
    "# generated\n"
    "defines = -DSK_GL -DSK_USE_LIBGIFCODEC -DSK_TRIVIAL_ABI=\\[\\[clang$:$:trivial_abi\\]\\]\n"
    "include_dirs = -I../..\n"
)


class FakeRunner:
    """Records external tool invocations instead of running them."""

    def __init__(self) -> None:
        self.calls: List[List[str]] = []
        self.envs: List[Optional[Dict[str, str]]] = []
        self.failures: Dict[str, int] = {}
        self.hooks: Dict[str, Callable[[List[str]], None]] = {}

    def fail(self, tool: str, returncode: int = 1) -> None:
        self.failures[tool] = returncode

    def on(self, tool: str, hook: Callable[[List[str]], None]) -> None:
        self.hooks[tool] = hook

    def invoked(self, tool: str) -> int:
        return sum(1 for cmd in self.calls if pathlib.Path(cmd[0]).name == tool)

    def run(self, cmd, cwd=None, env=None, title=""):
        cmd = [str(c) for c in cmd]
        self.calls.append(cmd)
        self.envs.append(dict(env) if env is not None else None)
        tool = pathlib.Path(cmd[0]).name
        if tool in self.failures:
            return ToolResult(cmd, self.failures[tool], f"{tool}: simulated failure\n")
        if tool in self.hooks:
            self.hooks[tool](cmd)
        return ToolResult(cmd, 0, "")


class FakeGenerator:
    """Binding generator double returning a fixed source."""

    def __init__(self, source: str = "pub enum SkColor {}\n") -> None:
        self.source = source
        self.requests = []

    def generate(self, request) -> str:
        self.requests.append(request)
        return self.source


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def paths(tmp_path: pathlib.Path) -> Dict[str, pathlib.Path]:
    """A project with existing Skia sources and binding sources."""
    paths = initialize_paths(tmp_path)
    paths['SKIA_DIR'].mkdir()
    paths['DEPOT_TOOLS_DIR'].mkdir()
    paths['SRC_DIR'].mkdir()
    for name in ("bindings.cpp", "gl.cpp", "gpu.cpp", "svg.cpp", "shaper.cpp", "paragraph.cpp"):
        (paths['SRC_DIR'] / name).write_text("// shim\n")
    return paths


@pytest.fixture
def ninja_writes_descriptors(runner: FakeRunner, paths: Dict[str, pathlib.Path]) -> FakeRunner:
    """Let the fake ninja produce the build descriptors a real build would."""

    def write_descriptors(cmd: List[str]) -> None:
        obj_dir = paths['OUTPUT_DIR'] / "obj"
        obj_dir.mkdir(parents=True, exist_ok=True)
        (obj_dir / "skia.ninja").write_text(SKIA_NINJA)

    runner.on("ninja", write_descriptors)
    return runner
