#!/usr/bin/env python3
"""
Builder for the native binding shim.

The shim consists of the C++ sources in `src/` that expose Skia's C++ API
as `extern "C"` functions. They are compiled against the Skia headers with
the definitions Skia was built with, and archived into the
`skia-bindings` static library.
"""

from pathlib import Path
from typing import List, Mapping, Optional

from .binaries import SKIA_BINDINGS
from .config import NATIVE_AR, compiler_commands, sysroot
from .definitions import Definitions, to_compiler_flags
from .errors import BuildError, ToolFailedError
from .features import FeatureConfiguration
from .gn_args import BuildArguments
from .target import TargetDescriptor
from .utils import ToolRunner, console


def binding_sources(features: FeatureConfiguration, src_dir: Path) -> List[Path]:
    """The shim sources needed for a feature configuration."""
    sources = ["bindings.cpp"]
    if features.gl:
        sources.append("gl.cpp")
    if features.vulkan:
        sources.append("vulkan.cpp")
    if features.metal:
        sources.append("metal.cpp")
    if features.d3d:
        sources.append("d3d.cpp")
    if features.gpu:
        sources.append("gpu.cpp")
    if features.text_layout:
        sources.extend(["shaper.cpp", "paragraph.cpp"])
    sources.append("svg.cpp")
    return [src_dir / source for source in sources]


# Binding generator arguments that select the target architecture.
ARCHITECTURE_ARGS = ("-m32", "-m64")


def target_flags(arguments: BuildArguments) -> List[str]:
    """
    The flags that make the shim match the Skia build: Skia's own compiler
    flags and the architecture selection of the binding generator arguments.
    The sysroot is added by the builder itself.
    """
    flags = [flag for flag in arguments.cflags if not flag.startswith("--sysroot=")]
    clang_args = list(arguments.clang_args)
    for index, arg in enumerate(clang_args):
        if arg in ARCHITECTURE_ARGS and arg not in flags:
            flags.append(arg)
        elif arg == "-arch" and index + 1 < len(clang_args):
            flags.extend(clang_args[index:index + 2])
    return flags


class ShimBuilder:
    """Compiles the binding sources and archives them."""

    def __init__(
        self,
        target: TargetDescriptor,
        skia_dir: Path,
        build_dir: Path,
        definitions: Definitions,
        runner: Optional[ToolRunner] = None,
        env: Optional[Mapping[str, str]] = None,
        arguments: Optional[BuildArguments] = None,
    ):
        env = env if env is not None else {}
        self.target = target
        self.skia_dir = skia_dir
        self.build_dir = build_dir
        self.runner = runner or ToolRunner()

        self.cxx = compiler_commands(env)['CXX']
        self.ar = NATIVE_AR
        self.lib_name = target.library_to_filename(SKIA_BINDINGS)
        self.lib_path = build_dir / self.lib_name

        self.cxxflags = [] if target.is_windows else ["-std=c++17"]
        self.cxxflags.append(f"-I{skia_dir}")
        self.cxxflags += to_compiler_flags(definitions)

        # Compile for the target the platform chose for Skia.
        compiler_target = arguments.compiler_target if arguments else None
        if compiler_target:
            self.cxxflags.append(f"--target={compiler_target}")
        elif not target.host_is_target_os:
            self.cxxflags.append(f"--target={target}")
        if arguments:
            self.cxxflags += [f for f in target_flags(arguments) if f not in self.cxxflags]
        root = sysroot(env)
        if root:
            prefix = "-isysroot" if target.is_macos else "--sysroot="
            self.cxxflags.append(f"{prefix}{root}")

    def ensure_directories(self):
        self.build_dir.mkdir(parents=True, exist_ok=True)

    def compile_source(self, source_path: Path) -> Path:
        """Compile a single source file, returns the object file."""
        obj_file = self.build_dir / source_path.with_suffix(".o").name
        cmd = [self.cxx, *self.cxxflags, "-c", str(source_path), "-o", str(obj_file)]
        self._run(cmd, f"Compiling {source_path.name}")
        return obj_file

    def create_static_lib(self, object_files: List[Path]) -> Path:
        cmd = [self.ar, "rcs", str(self.lib_path), *[str(obj) for obj in object_files]]
        self._run(cmd, f"Creating static library {self.lib_name}")
        return self.lib_path

    def build(self, sources: List[Path]) -> Path:
        """
        Build the shim library.

        Raises:
            BuildError: If a source file is missing
            ToolFailedError: If the compiler or archiver fails
        """
        missing = [str(s) for s in sources if not s.exists()]
        if missing:
            raise BuildError(f"Missing binding sources: {', '.join(missing)}")

        self.ensure_directories()
        console.print(f"\n[bold]Compiling {len(sources)} binding sources...[/]")
        objects = [self.compile_source(source) for source in sources]
        lib_path = self.create_static_lib(objects)
        console.print(f"[green]Static library: {lib_path}[/]")
        return lib_path

    def _run(self, cmd, title: str) -> None:
        result = self.runner.run(cmd, title=title)
        if result.returncode != 0:
            raise ToolFailedError(result.command, result.returncode, result.output)
