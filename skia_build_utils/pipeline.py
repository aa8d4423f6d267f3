#!/usr/bin/env python3
"""
The Skia build pipeline.

Stages run strictly in order, each one depends on the artifacts of the
previous one:

    fetch sources -> sync dependencies -> synthesize arguments -> gn gen
    -> ninja -> extract definitions -> generate bindings -> compile shim
    -> emit surface

Every external tool's exit status is checked; the first failure raises
and no later stage runs. Nothing is retried.

When prebuilt binaries for the repository revision, target and features
can be installed, they replace all of the stages.
"""

import os
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from .bindgen import BindgenGenerator, BindingRequest
from .binaries import BinariesConfiguration
from .binary_cache import BinaryCache
from .builders import ShimBuilder, binding_sources
from .config import BINDINGS_FILE_NAME, DEFINES_FILE_NAME, GIT_SYNC_DEPS_ENV, GIT_SYNC_DEPS_SCRIPT, \
    gn_default_path, ninja_default_path
from .definitions import Definitions, from_features, load_definitions, save_definitions
from .enum_rewrite import EnumRewriteEngine, default_engine
from .errors import ToolFailedError
from .features import FeatureConfiguration
from .gn_args import BuildArguments, synthesize
from .sources import SourceProvider
from .surface import BindingSurface, default_surface
from .target import TargetDescriptor
from .utils import ToolRunner, console, locate_executable, locate_python3

STAGES = (
    "fetch_sources",
    "sync_dependencies",
    "synthesize_arguments",
    "generate_build_description",
    "execute_build",
    "extract_definitions",
    "generate_bindings",
    "compile_shim",
    "emit_surface",
)

# Replaces all of STAGES when prebuilt binaries are available.
PREBUILT_STAGE = "install_binaries"

# Decided by Skia's BUILD.gn from the existence of third_party/externals/libgifcodec.
GIF_CODEC_DEFINE = "SK_USE_LIBGIFCODEC"


class Pipeline:
    """Builds Skia, the binding shim and the generated bindings for one target."""

    def __init__(
        self,
        features: FeatureConfiguration,
        target: TargetDescriptor,
        paths: Dict[str, Path],
        runner: Optional[ToolRunner] = None,
        generator: Optional[BindgenGenerator] = None,
        source_provider: Optional[SourceProvider] = None,
        surface: Optional[BindingSurface] = None,
        engine: Optional[EnumRewriteEngine] = None,
        env: Optional[Mapping[str, str]] = None,
        offline: bool = False,
        gn: Optional[str] = None,
        ninja: Optional[str] = None,
        python: Optional[str] = None,
        binary_cache: Optional[BinaryCache] = None,
        export_dir: Optional[Path] = None,
    ):
        self.features = features.for_target(target)
        self.target = target
        self.paths = paths
        self.runner = runner or ToolRunner()
        self.generator = generator or BindgenGenerator(self.runner)
        self.source_provider = source_provider or SourceProvider(self.runner)
        self.surface = surface or default_surface()
        self.engine = engine or default_engine()
        self.env: Mapping[str, str] = env if env is not None else os.environ
        self.offline = offline
        self.gn = gn
        self.ninja = ninja
        self.python = python
        self.binary_cache = binary_cache or BinaryCache(self.env, paths['PROJECT_ROOT'])
        self.export_dir = export_dir

        self.binaries = BinariesConfiguration.from_features(features, target, paths['OUTPUT_DIR'])
        self.completed: List[str] = []

        # Stage results
        self.arguments: Optional[BuildArguments] = None
        self.definitions: Optional[Definitions] = None
        self.defines_file: Optional[Path] = None
        self.bindings_source: Optional[str] = None
        self.shim_library: Optional[Path] = None
        self.binaries_archive: Optional[Path] = None

    # =========================================================================
    # Tools
    # =========================================================================

    def python_command(self) -> str:
        if self.python is None:
            self.python = locate_python3()
            console.print(f"Python 3 found: {self.python}")
        return self.python

    def gn_command(self) -> str:
        if self.gn is None:
            self.gn = str(locate_executable("gn", [gn_default_path(self.paths['SKIA_DIR']), "gn"]))
        return self.gn

    def ninja_command(self) -> str:
        if self.ninja is None:
            self.ninja = str(locate_executable(
                "ninja", [ninja_default_path(self.paths['DEPOT_TOOLS_DIR']), "ninja"]
            ))
        return self.ninja

    def _run(self, cmd, title: str, cwd: Optional[Path] = None, env: Optional[Mapping[str, str]] = None):
        result = self.runner.run(cmd, cwd=cwd, env=env, title=title)
        if result.returncode != 0:
            raise ToolFailedError(result.command, result.returncode, result.output)
        return result

    # =========================================================================
    # Stages
    # =========================================================================

    def fetch_sources(self) -> None:
        self.source_provider.ensure(self.paths)

    def sync_dependencies(self) -> None:
        if self.offline:
            console.print("[yellow]Offline, skipping the dependency synchronization[/]")
            return
        python = self.python_command()
        env = dict(self.env)
        env.update(GIT_SYNC_DEPS_ENV)
        self._run(
            [python, GIT_SYNC_DEPS_SCRIPT],
            title="Synchronizing Skia dependencies",
            cwd=self.paths['PROJECT_ROOT'],
            env=env,
        )

    def synthesize_arguments(self) -> BuildArguments:
        self.arguments = synthesize(self.features, self.target, self.env)
        console.print(f"[bold]Platform:[/] {self.arguments.platform}")
        console.print(f"[bold]Skia args:[/] {self.arguments.render()}")
        return self.arguments

    def generate_build_description(self) -> None:
        output_dir = self.paths['OUTPUT_DIR']
        output_dir.mkdir(parents=True, exist_ok=True)
        self._run(
            [
                self.gn_command(),
                "gen",
                str(output_dir),
                f"--script-executable={self.python_command()}",
                f"--args={self.arguments.render()}",
            ],
            title="Configuring Skia (gn gen)",
            cwd=self.paths['SKIA_DIR'],
            env=self.env,
        )

    def execute_build(self) -> None:
        # Argument order matters: -C before the targets.
        self._run(
            [self.ninja_command(), "-C", str(self.paths['OUTPUT_DIR']), *self.binaries.ninja_built_libraries],
            title="Building Skia (ninja)",
        )

    def extract_definitions(self) -> Definitions:
        self.definitions = from_features(self.features, self.paths['OUTPUT_DIR'])
        self.defines_file = save_definitions(self.definitions, self.paths['OUTPUT_DIR'])
        console.print(f"Extracted {len(self.definitions)} definitions to {self.defines_file}")

        if not any(name == GIF_CODEC_DEFINE for name, _ in self.definitions):
            console.print(
                "[yellow]Warning: GIF decoding support may be missing, does the directory "
                "skia/third_party/externals/libgifcodec/ exist?[/]"
            )
        return self.definitions

    def generate_bindings(self) -> str:
        request = BindingRequest(
            headers=binding_sources(self.features, self.paths['SRC_DIR']),
            surface=self.surface,
            definitions=self.definitions,
            engine=self.engine,
            target=self.target,
            include_dirs=[self.paths['SKIA_DIR']],
            clang_args=list(self.arguments.clang_args),
            work_dir=self.paths['BUILD_DIR'],
        )
        self.bindings_source = self.generator.generate(request)
        return self.bindings_source

    def compile_shim(self) -> Path:
        builder = ShimBuilder(
            self.target,
            self.paths['SKIA_DIR'],
            self.paths['OUTPUT_DIR'],
            self.definitions,
            runner=self.runner,
            env=self.env,
            arguments=self.arguments,
        )
        self.shim_library = builder.build(binding_sources(self.features, self.paths['SRC_DIR']))
        return self.shim_library

    def emit_surface(self) -> Path:
        bindings_file = self.paths['BINDINGS_FILE']
        bindings_file.parent.mkdir(parents=True, exist_ok=True)
        bindings_file.write_text(self.bindings_source, encoding="utf-8")
        console.print(f"[green]Bindings written to {bindings_file}[/]")
        return bindings_file

    # =========================================================================
    # Prebuilt Binaries
    # =========================================================================

    def install_binaries(self) -> None:
        """Take the bindings and definitions from installed prebuilt binaries."""
        output_dir = self.paths['OUTPUT_DIR']
        self.defines_file = output_dir / DEFINES_FILE_NAME
        self.definitions = load_definitions(self.defines_file)
        self.bindings_source = (output_dir / BINDINGS_FILE_NAME).read_text(encoding="utf-8")
        self.shim_library = self.binaries.built_library_files(self.target)[-1]
        self.emit_surface()

    def export_binaries(self) -> Path:
        files = self.binaries.built_library_files(self.target)
        files += [self.paths['OUTPUT_DIR'] / f for f in self.binaries.additional_files]
        files += [self.defines_file, self.paths['BINDINGS_FILE']]
        self.binaries_archive = self.binary_cache.export(self.binaries, self.target, files, self.export_dir)
        return self.binaries_archive

    # =========================================================================
    # Run
    # =========================================================================

    def run(self) -> Dict[str, Path]:
        """
        Run all stages in order, stopping at the first failure.

        When prebuilt binaries can be installed, they replace all stages.

        Returns:
            The produced artifacts: BINDINGS_FILE, SHIM_LIBRARY, DEFINES_FILE,
            and BINARIES_ARCHIVE when exporting
        """
        console.print(f"[bold cyan]Building Skia for {self.target}[/] (features: {self.features.describe()})")
        if self.binary_cache.try_install(self.binaries, self.target):
            self.install_binaries()
            self.completed.append(PREBUILT_STAGE)
        else:
            for index, stage in enumerate(STAGES, 1):
                console.print(f"\n[bold][{index}/{len(STAGES)}] {stage.replace('_', ' ')}[/]")
                getattr(self, stage)()
                self.completed.append(stage)

        artifacts = {
            'BINDINGS_FILE': self.paths['BINDINGS_FILE'],
            'SHIM_LIBRARY': self.shim_library,
            'DEFINES_FILE': self.defines_file,
        }
        if self.export_dir is not None and PREBUILT_STAGE not in self.completed:
            artifacts['BINARIES_ARCHIVE'] = self.export_binaries()

        console.print("\n[green]Build complete.[/]")
        return artifacts
