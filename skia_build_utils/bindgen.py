#!/usr/bin/env python3
"""
Binding generation with the `bindgen` command line tool.

The binding sources are included by a generated wrapper header, the
curated surface is passed as `bindgen` options and the Skia definitions
as clang arguments. Enum variants are renamed afterwards on the generated
source, because the command line tool has no naming callback.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from .definitions import Definitions, to_compiler_flags
from .enum_rewrite import EnumRewriteEngine
from .errors import ToolFailedError
from .surface import BindingSurface
from .target import TargetDescriptor
from .utils import ToolRunner, console

WRAPPER_HEADER_NAME = "bindings-wrapper.hpp"


@dataclass
class BindingRequest:
    """Everything the binding generator consumes."""

    headers: List[Path]
    surface: BindingSurface
    definitions: Definitions
    engine: EnumRewriteEngine
    target: TargetDescriptor
    include_dirs: List[Path] = field(default_factory=list)
    clang_args: List[str] = field(default_factory=list)
    work_dir: Path = Path(".")


def bindgen_options(request: BindingRequest) -> List[str]:
    """Options of the `bindgen` command line before the `--` separator."""
    options = [
        "--no-doc-comments",
        "--default-enum-style", "rust",
        "--use-core",
    ]
    target = request.target
    # Destructors of Windows targets do not link.
    if target.is_windows:
        options += ["--generate", "functions,types,vars,methods,constructors"]
    # 32-bit Windows needs `thiscall` support.
    if target.is_windows and target.architecture == "i686":
        options += ["--rust-target", "nightly"]
    return options + request.surface.bindgen_args()


def clang_arguments(request: BindingRequest) -> List[str]:
    """Arguments passed through to clang after the `--` separator."""
    args = ["-std=c++17", "-x", "c++"]
    args += [f"-I{include}" for include in request.include_dirs]
    args += to_compiler_flags(request.definitions)
    args += request.clang_args
    return args


def write_wrapper_header(headers: Sequence[Path], work_dir: Path) -> Path:
    work_dir.mkdir(parents=True, exist_ok=True)
    wrapper = work_dir / WRAPPER_HEADER_NAME
    wrapper.write_text(
        "".join(f'#include "{Path(h).resolve().as_posix()}"\n' for h in headers),
        encoding="utf-8",
    )
    return wrapper


class BindgenGenerator:
    """Runs `bindgen` and applies the enum renames to its output."""

    def __init__(self, runner: Optional[ToolRunner] = None, executable: str = "bindgen"):
        self.runner = runner or ToolRunner()
        self.executable = executable

    def generate(self, request: BindingRequest) -> str:
        """
        Generate the binding source.

        Raises:
            ToolFailedError: If bindgen fails
            EnumRewriteError: If an enum variant does not match its rule
        """
        wrapper = write_wrapper_header(request.headers, request.work_dir)
        output = request.work_dir / "bindings.unprocessed.rs"
        cmd = [
            self.executable, str(wrapper), "-o", str(output),
            *bindgen_options(request), "--", *clang_arguments(request),
        ]
        result = self.runner.run(cmd, cwd=request.work_dir, title="Generating bindings")
        if result.returncode != 0:
            raise ToolFailedError(result.command, result.returncode, result.output)

        source = output.read_text(encoding="utf-8")
        return apply_enum_rewrites(source, request.engine)


########################################################################
# Enum Renaming
########################################################################

_ENUM_BODY = re.compile(r"pub enum (\w+) \{\n(.*?)\n\}", re.DOTALL)
_ENUM_VARIANT = re.compile(r"^(\s*)(\w+)(\s*=)", re.MULTILINE)
_IMPL_CONST = re.compile(r"pub const (\w+): (\w+) = ")
_PATH = re.compile(r"\b(\w+)::(\w+)\b")


def _renames(source: str, engine: EnumRewriteEngine) -> Dict[Tuple[str, str], str]:
    renames: Dict[Tuple[str, str], str] = {}

    def rename(enum_name: str, variant: str) -> None:
        table_name = engine.resolve(enum_name)
        if table_name is None or (enum_name, variant) in renames:
            return
        new_name = engine.rename(table_name, variant)
        if new_name is not None:
            renames[(enum_name, variant)] = new_name

    enums = set()
    for match in _ENUM_BODY.finditer(source):
        enum_name = match.group(1)
        enums.add(enum_name)
        for variant in _ENUM_VARIANT.finditer(match.group(2)):
            rename(enum_name, variant.group(2))

    # Duplicate discriminants are generated as associated constants.
    for match in _IMPL_CONST.finditer(source):
        variant, enum_name = match.groups()
        if enum_name in enums:
            rename(enum_name, variant)
    return renames


def apply_enum_rewrites(source: str, engine: EnumRewriteEngine) -> str:
    """Rename the variants of all enums the engine has rules for."""
    renames = _renames(source, engine)
    if not renames:
        return source

    def replace_body(match):
        enum_name, body = match.groups()

        def replace_variant(v):
            new_name = renames.get((enum_name, v.group(2)), v.group(2))
            return f"{v.group(1)}{new_name}{v.group(3)}"

        return f"pub enum {enum_name} {{\n{_ENUM_VARIANT.sub(replace_variant, body)}\n}}"

    def replace_const(match):
        variant, enum_name = match.groups()
        return f"pub const {renames.get((enum_name, variant), variant)}: {enum_name} = "

    def replace_path(match):
        enum_name, variant = match.groups()
        return f"{enum_name}::{renames.get((enum_name, variant), variant)}"

    source = _ENUM_BODY.sub(replace_body, source)
    source = _IMPL_CONST.sub(replace_const, source)
    source = _PATH.sub(replace_path, source)
    console.print(f"Renamed {len(renames)} enum variants")
    return source
