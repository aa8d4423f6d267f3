"""Tests for binding generation and enum renaming of the generated source."""

from __future__ import annotations

import pathlib

import pytest

from skia_build_utils.bindgen import (
    BindgenGenerator,
    BindingRequest,
    apply_enum_rewrites,
    bindgen_options,
    clang_arguments,
)
from skia_build_utils.enum_rewrite import EnumRewriteEngine, default_engine, k_xxx, k_xxx_name
from skia_build_utils.errors import EnumRewriteError, PrerequisiteError, ToolFailedError
from skia_build_utils.surface import default_surface
from skia_build_utils.target import parse_target
from skia_build_utils.utils import ToolRunner

GENERATED = """\
#[repr(i32)]
pub enum SkPaint_Cap {
    kButt_Cap = 0,
    kRound_Cap = 1,
}
impl SkPaint_Cap {
    pub const kDefault_Cap: SkPaint_Cap = SkPaint_Cap::kButt_Cap;
}
pub enum SkOther {
    kKeep = 0,
}
"""


def request(tmp_path: pathlib.Path, triple: str = "x86_64-unknown-linux-gnu") -> BindingRequest:
    return BindingRequest(
        headers=[tmp_path / "bindings.cpp"],
        surface=default_surface(),
        definitions=[("SK_GL", None), ("X", "1")],
        engine=default_engine(),
        target=parse_target(triple),
        include_dirs=[pathlib.Path("skia")],
        clang_args=["--target=x86_64-linux-gnu"],
        work_dir=tmp_path,
    )


def test_apply_enum_rewrites() -> None:
    result = apply_enum_rewrites(GENERATED, default_engine())
    assert "    Butt = 0," in result
    assert "    Round = 1," in result
    assert "pub const Default: SkPaint_Cap = SkPaint_Cap::Butt;" in result
    assert "kKeep" in result


def test_apply_enum_rewrites_rejects_mismatching_variant() -> None:
    source = "pub enum Color {\n    Red = 0,\n}\n"
    with pytest.raises(EnumRewriteError):
        apply_enum_rewrites(source, EnumRewriteEngine([("Color", k_xxx)]))


def test_apply_enum_rewrites_without_rules_is_identity() -> None:
    assert apply_enum_rewrites(GENERATED, EnumRewriteEngine([("Unused", k_xxx_name)])) == GENERATED


def test_windows_options(tmp_path: pathlib.Path) -> None:
    options = bindgen_options(request(tmp_path, "i686-pc-windows-msvc"))
    assert "functions,types,vars,methods,constructors" in options
    assert options[options.index("--rust-target") + 1] == "nightly"
    assert "--generate" not in bindgen_options(request(tmp_path))


def test_clang_arguments(tmp_path: pathlib.Path) -> None:
    assert clang_arguments(request(tmp_path)) == [
        "-std=c++17", "-x", "c++", "-Iskia", "-DSK_GL", "-DX=1", "--target=x86_64-linux-gnu",
    ]


def test_generator_renames_output(tmp_path: pathlib.Path, runner) -> None:
    def write_output(cmd):
        output = pathlib.Path(cmd[cmd.index("-o") + 1])
        output.write_text(GENERATED)

    runner.on("bindgen", write_output)
    source = BindgenGenerator(runner).generate(request(tmp_path))
    assert "Butt = 0" in source
    assert (tmp_path / "bindings-wrapper.hpp").read_text().startswith("#include ")
    cmd = runner.calls[0]
    assert cmd[cmd.index("--") + 1] == "-std=c++17"


def test_generator_failure_raises(tmp_path: pathlib.Path, runner) -> None:
    runner.fail("bindgen", 2)
    with pytest.raises(ToolFailedError) as excinfo:
        BindgenGenerator(runner).generate(request(tmp_path))
    assert excinfo.value.returncode == 2


def test_missing_generator_is_a_prerequisite_error(tmp_path: pathlib.Path) -> None:
    generator = BindgenGenerator(ToolRunner(), executable="bindgen-not-installed")
    with pytest.raises(PrerequisiteError) as excinfo:
        generator.generate(request(tmp_path))
    assert excinfo.value.tool == "bindgen-not-installed"
    assert not (tmp_path / "bindings.unprocessed.rs").exists()
