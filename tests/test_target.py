"""Tests for platform triple parsing."""

from __future__ import annotations

import pytest

from skia_build_utils.errors import TargetParseError
from skia_build_utils.target import (
    TargetDescriptor,
    clang_target_arch,
    parse_target,
    parse_target_for_host,
    target_from_environment,
)


def test_parse_four_part_triple() -> None:
    assert parse_target("aarch64-unknown-linux-gnu") == TargetDescriptor(
        "aarch64", "unknown", "linux", "gnu"
    )


def test_parse_three_part_triple() -> None:
    target = parse_target("aarch64-unknown-linux")
    assert target.abi is None
    assert str(target) == "aarch64-unknown-linux"


def test_parse_two_part_triple_has_empty_vendor() -> None:
    target = parse_target("aarch64-linux")
    assert (target.architecture, target.vendor, target.system) == ("aarch64", "", "linux")


def test_parse_garbage_raises() -> None:
    with pytest.raises(TargetParseError):
        parse_target("garbage")


def test_riscv64gc_is_normalized() -> None:
    assert parse_target("riscv64gc-unknown-linux-gnu").architecture == "riscv64"


def test_derived_predicates() -> None:
    assert parse_target("aarch64-linux-android").is_android
    assert parse_target("armv7-linux-androideabi").is_android
    assert parse_target("wasm32-unknown-emscripten").is_wasm
    assert parse_target("x86_64-apple-darwin").is_macos
    assert parse_target("aarch64-apple-ios-sim").is_ios
    assert parse_target("x86_64-unknown-linux-musl").is_linux_musl
    assert not parse_target("x86_64-unknown-linux-gnu").is_linux_musl


def test_msvc_on_windows_depends_on_host() -> None:
    assert parse_target("x86_64-pc-windows-msvc", host_is_target_os=True).is_msvc_on_windows
    assert not parse_target("x86_64-pc-windows-msvc", host_is_target_os=False).is_msvc_on_windows
    assert not parse_target("x86_64-pc-windows-gnu", host_is_target_os=True).is_msvc_on_windows


def test_library_to_filename() -> None:
    assert parse_target("x86_64-pc-windows-msvc").library_to_filename("skia") == "skia.lib"
    assert parse_target("x86_64-unknown-linux-gnu").library_to_filename("skia") == "libskia.a"


def test_include_path_component_skips_vendor() -> None:
    assert parse_target("aarch64-unknown-linux-gnu").include_path_component() == "aarch64-linux-gnu"


@pytest.mark.parametrize(
    "arch, expected",
    [("aarch64", "arm64"), ("x86_64", "x64"), ("i686", "x86"), ("armv7", "arm"), ("riscv64", "riscv64")],
)
def test_clang_target_arch(arch: str, expected: str) -> None:
    assert clang_target_arch(arch) == expected


def test_target_from_environment_prefers_compiler_target() -> None:
    env = {"TARGET": "aarch64-unknown-linux-gnu", "CC": "clang --target=aarch64-poky-linux -O2"}
    target = target_from_environment(env, host_system="Linux")
    assert target.vendor == "poky"
    assert target.host_is_target_os


def test_target_from_environment_requires_a_target() -> None:
    with pytest.raises(TargetParseError):
        target_from_environment({}, host_system="Linux")


def test_parse_target_for_host() -> None:
    assert parse_target_for_host("x86_64-pc-windows-msvc", "Windows").is_msvc_on_windows
    assert not parse_target_for_host("x86_64-pc-windows-msvc", "Linux").host_is_target_os
    assert parse_target_for_host("aarch64-apple-darwin", "Darwin").host_is_target_os
