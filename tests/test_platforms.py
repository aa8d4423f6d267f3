"""Tests for platform strategy resolution and contributions."""

from __future__ import annotations

import pytest

from skia_build_utils.arguments import GnArgsBuilder
from skia_build_utils.features import FeatureConfiguration
from skia_build_utils.gn_args import synthesize
from skia_build_utils.platforms import (
    AndroidStrategy,
    GenericStrategy,
    IosStrategy,
    LinuxMuslStrategy,
    MacOsStrategy,
    WasmStrategy,
    WindowsMsvcStrategy,
    WindowsStrategy,
    deployment_target_6,
    resolve_platform,
)
from skia_build_utils.target import parse_target


@pytest.mark.parametrize(
    "triple, strategy",
    [
        ("wasm32-unknown-emscripten", WasmStrategy),
        ("aarch64-linux-android", AndroidStrategy),
        ("armv7-linux-androideabi", AndroidStrategy),
        ("x86_64-pc-windows-gnu", WindowsStrategy),
        ("x86_64-apple-darwin", MacOsStrategy),
        ("x86_64-unknown-linux-musl", LinuxMuslStrategy),
        ("aarch64-apple-ios", IosStrategy),
        ("x86_64-unknown-linux-gnu", GenericStrategy),
        ("sparc64-unknown-netbsd", GenericStrategy),
    ],
)
def test_resolve_platform(triple: str, strategy: type) -> None:
    assert type(resolve_platform(parse_target(triple))) is strategy


@pytest.mark.parametrize("host_is_target_os", [True, False])
def test_android_and_wasm_resolve_regardless_of_host(host_is_target_os: bool) -> None:
    android = parse_target("aarch64-linux-android", host_is_target_os)
    wasm = parse_target("wasm32-unknown-emscripten", host_is_target_os)
    assert isinstance(resolve_platform(android), AndroidStrategy)
    assert isinstance(resolve_platform(wasm), WasmStrategy)


def test_msvc_triple_selects_native_toolchain_only_on_windows_host() -> None:
    on_windows = parse_target("x86_64-pc-windows-msvc", host_is_target_os=True)
    elsewhere = parse_target("x86_64-pc-windows-msvc", host_is_target_os=False)
    assert type(resolve_platform(on_windows)) is WindowsMsvcStrategy
    assert type(resolve_platform(elsewhere)) is WindowsStrategy


def contribute(triple: str, env=None, host_is_target_os: bool = False, **features) -> GnArgsBuilder:
    target = parse_target(triple, host_is_target_os)
    builder = GnArgsBuilder(target, env or {})
    resolve_platform(target).contribute(builder, FeatureConfiguration(**features))
    return builder


def test_msvc_runtime_linkage_flag() -> None:
    assert "/MD" in contribute("x86_64-pc-windows-msvc", host_is_target_os=True).cflags
    builder = contribute("x86_64-pc-windows-msvc", host_is_target_os=True, static_crt=True)
    assert "/MT" in builder.cflags
    assert "/MD" not in builder.cflags


def test_msvc_toolchain_paths() -> None:
    env = {"VCINSTALLDIR": "C:\\VS\\VC\\\\", "LLVM_HOME": "D:/LLVM"}
    builder = contribute("x86_64-pc-windows-msvc", env, host_is_target_os=True)
    assert builder.args["win_vc"] == '"C:\\VS\\VC"'
    assert builder.args["clang_win"] == '"D:/LLVM"'
    assert builder.args["target_cpu"] == '"x64"'


def test_msvc_i686_has_no_target_cpu() -> None:
    assert "target_cpu" not in contribute("i686-pc-windows-msvc", host_is_target_os=True).args


def test_generic_windows_sets_target_os() -> None:
    builder = contribute("x86_64-pc-windows-msvc")
    assert builder.args["target_os"] == '"win"'
    assert builder.args["target_cpu"] == '"x64"'


def test_android_contribution() -> None:
    builder = contribute("x86_64-linux-android", {"ANDROID_NDK": "/ndk"})
    assert builder.args["ndk"] == '"/ndk"'
    assert builder.args["ndk_api"] == "26"
    assert builder.args["skia_enable_fontmgr_android"] == "true"
    assert "-m64" in builder.clang_args
    assert "--sysroot=/ndk/sysroot" in builder.clang_args
    assert builder.compiler_target == "x86_64-linux-android"


def test_wasm_contribution() -> None:
    builder = contribute("wasm32-unknown-emscripten", {"EMSDK": "/emsdk"}, gl=True)
    assert builder.args["cc"] == '"emcc"'
    assert builder.args["skia_use_webgl"] == "true"
    assert builder.args["skia_enable_fontmgr_custom_empty"] == "true"
    assert "-isystem/emsdk/upstream/emscripten/system/include" in builder.clang_args


def test_macos_deployment_target() -> None:
    builder = contribute("aarch64-apple-darwin", {"MACOSX_DEPLOYMENT_TARGET": "10.16"})
    assert "-D__MAC_OS_X_VERSION_MIN_REQUIRED=101600" in builder.cflags
    assert "-D__MAC_OS_X_VERSION_MAX_ALLOWED=101600" in builder.cflags
    assert builder.args["target_os"] == '"mac"'
    assert builder.compiler_target is None


def test_deployment_target_6() -> None:
    assert deployment_target_6("10.16") == "101600"
    assert deployment_target_6("11") == "110000"


def test_ios_m1_simulator() -> None:
    builder = contribute("aarch64-apple-ios-sim")
    assert builder.args["ios_use_simulator"] == "true"
    assert builder.compiler_target == "arm64-apple-ios14.0-simulator"
    assert "-mios-simulator-version-min=14.0" in builder.cflags


def test_ios_device() -> None:
    builder = contribute("aarch64-apple-ios")
    assert builder.args["ios_min_target"] == '"12.0"'
    assert "ios_use_simulator" not in builder.args
    assert "-miphoneos-version-min=12.0" in builder.cflags


def test_musl_compiler_target() -> None:
    builder = contribute("x86_64-unknown-linux-musl")
    assert builder.args["target_os"] == '"linux"'
    assert builder.compiler_target == "x86_64-alpine-linux-musl"


def test_generic_native_build_contributes_nothing() -> None:
    builder = contribute("x86_64-unknown-linux-gnu", host_is_target_os=True)
    assert len(builder.args) == 0
    assert builder.compiler_target is None


def test_generic_cross_build_sets_target() -> None:
    builder = contribute("aarch64-unknown-linux-gnu")
    assert builder.args["target_os"] == '"linux"'
    assert builder.args["target_cpu"] == '"arm64"'
    assert builder.compiler_target == "aarch64-linux-gnu"


def test_link_libraries() -> None:
    features = FeatureConfiguration(gl=True, egl=True, d3d=True)
    linux = resolve_platform(parse_target("x86_64-unknown-linux-gnu")).link_libraries(features)
    assert linux == ["stdc++", "fontconfig", "freetype", "EGL"]
    windows = resolve_platform(parse_target("x86_64-pc-windows-msvc")).link_libraries(features)
    assert windows[-3:] == ["d3d12", "dxgi", "d3dcompiler"]
    android = resolve_platform(parse_target("aarch64-linux-android")).link_libraries(features)
    assert android == ["log", "android", "c++_static", "c++abi", "EGL", "GLESv2"]


@pytest.mark.parametrize("triple", ["aarch64-linux-android", "wasm32-unknown-emscripten"])
def test_freetype_is_left_to_the_feature_arguments(triple: str) -> None:
    assert "skia_use_system_freetype2" not in contribute(triple).args
    args = dict(synthesize(FeatureConfiguration(), parse_target(triple)).args)
    assert args["skia_use_freetype"] == "true"
    assert args["skia_use_system_freetype2"] == "false"
