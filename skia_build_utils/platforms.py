#!/usr/bin/env python3
"""
Platform strategies.

Each strategy contributes the target specific GN arguments, Skia compiler
flags and binding generator arguments, and knows the system libraries a
target links with. `resolve_platform` picks exactly one strategy for a
target from an ordered table; the last row always matches.
"""

from typing import Callable, List, Tuple, Type

from .arguments import GnArgsBuilder, no, quote, yes, yes_if
from .config import ANDROID_API_LEVEL, DEFAULT_LLVM_HOME, ENV_ANDROID_NDK, ENV_EMSDK, \
    ENV_LLVM_HOME, ENV_MACOS_DEPLOYMENT_TARGET, ENV_VC_INSTALL_DIR, env_var
from .features import FeatureConfiguration
from .target import TargetDescriptor, clang_target_arch, target_os_family


class PlatformStrategy:
    """Base strategy; contributes nothing and links nothing."""

    name = "generic"
    # Skia is built with FreeType for font handling.
    uses_freetype = False
    # Without embedded FreeType, link against the system's copy.
    system_freetype = False

    def __init__(self, target: TargetDescriptor):
        self.target = target

    def contribute(self, builder: GnArgsBuilder, features: FeatureConfiguration) -> None:
        pass

    def link_libraries(self, features: FeatureConfiguration) -> List[str]:
        return []

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.target})"


########################################################################
# WebAssembly
########################################################################

EMSCRIPTEN_SYSTEM_INCLUDES = (
    "lib/libc/musl/arch/emscripten",
    "lib/libc/musl/arch/generic",
    "lib/libcxx/include",
    "lib/libc/musl/include",
    "include",
)


class WasmStrategy(PlatformStrategy):
    name = "wasm"
    uses_freetype = True

    def contribute(self, builder, features):
        builder.arg("cc", quote("emcc")) \
            .arg("cxx", quote("em++")) \
            .arg("ar", quote("emar")) \
            .arg("skia_gl_standard", quote("webgl")) \
            .arg("skia_use_webgl", yes_if(features.gpu)) \
            .arg("target_cpu", quote("wasm"))

        # The embedded font manager depends on the undefined SK_EMBEDDED_FONTS,
        # the empty one still supports typeface creation.
        builder.arg("skia_enable_fontmgr_custom_embedded", no()) \
            .arg("skia_enable_fontmgr_custom_empty", yes())

        builder.clang_arg("-nobuiltininc")
        # Some types go missing with hidden visibility.
        builder.clang_arg("-fvisibility=default")

        emsdk = env_var(builder.env, ENV_EMSDK)
        if emsdk:
            for path in EMSCRIPTEN_SYSTEM_INCLUDES:
                builder.clang_arg(f"-isystem{emsdk}/upstream/emscripten/system/{path}")


########################################################################
# Android
########################################################################


class AndroidStrategy(PlatformStrategy):
    name = "android"
    uses_freetype = True

    def contribute(self, builder, features):
        ndk = env_var(builder.env, ENV_ANDROID_NDK)
        arch = self.target.architecture

        if ndk:
            builder.arg("ndk", quote(ndk))
        builder.arg("ndk_api", ANDROID_API_LEVEL) \
            .arg("target_cpu", quote(clang_target_arch(arch))) \
            .arg("skia_enable_fontmgr_android", yes())

        if arch == "i686":
            builder.clang_arg("-m32")
        elif arch == "x86_64":
            builder.clang_arg("-m64")

        if ndk:
            # Mirrors what the generated skia.ninja does.
            builder.clang_arg(f"--sysroot={ndk}/sysroot")
            builder.clang_arg(f"-I{ndk}/sources/android/cpufeatures")
            builder.clang_arg(f"-isystem{ndk}/sources/cxx-stl/llvm-libc++/include")

        builder.set_target(str(self.target))
        builder.clang_arg(f"--target={self.target}")

    def link_libraries(self, features):
        libs = ["log", "android", "c++_static", "c++abi"]
        if features.gl:
            libs.extend(["EGL", "GLESv2"])
        return libs


########################################################################
# Windows
########################################################################


def windows_link_libraries(features: FeatureConfiguration) -> List[str]:
    libs = ["usp10", "ole32", "user32", "gdi32", "fontsub"]
    if features.gl:
        libs.append("opengl32")
    if features.d3d:
        libs.extend(["d3d12", "dxgi", "d3dcompiler"])
    return libs


class WindowsMsvcStrategy(PlatformStrategy):
    """Windows with the MSVC ABI, built on Windows itself."""

    name = "windows-msvc"

    def contribute(self, builder, features):
        win_vc = env_var(builder.env, ENV_VC_INSTALL_DIR)
        if win_vc:
            # vcvars.bat may leave a trailing backslash, which would escape
            # the closing quote.
            builder.arg("win_vc", quote(win_vc.rstrip("\\")))

        llvm_home = env_var(builder.env, ENV_LLVM_HOME) or DEFAULT_LLVM_HOME
        builder.arg("clang_win", quote(llvm_home))

        # A target_cpu of x86 breaks i686 builds with unquoted "C:/Program Files".
        arch = self.target.architecture
        if arch != "i686":
            builder.arg("target_cpu", quote(clang_target_arch(arch)))

        # The C runtime linkage must match the one of the final binary.
        builder.cflag("/MT" if features.static_crt else "/MD")

    def link_libraries(self, features):
        return windows_link_libraries(features)


class WindowsStrategy(PlatformStrategy):
    name = "windows"

    def contribute(self, builder, features):
        builder.target_os_and_default_cpu("win")

    def link_libraries(self, features):
        return windows_link_libraries(features)


########################################################################
# Apple
########################################################################


def deployment_target_6(version: str) -> str:
    """Six digit deployment target, `10.16` -> `101600`."""
    return version.replace(".", "").ljust(6, "0")


class MacOsStrategy(PlatformStrategy):
    name = "macos"

    def contribute(self, builder, features):
        # Skia picks a --target for the current macOS version itself.
        builder.set_target(None)
        builder.target_os_and_default_cpu("mac")
        builder.sysroot_prefix = "-isysroot"

        deployment_target = env_var(builder.env, ENV_MACOS_DEPLOYMENT_TARGET)
        if deployment_target:
            version = deployment_target_6(deployment_target)
            # Both are needed for GR_METAL_SDK_VERSION to be correct.
            flags = [
                f"-D__MAC_OS_X_VERSION_MIN_REQUIRED={version}",
                f"-D__MAC_OS_X_VERSION_MAX_ALLOWED={version}",
            ]
            builder.cflags_from(flags)
            builder.clang_args_from(flags)

    def link_libraries(self, features):
        libs = ["c++", "framework=ApplicationServices"]
        if features.gl:
            libs.append("framework=OpenGL")
        if features.metal:
            libs.extend(["framework=Metal", "framework=MetalKit", "framework=Foundation"])
        return libs


IOS_MIN_VERSION = "12"
IOS_MIN_VERSION_M1 = "14"
IOS_MIN_VERSION_CATALYST = "14"


class IosStrategy(PlatformStrategy):
    name = "ios"

    @property
    def variant(self) -> str:
        arch, abi = self.target.architecture, self.target.abi
        if abi == "macabi":
            return "catalyst"
        if arch == "x86_64":
            return "simulator"
        if arch == "aarch64" and abi == "sim":
            return "m1-simulator"
        return "device"

    @property
    def is_simulator(self) -> bool:
        return self.variant in ("simulator", "m1-simulator")

    def min_version(self) -> str:
        return {
            "m1-simulator": IOS_MIN_VERSION_M1,
            "catalyst": IOS_MIN_VERSION_CATALYST,
        }.get(self.variant, IOS_MIN_VERSION)

    def version_flags(self) -> List[str]:
        version = self.min_version()
        platform_variant = "ios-simulator" if self.is_simulator else "iphoneos"
        # MAX_ALLOWED is ignored without MIN_REQUIRED, which then selects
        # the wrong GR_METAL_SDK_VERSION.
        return [
            f"-m{platform_variant}-version-min={version}.0",
            f"-D__IPHONE_OS_VERSION_MIN_REQUIRED={version}0000",
            f"-D__IPHONE_OS_VERSION_MAX_ALLOWED={version}0000",
        ]

    def contribute(self, builder, features):
        builder.arg("ios_min_target", quote(f"{IOS_MIN_VERSION}.0"))
        builder.target_os_and_default_cpu("ios")
        if self.is_simulator:
            builder.arg("ios_use_simulator", yes())

        flags = self.version_flags()
        builder.cflags_from(flags)
        builder.clang_args_from(flags)
        if self.is_simulator:
            builder.clang_arg("-m64")
        else:
            builder.clang_arg("-arch")
            builder.clang_arg(clang_target_arch(self.target.architecture))

        if self.variant == "m1-simulator":
            builder.set_target(f"arm64-apple-ios{IOS_MIN_VERSION_M1}.0-simulator")

    def link_libraries(self, features):
        libs = [
            "c++",
            "framework=CoreFoundation",
            "framework=CoreGraphics",
            "framework=CoreText",
            "framework=ImageIO",
        ]
        if self.target.abi != "macabi":
            libs.extend(["framework=MobileCoreServices", "framework=UIKit"])
        if features.metal:
            libs.append("framework=Metal")
        return libs


########################################################################
# Linux and everything else
########################################################################


def linux_link_libraries(features: FeatureConfiguration) -> List[str]:
    libs = ["stdc++", "fontconfig", "freetype"]
    if features.gl:
        if features.egl:
            libs.append("EGL")
        if features.x11:
            libs.append("GL")
        if features.wayland:
            libs.extend(["wayland-egl", "GLESv2"])
    return libs


class LinuxMuslStrategy(PlatformStrategy):
    name = "linux-musl"
    uses_freetype = True
    system_freetype = True

    def contribute(self, builder, features):
        builder.target_os_and_default_cpu("linux")
        builder.set_target(f"{self.target.architecture}-alpine-linux-musl")

    def link_libraries(self, features):
        return linux_link_libraries(features)


class GenericStrategy(PlatformStrategy):
    """Fallback for Linux and any target without a dedicated strategy."""

    name = "generic"

    @property
    def is_linux(self) -> bool:
        return self.target.system == "linux"

    @property
    def uses_freetype(self) -> bool:
        return not (self.target.is_windows or self.target.vendor == "apple")

    @property
    def system_freetype(self) -> bool:
        return self.is_linux

    def contribute(self, builder, features):
        if self.target.host_is_target_os:
            return
        builder.target_os_and_default_cpu(target_os_family(self.target))
        if self.is_linux:
            # Lets clang++ locate the cross compilation C++ includes.
            component = self.target.include_path_component()
            builder.set_target(component)
            builder.clang_arg(f"-I/usr/{component}/include")
        else:
            builder.set_target(str(self.target))

    def link_libraries(self, features):
        return linux_link_libraries(features) if self.is_linux else []


########################################################################
# Resolution
########################################################################

PLATFORM_TABLE: Tuple[Tuple[Callable[[TargetDescriptor], bool], Type[PlatformStrategy]], ...] = (
    (lambda t: t.is_wasm, WasmStrategy),
    (lambda t: t.is_android, AndroidStrategy),
    (lambda t: t.is_msvc_on_windows, WindowsMsvcStrategy),
    (lambda t: t.is_windows, WindowsStrategy),
    (lambda t: t.is_macos, MacOsStrategy),
    (lambda t: t.is_linux_musl, LinuxMuslStrategy),
    (lambda t: t.is_ios, IosStrategy),
    (lambda t: True, GenericStrategy),
)


def resolve_platform(target: TargetDescriptor) -> PlatformStrategy:
    """Return the strategy of the first table row matching the target."""
    for matches, strategy in PLATFORM_TABLE:
        if matches(target):
            return strategy(target)
    raise AssertionError("the generic platform strategy always matches")
