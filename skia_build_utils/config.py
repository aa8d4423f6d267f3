#!/usr/bin/env python3
"""
Configuration module for the Skia bindings build system
Manages paths, pinned sources, tool names and environment lookups
"""

import os
import platform
from pathlib import Path
from typing import Dict, Mapping, Optional


########################################################################
# System Information
########################################################################

OS_SYSTEM = platform.system()


def host_system_name(system: str = OS_SYSTEM) -> str:
    """Map `platform.system()` to the system part of a platform triple."""
    return {
        "Windows": "windows",
        "Darwin": "darwin",
        "Linux": "linux",
        "FreeBSD": "freebsd",
    }.get(system, system.lower())


########################################################################
# Path Configuration
########################################################################

SKIA_DIR_NAME = "skia"
DEPOT_TOOLS_DIR_NAME = "depot_tools"
BUILD_DIR_NAME = "build"
SKIA_OUTPUT_DIR_NAME = "skia"
DEFINES_FILE_NAME = "skia-defines.txt"
BINDINGS_FILE_NAME = "bindings.rs"


def find_project_root(start_path: Path) -> Path:
    """
    Find project root directory by looking for the binding sources.

    The project root is identified by the presence of `src/bindings.cpp`.
    Falls back to the start path when nothing is found.
    """
    current = start_path.resolve()
    for parent in [current] + list(current.parents):
        if (parent / "src" / "bindings.cpp").exists():
            return parent
    return current


def initialize_paths(project_root: Path, build_dir: Optional[Path] = None) -> Dict[str, Path]:
    """Initialize all project paths based on the project root"""
    build_dir = build_dir or project_root / BUILD_DIR_NAME
    return {
        'PROJECT_ROOT': project_root,
        'SRC_DIR': project_root / "src",
        'SKIA_DIR': project_root / SKIA_DIR_NAME,
        'DEPOT_TOOLS_DIR': project_root / DEPOT_TOOLS_DIR_NAME,
        'BUILD_DIR': build_dir,
        'OUTPUT_DIR': build_dir / SKIA_OUTPUT_DIR_NAME,
        'BINDINGS_FILE': project_root / "src" / BINDINGS_FILE_NAME,
    }


########################################################################
# Source Repository
########################################################################

REPOSITORY_CLONE_URL = "https://github.com/rust-skia/rust-skia.git"
REPOSITORY_DIRECTORY = "rust-skia"
REPOSITORY_BINDINGS_DIR = "skia-bindings"

# Revision of the repository the sources are taken from when no local
# checkout exists.
SOURCE_REVISION = os.environ.get("SKIA_SOURCE_REVISION", "master")


########################################################################
# Prebuilt Binaries
########################################################################

PACKAGE_VERSION = "0.1.0"
BINARIES_ARCHIVE_NAME = "skia-binaries"
BINARIES_URL_DEFAULT = (
    "https://github.com/rust-skia/skia-binaries/releases/download/{tag}/skia-binaries-{key}.tar.gz"
)
# Length of the repository hash in binaries keys.
HALF_HASH_LENGTH = 20


########################################################################
# External Tools
########################################################################

PYTHON_CANDIDATES = ("python", "python3")
GIT_SYNC_DEPS_SCRIPT = "skia/tools/git-sync-deps"
GIT_SYNC_DEPS_ENV = {
    # An explicit path keeps MinGW Python on MSys from resolving an absolute one.
    "GIT_SYNC_DEPS_PATH": "skia/DEPS",
    "GIT_SYNC_DEPS_SKIP_EMSDK": "1",
}

NATIVE_CXX = "clang++"
NATIVE_AR = "ar"


def gn_default_path(skia_dir: Path) -> Path:
    """Location of the GN binary inside a Skia checkout"""
    gn = skia_dir / "bin" / "gn"
    return gn.with_suffix(".exe") if OS_SYSTEM == "Windows" else gn


def ninja_default_path(depot_tools_dir: Path) -> Path:
    """Location of the Ninja binary inside depot_tools"""
    return depot_tools_dir / ("ninja.exe" if OS_SYSTEM == "Windows" else "ninja")


########################################################################
# Environment
########################################################################

ENV_BUILD_DEFINES = "SKIA_BUILD_DEFINES"
ENV_ANDROID_NDK = "ANDROID_NDK"
ENV_LLVM_HOME = "LLVM_HOME"
ENV_VC_INSTALL_DIR = "VCINSTALLDIR"
ENV_MACOS_DEPLOYMENT_TARGET = "MACOSX_DEPLOYMENT_TARGET"
ENV_EMSDK = "EMSDK"
ENV_SYSROOT = ("SDKTARGETSYSROOT", "SDKROOT")
ENV_BINARIES_URL = "SKIA_BINARIES_URL"
ENV_BINARIES_TAG = "SKIA_BINARIES_TAG"
ENV_REPOSITORY_HASH = "SKIA_REPOSITORY_HASH"
ENV_FORCE_BINARIES_DOWNLOAD = "FORCE_SKIA_BINARIES_DOWNLOAD"
ENV_FORCE_BUILD = "FORCE_SKIA_BUILD"

DEFAULT_LLVM_HOME = "C:/Program Files/LLVM"
ANDROID_API_LEVEL = "26"


def env_var(env: Mapping[str, str], *names: str) -> Optional[str]:
    """Return the value of the first of `names` that is set and not empty."""
    for name in names:
        value = env.get(name)
        if value:
            return value
    return None


def compiler_commands(env: Mapping[str, str]) -> Dict[str, str]:
    """
    Resolve the C and C++ compilers.

    Yocto SDKs set CLANGCC/CLANGCXX, which are preferred over CC/CXX because
    the latter likely refer to gcc there.
    """
    return {
        'CC': env_var(env, "CLANGCC", "CC") or "clang",
        'CXX': env_var(env, "CLANGCXX", "CXX") or NATIVE_CXX,
    }


def sysroot(env: Mapping[str, str]) -> Optional[str]:
    """Target sysroot from Yocto (SDKTARGETSYSROOT) or macOS (SDKROOT)"""
    return env_var(env, *ENV_SYSROOT)
