#!/usr/bin/env python3
"""
Platform triple parsing.

A target is described by a triple of the form
`architecture-vendor-system[-abi]`, for example `aarch64-linux-android` or
`x86_64-pc-windows-msvc`.
"""

from dataclasses import dataclass
from typing import Mapping, Optional

from .config import host_system_name, OS_SYSTEM
from .errors import TargetParseError


def clang_target_arch(arch: str) -> str:
    """Map a triple architecture to the CPU name GN and clang expect."""
    if arch == "aarch64":
        return "arm64"
    if arch == "x86_64":
        return "x64"
    if arch in ("i386", "i686"):
        return "x86"
    if arch.startswith("arm"):
        return "arm"
    return arch


@dataclass(frozen=True)
class TargetDescriptor:
    architecture: str
    vendor: str
    system: str
    abi: Optional[str] = None
    # True if we are building on the operating system of the target.
    host_is_target_os: bool = False

    def __str__(self) -> str:
        triple = f"{self.architecture}-{self.vendor}-{self.system}"
        return f"{triple}-{self.abi}" if self.abi else triple

    @property
    def is_windows(self) -> bool:
        return self.system == "windows"

    @property
    def builds_with_msvc(self) -> bool:
        return self.abi == "msvc"

    @property
    def is_msvc_on_windows(self) -> bool:
        return self.is_windows and self.builds_with_msvc and self.host_is_target_os

    @property
    def is_android(self) -> bool:
        return self.vendor == "linux" and self.system in ("android", "androideabi")

    @property
    def is_wasm(self) -> bool:
        return (self.architecture, self.vendor, self.system) == ("wasm32", "unknown", "emscripten")

    @property
    def is_macos(self) -> bool:
        return self.vendor == "apple" and self.system == "darwin"

    @property
    def is_ios(self) -> bool:
        return self.vendor == "apple" and self.system == "ios"

    @property
    def is_linux_musl(self) -> bool:
        return self.vendor == "unknown" and self.system == "linux" and self.abi == "musl"

    def library_to_filename(self, name: str) -> str:
        """Convert a library name to the file name of its static archive."""
        return f"{name}.lib" if self.is_windows else f"lib{name}.a"

    def include_path_component(self) -> str:
        """A `-` separated path component without the vendor, used for Linux include paths."""
        abi = f"-{self.abi}" if self.abi else ""
        return f"{self.architecture}-{self.system}{abi}"


def parse_target(triple: str, host_is_target_os: bool = False) -> TargetDescriptor:
    """
    Parse a platform triple.

    Args:
        triple: The triple, with 2, 3 or 4 `-` separated parts
        host_is_target_os: Whether the build runs on the target's operating system

    Returns:
        The TargetDescriptor

    Raises:
        TargetParseError: If the triple has fewer than 2 parts
    """
    parts = triple.strip().split("-")
    if len(parts) >= 3 and all(parts[:3]):
        architecture, vendor, system = parts[:3]
        abi = parts[3] if len(parts) > 3 else None
    elif len(parts) == 2 and all(parts):
        architecture, vendor, system, abi = parts[0], "", parts[1], None
    else:
        raise TargetParseError(f"Failed to parse target '{triple}'")

    # Skia's build does not know the RISC-V extension suffix.
    if architecture == "riscv64gc":
        architecture = "riscv64"

    return TargetDescriptor(architecture, vendor, system, abi, host_is_target_os)


def target_from_environment(
    env: Mapping[str, str], host_system: str = OS_SYSTEM
) -> TargetDescriptor:
    """
    Resolve the target of the current build.

    A `--target=` option already present in the C compiler command line is
    considered the most specific, it may include a vendor infix the TARGET
    variable lacks.
    """
    triple = None
    cc = env.get("CLANGCC") or env.get("CC") or ""
    marker = "--target="
    if marker in cc:
        triple = cc[cc.index(marker) + len(marker):].split(" ", 1)[0]
    if not triple:
        triple = env.get("TARGET")
    if not triple:
        raise TargetParseError("No target triple, set TARGET or pass one explicitly")
    return parse_target_for_host(triple, host_system)


def parse_target_for_host(triple: str, host_system: str = OS_SYSTEM) -> TargetDescriptor:
    """Parse a triple and compare its operating system with the host's."""
    target = parse_target(triple)
    return TargetDescriptor(
        target.architecture,
        target.vendor,
        target.system,
        target.abi,
        host_is_target_os=host_system_name(host_system) == target_os_family(target),
    )


def target_os_family(target: TargetDescriptor) -> str:
    """The host operating system name a target runs on."""
    if target.vendor == "apple" and target.system == "darwin":
        return "darwin"
    if target.system in ("android", "androideabi"):
        return "android"
    return target.system
