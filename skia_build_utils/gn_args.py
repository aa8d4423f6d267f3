#!/usr/bin/env python3
"""
GN build argument synthesis.

`synthesize` turns a feature configuration and a target into the GN
arguments, Skia compiler flags and binding generator arguments of a
build. It does not touch the process environment or the file system:
everything environment dependent is read from the `env` mapping that is
passed in, so identical inputs always render identical arguments.
"""

from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Tuple

from .arguments import ArgumentSet, GnArgsBuilder, gn_list, no, quote, yes, yes_if
from .config import compiler_commands, sysroot
from .features import FeatureConfiguration
from .platforms import WindowsMsvcStrategy, resolve_platform
from .target import TargetDescriptor

# Vendored third party libraries Skia can also take from the system.
SYSTEM_LIBRARY_SWITCHES = (
    "skia_use_system_expat",
    "skia_use_system_icu",
    "skia_use_system_libjpeg_turbo",
    "skia_use_system_libpng",
    "skia_use_system_libwebp",
    "skia_use_system_zlib",
    "skia_use_system_harfbuzz",
    "skia_use_system_freetype2",
)

# Debug and tooling subsystems switched off to keep the build tractable.
SCOPE_REDUCTION = (
    "skia_enable_spirv_validation",
    "skia_enable_tools",
    "skia_enable_vulkan_debug_layers",
    "skia_use_libheif",
    "skia_use_lua",
)


@dataclass(frozen=True)
class BuildArguments:
    """The synthesized configuration of a Skia build."""

    args: Tuple[Tuple[str, str], ...]
    cflags: Tuple[str, ...] = ()
    clang_args: Tuple[str, ...] = ()
    compiler_target: Optional[str] = None
    platform: str = "generic"
    features: FeatureConfiguration = field(default_factory=FeatureConfiguration)

    def gn_args(self) -> List[Tuple[str, str]]:
        """The GN arguments including `extra_cflags`."""
        args = list(self.args)
        cflags = list(self.cflags)
        if self.compiler_target:
            cflags.append(f"--target={self.compiler_target}")
        if cflags:
            args.append(("extra_cflags", gn_list(cflags)))
        return args

    def render(self) -> str:
        """The `--args` value for `gn gen`."""
        return ArgumentSet(self.gn_args()).render()

    def get(self, key: str) -> Optional[str]:
        return dict(self.gn_args()).get(key)


########################################################################
# Feature Groups
########################################################################


def _baseline(builder: GnArgsBuilder, features: FeatureConfiguration) -> None:
    builder.arg("is_official_build", yes_if(features.release))
    builder.arg("is_debug", yes_if(not features.release))
    # Expat is always compiled, but never taken from the system.
    builder.arg("skia_use_expat", yes())
    for switch in SYSTEM_LIBRARY_SWITCHES:
        builder.arg(switch, no())

    compilers = compiler_commands(builder.env)
    builder.arg("cc", quote(compilers['CC']))
    builder.arg("cxx", quote(compilers['CXX']))


def _modules(builder: GnArgsBuilder, features: FeatureConfiguration) -> None:
    builder.arg("skia_enable_svg", yes_if(features.svg))
    # PDF gets switched off for some targets by default, but is always needed.
    builder.arg("skia_enable_pdf", yes())
    builder.arg("skia_use_xps", no())
    builder.arg("skia_use_dng_sdk", yes_if(features.dng))
    builder.arg("skia_use_libwebp_encode", yes_if(features.webp_encode))
    builder.arg("skia_use_libwebp_decode", yes_if(features.webp_decode))
    builder.arg("skia_enable_skottie", yes_if(features.animation or features.all_libraries))
    builder.arg("skia_enable_particles", yes_if(features.particles or features.all_libraries))


def _gpu_backends(builder: GnArgsBuilder, features: FeatureConfiguration) -> None:
    builder.arg("skia_enable_gpu", yes_if(features.gpu))
    builder.arg("skia_use_gl", yes_if(features.gl))
    builder.arg("skia_use_egl", yes_if(features.egl))
    builder.arg("skia_use_x11", yes_if(features.x11))
    if features.vulkan:
        builder.arg("skia_use_vulkan", yes())
        builder.arg("skia_enable_spirv_validation", no())
    if features.metal:
        builder.arg("skia_use_metal", yes())
    if features.d3d:
        builder.arg("skia_use_direct3d", yes())


def _scope_reduction(builder: GnArgsBuilder, features: FeatureConfiguration) -> None:
    if features.release:
        for switch in SCOPE_REDUCTION:
            builder.arg(switch, no())


def _text_layout(builder: GnArgsBuilder, features: FeatureConfiguration) -> None:
    if features.text_layout:
        # The bundled ICU and HarfBuzz replace the system's copies.
        builder.arg("skia_enable_skshaper", yes()) \
            .arg("skia_use_icu", yes()) \
            .arg("skia_use_system_icu", no()) \
            .arg("skia_use_harfbuzz", yes()) \
            .arg("skia_pdf_subset_harfbuzz", yes()) \
            .arg("skia_use_system_harfbuzz", no()) \
            .arg("skia_use_sfntly", no()) \
            .arg("skia_enable_skparagraph", yes())
    else:
        builder.arg("skia_use_icu", no()) \
            .arg("skia_use_harfbuzz", no())


def _freetype(builder: GnArgsBuilder, features: FeatureConfiguration, strategy) -> None:
    use_freetype = strategy.uses_freetype or features.embed_freetype
    builder.arg("skia_use_freetype", yes_if(use_freetype))
    if not use_freetype:
        return
    if features.embed_freetype or not strategy.system_freetype:
        builder.arg("skia_use_system_freetype2", no())
        return

    # third_party/freetype2/BUILD.gn hard-codes /usr/include/freetype2. A
    # leading `=` resolves the include path inside the sysroot, the plain
    # one is the fallback without a sysroot.
    builder.arg("skia_use_system_freetype2", yes())
    builder.arg("skia_system_freetype2_include_path", quote("/does/not/exist"))
    builder.cflag("-I=/usr/include/freetype2")
    builder.cflag("-I/usr/include/freetype2")


def _optimization(builder: GnArgsBuilder, features: FeatureConfiguration) -> None:
    # `-O` is not supported when targeting Windows.
    if features.opt_level is not None and not builder.target.is_windows:
        builder.cflag(f"-O{features.opt_level}")


def _keep_inline_functions(builder: GnArgsBuilder, features: FeatureConfiguration, strategy) -> None:
    # This also disables inlining, accepted to keep the symbols linkable.
    if features.keep_inline_functions:
        if isinstance(strategy, WindowsMsvcStrategy):
            builder.cflag("/Ob0")
        else:
            builder.cflag("-fno-inline-functions")


########################################################################
# Synthesis
########################################################################


def synthesize(
    features: FeatureConfiguration,
    target: TargetDescriptor,
    env: Optional[Mapping[str, str]] = None,
) -> BuildArguments:
    """
    Synthesize the build arguments of a target.

    Args:
        features: The requested features
        target: The build target
        env: Environment inputs (compilers, SDK locations), empty by default

    Returns:
        The BuildArguments
    """
    features = features.for_target(target)
    strategy = resolve_platform(target)
    builder = GnArgsBuilder(target, env)

    _baseline(builder, features)
    _modules(builder, features)
    _gpu_backends(builder, features)
    _scope_reduction(builder, features)
    _text_layout(builder, features)
    _freetype(builder, features, strategy)
    _optimization(builder, features)

    root = sysroot(builder.env)
    if root:
        builder.cflag(f"--sysroot={root}")

    # Platforms override feature defaults, never the other way around.
    strategy.contribute(builder, features)

    if root:
        builder.clang_arg(f"{builder.sysroot_prefix}{root}")

    _keep_inline_functions(builder, features, strategy)

    return BuildArguments(
        args=tuple(builder.args.items()),
        cflags=tuple(builder.cflags),
        clang_args=tuple(builder.clang_args),
        compiler_target=builder.compiler_target,
        platform=strategy.name,
        features=features,
    )
