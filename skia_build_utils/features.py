#!/usr/bin/env python3
"""
Feature configuration: the capability toggles a build is made with.
"""

from dataclasses import dataclass, fields, replace
from typing import Iterable, List, Optional

from .target import TargetDescriptor


# Feature identifiers, also used as parts of prebuilt binary keys.
FEATURE_IDS = {
    "gl": "gl",
    "egl": "egl",
    "x11": "x11",
    "wayland": "wayland",
    "vulkan": "vulkan",
    "metal": "metal",
    "d3d": "d3d",
    "text_layout": "textlayout",
    "svg": "svg",
    "webp_encode": "webpe",
    "webp_decode": "webpd",
    "embed_freetype": "freetype",
}

# Names accepted on the command line, mapped to the field they switch on.
FEATURE_NAMES = {
    "gl": "gl",
    "egl": "egl",
    "x11": "x11",
    "wayland": "wayland",
    "vulkan": "vulkan",
    "metal": "metal",
    "d3d": "d3d",
    "textlayout": "text_layout",
    "svg": "svg",
    "webp": ("webp_encode", "webp_decode"),
    "webp-encode": "webp_encode",
    "webp-decode": "webp_decode",
    "embed-freetype": "embed_freetype",
    "animation": "animation",
    "dng": "dng",
    "particles": "particles",
    "all-libraries": "all_libraries",
}


@dataclass(frozen=True)
class FeatureConfiguration:
    """
    Immutable set of build toggles.

    `release` selects an official (non-debug) Skia build.
    `keep_inline_functions` keeps inline functions as linkable symbols so
    that bindings can call them. `all_libraries` builds every optional
    Skia module.
    """

    gl: bool = False
    # With X11, EGL off uses LibGL (GLX).
    egl: bool = False
    # Wayland requires EGL, GLX does not work there.
    wayland: bool = False
    x11: bool = False
    vulkan: bool = False
    metal: bool = False
    d3d: bool = False
    # Modules skshaper and skparagraph.
    text_layout: bool = False
    svg: bool = False
    webp_encode: bool = False
    webp_decode: bool = False
    embed_freetype: bool = False
    animation: bool = False
    dng: bool = False
    particles: bool = False
    release: bool = True
    keep_inline_functions: bool = True
    all_libraries: bool = False
    static_crt: bool = False
    opt_level: Optional[str] = None

    @property
    def gpu(self) -> bool:
        return self.gl or self.vulkan or self.metal or self.d3d

    def ids(self) -> List[str]:
        """Sorted feature identifiers used to look up prebuilt binaries."""
        return sorted(fid for name, fid in FEATURE_IDS.items() if getattr(self, name))

    def for_target(self, target: TargetDescriptor) -> "FeatureConfiguration":
        """Return the configuration with the platform-enforced toggles applied."""
        features = self
        # Skottie and the particles module fail to link on macOS without
        # the rest of the optional libraries.
        if target.is_macos and not features.all_libraries:
            features = replace(features, all_libraries=True)
        # WebAssembly has no system FreeType to link against.
        if target.is_wasm and not features.embed_freetype:
            features = replace(features, embed_freetype=True)
        return features

    @classmethod
    def from_names(cls, names: Iterable[str], **options) -> "FeatureConfiguration":
        """
        Build a configuration from feature names like `gl` or `webp-encode`.

        Raises:
            ValueError: On an unknown feature name
        """
        values = dict(options)
        for name in names:
            name = name.strip().lower()
            if not name:
                continue
            if name not in FEATURE_NAMES:
                known = ", ".join(sorted(FEATURE_NAMES))
                raise ValueError(f"Unknown feature '{name}', known features: {known}")
            targets = FEATURE_NAMES[name]
            for field_name in (targets if isinstance(targets, tuple) else (targets,)):
                values[field_name] = True
        return cls(**values)

    def describe(self) -> str:
        enabled = [f.name for f in fields(self) if f.type is bool and getattr(self, f.name)]
        return ", ".join(enabled) or "none"
