#!/usr/bin/env python3
"""
Configuration of the binaries a build produces.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List

from .features import FeatureConfiguration
from .platforms import resolve_platform
from .target import TargetDescriptor

# Library names
SKIA = "skia"
SKIA_BINDINGS = "skia-bindings"
SK_SHAPER = "skshaper"
SK_PARAGRAPH = "skparagraph"

ICUDTL_DAT = "icudtl.dat"


@dataclass(frozen=True)
class BinariesConfiguration:
    """The libraries and files of a build and what they link against."""

    feature_ids: List[str]
    output_dir: Path
    # System libraries the final binary links with.
    link_libraries: List[str]
    # Static libraries built by ninja.
    ninja_built_libraries: List[str]
    # Static libraries built besides ninja's.
    other_built_libraries: List[str] = field(default_factory=lambda: [SKIA_BINDINGS])
    # Files relative to the output directory dependent builds need.
    additional_files: List[Path] = field(default_factory=list)
    release: bool = True
    static_crt: bool = False

    @classmethod
    def from_features(
        cls, features: FeatureConfiguration, target: TargetDescriptor, output_dir: Path
    ) -> "BinariesConfiguration":
        features = features.for_target(target)
        ninja_built_libraries = []
        additional_files = []

        if features.text_layout:
            if target.is_windows:
                additional_files.append(Path(ICUDTL_DAT))
            ninja_built_libraries.extend([SK_PARAGRAPH, SK_SHAPER])
        ninja_built_libraries.append(SKIA)

        return cls(
            feature_ids=features.ids(),
            output_dir=output_dir,
            link_libraries=resolve_platform(target).link_libraries(features),
            ninja_built_libraries=ninja_built_libraries,
            other_built_libraries=[SKIA_BINDINGS],
            additional_files=additional_files,
            release=features.release,
            static_crt=features.static_crt,
        )

    def built_libraries(self) -> List[str]:
        # On Linux the order matters: first ours, then the system's.
        return self.ninja_built_libraries + self.other_built_libraries

    def built_library_files(self, target: TargetDescriptor) -> List[Path]:
        return [self.output_dir / target.library_to_filename(lib) for lib in self.built_libraries()]

    def key(self, repository_hash: str, target: TargetDescriptor) -> str:
        return binaries_key(
            repository_hash, target, self.feature_ids,
            static_crt=self.static_crt, debug=not self.release,
        )


def binaries_key(
    repository_hash: str,
    target: TargetDescriptor,
    feature_ids: Iterable[str],
    static_crt: bool = False,
    debug: bool = False,
) -> str:
    """
    Key uniquely identifying a set of binaries.

    Parts are joined with `-` and never enclosed, release hosts strip
    grouping characters from file names:
    `hash-triple[-feature-feature][-static][-debug]`.
    """
    components = [repository_hash, str(target)]
    features = sorted(set(feature_ids))
    if features:
        components.append("-".join(features))
    if static_crt:
        components.append("static")
    if debug:
        components.append("debug")
    return "-".join(components)
