"""Tests for the binaries configuration."""

from __future__ import annotations

import pathlib

from skia_build_utils.binaries import BinariesConfiguration, binaries_key
from skia_build_utils.features import FeatureConfiguration
from skia_build_utils.target import parse_target


def test_binaries_key() -> None:
    target = parse_target("x86_64-unknown-linux-gnu")
    assert binaries_key("abc123", target, ["vulkan", "gl", "gl"]) == "abc123-x86_64-unknown-linux-gnu-gl-vulkan"
    assert binaries_key("abc123", target, []) == "abc123-x86_64-unknown-linux-gnu"
    assert binaries_key("abc123", target, ["gl"], static_crt=True, debug=True) == (
        "abc123-x86_64-unknown-linux-gnu-gl-static-debug"
    )


def test_configuration_key() -> None:
    target = parse_target("x86_64-pc-windows-msvc", host_is_target_os=True)
    features = FeatureConfiguration(d3d=True, static_crt=True, release=False)
    config = BinariesConfiguration.from_features(features, target, pathlib.Path("out"))
    assert config.key("0123456789", target) == "0123456789-x86_64-pc-windows-msvc-d3d-static-debug"


def test_text_layout_libraries() -> None:
    out = pathlib.Path("out")
    target = parse_target("x86_64-unknown-linux-gnu")
    config = BinariesConfiguration.from_features(FeatureConfiguration(text_layout=True), target, out)
    assert config.built_libraries() == ["skparagraph", "skshaper", "skia", "skia-bindings"]
    assert config.built_library_files(target)[0] == out / "libskparagraph.a"
    assert config.additional_files == []


def test_windows_text_layout_ships_icu_data() -> None:
    target = parse_target("x86_64-pc-windows-msvc", host_is_target_os=True)
    config = BinariesConfiguration.from_features(
        FeatureConfiguration(text_layout=True), target, pathlib.Path("out")
    )
    assert config.additional_files == [pathlib.Path("icudtl.dat")]
    assert config.built_library_files(target)[-1] == pathlib.Path("out/skia-bindings.lib")
    assert "usp10" in config.link_libraries


def test_plain_build() -> None:
    target = parse_target("aarch64-apple-darwin")
    config = BinariesConfiguration.from_features(FeatureConfiguration(metal=True), target, pathlib.Path("out"))
    assert config.ninja_built_libraries == ["skia"]
    assert config.feature_ids == ["metal"]
    assert "framework=Metal" in config.link_libraries
