"""Tests for the feature configuration."""

from __future__ import annotations

import pytest

from skia_build_utils.features import FeatureConfiguration
from skia_build_utils.target import parse_target


def test_defaults() -> None:
    features = FeatureConfiguration()
    assert features.release
    assert features.keep_inline_functions
    assert not features.gpu
    assert features.ids() == []


def test_gpu_follows_backends() -> None:
    assert FeatureConfiguration(metal=True).gpu
    assert not FeatureConfiguration(egl=True).gpu


def test_from_names() -> None:
    features = FeatureConfiguration.from_names(["gl", " textlayout", "webp", ""], release=False)
    assert features.gl
    assert features.text_layout
    assert features.webp_encode and features.webp_decode
    assert not features.release
    assert features.ids() == ["gl", "textlayout", "webpd", "webpe"]


def test_from_names_rejects_unknown() -> None:
    with pytest.raises(ValueError, match="opengl"):
        FeatureConfiguration.from_names(["opengl"])


def test_platform_enforced_toggles() -> None:
    features = FeatureConfiguration()
    assert features.for_target(parse_target("x86_64-apple-darwin")).all_libraries
    assert features.for_target(parse_target("wasm32-unknown-emscripten")).embed_freetype
    assert features.for_target(parse_target("x86_64-unknown-linux-gnu")) is features


def test_describe() -> None:
    assert FeatureConfiguration(release=False, keep_inline_functions=False).describe() == "none"
    assert FeatureConfiguration(gl=True).describe() == "gl, release, keep_inline_functions"
