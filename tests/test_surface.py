"""Tests for the curated binding surface."""

from __future__ import annotations

from skia_build_utils.surface import Access, BindingSurface, Kind, default_surface


def test_block_wins_over_allow() -> None:
    surface = BindingSurface(
        allowlisted_functions=("C_.*",),
        blocklisted_functions=("C_Internal_.*",),
    )
    assert surface.classify("C_SkCanvas_drawRect", Kind.FUNCTION).access is Access.ALLOW
    assert surface.classify("C_Internal_helper", Kind.FUNCTION).access is Access.BLOCK


def test_unlisted_symbol_is_default() -> None:
    verdict = default_surface().classify("SkSomethingNew", Kind.FUNCTION)
    assert verdict.access is Access.DEFAULT
    assert not verdict.exposed


def test_vulkan_feature_types_are_allowed_and_opaque() -> None:
    verdict = default_surface().classify("VkPhysicalDeviceFeatures", Kind.TYPE)
    assert verdict.exposed
    assert verdict.opaque


def test_opaque_applies_to_types_only() -> None:
    verdict = default_surface().classify("VkPhysicalDeviceFeatures", Kind.FUNCTION)
    assert not verdict.opaque


def test_patterns_match_whole_names() -> None:
    surface = default_surface()
    assert surface.classify("SkLRUCache", Kind.TYPE).access is Access.BLOCK
    assert surface.classify("SkLRUCacheX", Kind.TYPE).access is not Access.BLOCK


def test_stand_ins_are_blocked_and_declared() -> None:
    surface = default_surface()
    assert surface.classify("SkVerticesPriv", Kind.TYPE).access is Access.BLOCK
    assert "pub enum SkVerticesPriv {}" in surface.raw_lines()


def test_constified_enums() -> None:
    surface = default_surface()
    assert surface.is_constified_enum("SkFontStyleMask")
    assert not surface.is_constified_enum("SkBlendMode")


def test_bindgen_args_pairs_options_with_patterns() -> None:
    args = default_surface().bindgen_args()
    index = args.index("--allowlist-function")
    assert args[index + 1] == "C_.*"
    assert "--opaque-type" in args
    assert "#![allow(clippy::all)]" in args
