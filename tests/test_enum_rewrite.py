"""Tests for enum variant renaming."""

from __future__ import annotations

import pytest

from skia_build_utils.enum_rewrite import (
    ENUM_TABLE,
    EnumRewriteEngine,
    default_engine,
    k_xxx,
    k_xxx_name,
    k_xxx_name_opt,
    k_xxx_uppercase,
    shouty_snake_case,
    vk,
)
from skia_build_utils.errors import EnumRewriteError, EnumTableError


def test_k_xxx() -> None:
    assert k_xxx("Color", "kRed") == "Red"


def test_k_xxx_without_prefix_raises() -> None:
    with pytest.raises(EnumRewriteError) as excinfo:
        k_xxx("Color", "Red")
    assert excinfo.value.enum_name == "Color"
    assert excinfo.value.variant == "Red"


def test_k_xxx_uppercase() -> None:
    assert k_xxx_uppercase("TextDirection", "kRtl") == "RTL"


def test_k_xxx_name() -> None:
    assert k_xxx_name("Cap", "kButt_Cap") == "Butt"
    with pytest.raises(EnumRewriteError):
        k_xxx_name("Cap", "kButt")


def test_k_xxx_name_opt() -> None:
    assert k_xxx_name_opt("Style", "kFill_Style") == "Fill"
    assert k_xxx_name_opt("Style", "kStrokeAndFill") == "StrokeAndFill"


def test_vk() -> None:
    assert vk("VkFormat", "VK_FORMAT_R8_UNORM") == "R8_UNORM"
    assert vk("VkSamplerYcbcrRange", "VK_SAMPLER_YCBCR_RANGE_ITU_FULL") == "ITU_FULL"


def test_shouty_snake_case() -> None:
    assert shouty_snake_case("VkImageLayout") == "VK_IMAGE_LAYOUT"
    assert shouty_snake_case("VkSamplerYcbcrModelConversion") == "VK_SAMPLER_YCBCR_MODEL_CONVERSION"


def test_duplicate_table_entry_raises() -> None:
    with pytest.raises(EnumTableError):
        EnumRewriteEngine([("Color", k_xxx), ("Color", k_xxx_name)])


def test_default_engine_covers_table() -> None:
    engine = default_engine()
    assert len(engine) == len(ENUM_TABLE)
    assert "SkBlendMode" in engine


def test_rename_unknown_enum_returns_none() -> None:
    assert default_engine().rename("NotAnEnum", "kValue") is None


def test_resolve_nested_enum_by_short_name() -> None:
    engine = default_engine()
    assert engine.resolve("SkPaint_Cap") == "Cap"
    assert engine.resolve("SkBlendMode") == "SkBlendMode"
    assert engine.resolve("SkUnknown_Thing") is None
