#!/usr/bin/env python3
"""
Enum variant renaming.

Skia spells enum variants like `kRed`, `kButt_Cap` or
`VK_FORMAT_R8_UNORM`. The rewrite functions in this module turn them into
the names the generated bindings expose, `ENUM_TABLE` assigns one rewrite
function to each enum. A variant that does not match the pattern its
function expects is an error; the generated names are public API.
"""

import re
from typing import Callable, Dict, Iterable, Optional, Tuple

from .errors import EnumRewriteError, EnumTableError

RewriteFunction = Callable[[str, str], str]


########################################################################
# Rewrite Functions
########################################################################


def k_xxx(name: str, variant: str) -> str:
    """`kRed` -> `Red`"""
    if not variant.startswith("k"):
        raise EnumRewriteError(name, variant, "k(.*)")
    return variant[1:]


def k_xxx_uppercase(name: str, variant: str) -> str:
    """`kRtl` -> `RTL`"""
    return k_xxx(name, variant).upper()


def k_xxx_name(name: str, variant: str) -> str:
    """`kButt_Cap` -> `Butt`"""
    return capture(name, variant, f"k(.*)_{name}")


def k_xxx_name_opt(name: str, variant: str) -> str:
    """`kFill_Style` -> `Fill`, `kStrokeAndFill` -> `StrokeAndFill`"""
    suffix = f"_{name}"
    if variant.endswith(suffix):
        return capture(name, variant, f"k(.*){suffix}")
    return capture(name, variant, "k(.*)")


def vk(name: str, variant: str) -> str:
    """`VK_FORMAT_R8_UNORM` of `VkFormat` -> `R8_UNORM`"""
    return capture(name, variant, f"{shouty_snake_case(name)}_(.*)")


def capture(name: str, variant: str, pattern: str) -> str:
    match = re.search(pattern, variant)
    if match is None:
        raise EnumRewriteError(name, variant, pattern)
    return match.group(1)


_WORD = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z0-9]+|[A-Z]+|[0-9]+")


def shouty_snake_case(name: str) -> str:
    """`VkSamplerYcbcrRange` -> `VK_SAMPLER_YCBCR_RANGE`"""
    return "_".join(word.upper() for word in _WORD.findall(name))


########################################################################
# Enum Table
########################################################################

ENUM_TABLE: Tuple[Tuple[str, RewriteFunction], ...] = (
    # codec/
    ("DocumentStructureType", k_xxx),
    ("ZeroInitialized", k_xxx_name),
    ("SelectionPolicy", k_xxx),
    # core/ effects/
    ("SkApplyPerspectiveClip", k_xxx),
    ("SkBlendMode", k_xxx),
    ("SkBlendModeCoeff", k_xxx),
    ("SkBlurStyle", k_xxx_name),
    ("SkClipOp", k_xxx),
    ("SkColorChannel", k_xxx),
    ("SkCoverageMode", k_xxx),
    ("SkEncodedImageFormat", k_xxx),
    ("SkEncodedOrigin", k_xxx_name),
    ("SkFilterQuality", k_xxx_name),
    ("SkFontHinting", k_xxx),
    ("SkAlphaType", k_xxx_name),
    ("SkYUVColorSpace", k_xxx_name),
    ("SkPathFillType", k_xxx),
    ("SkPathConvexityType", k_xxx),
    ("SkPathDirection", k_xxx),
    ("SkPathVerb", k_xxx),
    ("SkPathOp", k_xxx_name),
    ("SkTileMode", k_xxx),
    # SkPaint_Style, SkStrokeRec_Style, SkPath1DPathEffect_Style
    ("Style", k_xxx_name_opt),
    # SkPaint_*
    ("Cap", k_xxx_name),
    ("Join", k_xxx_name),
    # SkStrokeRec_InitStyle
    ("InitStyle", k_xxx_name),
    # SkBlurImageFilter_TileMode, SkMatrixConvolutionImageFilter_TileMode
    ("TileMode", k_xxx_name),
    # SkCanvas_*
    ("PointMode", k_xxx_name),
    ("SrcRectConstraint", k_xxx_name),
    # SkCanvas_Lattice_RectType
    ("RectType", k_xxx),
    # SkDisplacementMapEffect_ChannelSelectorType
    ("ChannelSelectorType", k_xxx_name),
    # SkDropShadowImageFilter_ShadowMode
    ("ShadowMode", k_xxx_name),
    # SkFont_*
    ("Edging", k_xxx),
    ("Slant", k_xxx_name),
    # SkHighContrastConfig_InvertStyle
    ("InvertStyle", k_xxx),
    # SkImage_*
    ("BitDepth", k_xxx),
    ("CachingHint", k_xxx_name),
    ("CompressionType", k_xxx),
    # SkImageFilter_MapDirection
    ("MapDirection", k_xxx_name),
    # SkCodec_Result, SkInterpolatorBase_Result
    ("Result", k_xxx),
    # SkMatrix_ScaleToFit
    ("ScaleToFit", k_xxx_name),
    # SkPath_*
    ("ArcSize", k_xxx_name),
    ("AddPathMode", k_xxx_name),
    # SkRegion_Op
    ("Op", k_xxx_name_opt),
    # SkRRect_Type, SkRuntimeEffect_Variable_Type
    ("Type", k_xxx_name_opt),
    ("Corner", k_xxx_name),
    # SkShader_GradientType
    ("GradientType", k_xxx_name),
    # SkSurface_*
    ("ContentChangeMode", k_xxx_name),
    ("BackendHandleAccess", k_xxx_name),
    # SkTextUtils_Align
    ("Align", k_xxx_name),
    # SkTrimPathEffect_Mode
    ("Mode", k_xxx),
    # SkTypeface_SerializeBehavior
    ("SerializeBehavior", k_xxx),
    # SkVertices_VertexMode
    ("VertexMode", k_xxx_name),
    # SkYUVAIndex_Index
    ("Index", k_xxx_name),
    # SkRuntimeEffect_Variable_Qualifier
    ("Qualifier", k_xxx),
    # private, leaks through SkRuntimeEffect_Variable
    ("GrSLType", k_xxx_name),
    # gpu/
    ("GrGLStandard", k_xxx_name),
    ("GrGLFormat", k_xxx),
    ("GrSurfaceOrigin", k_xxx_name),
    ("GrBackendApi", k_xxx),
    ("GrMipmapped", k_xxx),
    ("GrRenderable", k_xxx),
    ("GrProtected", k_xxx),
    # DartTypes.h
    ("Affinity", k_xxx),
    ("RectHeightStyle", k_xxx),
    ("RectWidthStyle", k_xxx),
    ("TextAlign", k_xxx),
    ("TextDirection", k_xxx_uppercase),
    ("TextBaseline", k_xxx),
    ("TextHeightBehavior", k_xxx),
    ("DrawOptions", k_xxx),
    # TextStyle.h
    ("TextDecorationStyle", k_xxx),
    ("TextDecorationMode", k_xxx),
    ("StyleType", k_xxx),
    ("PlaceholderAlignment", k_xxx),
    # Vk*
    ("VkChromaLocation", vk),
    ("VkFilter", vk),
    ("VkFormat", vk),
    ("VkImageLayout", vk),
    ("VkImageTiling", vk),
    ("VkSamplerYcbcrModelConversion", vk),
    ("VkSamplerYcbcrRange", vk),
    ("VkStructureType", vk),
    ("VkSharingMode", vk),
    # SkPath::Verb
    ("Verb", k_xxx_name),
    # SkVertices::Attribute::Usage
    ("Usage", k_xxx),
    ("GrSemaphoresSubmitted", k_xxx),
    ("BackendSurfaceAccess", k_xxx),
    ("SkFilterMode", k_xxx),
    ("SkMipmapMode", k_xxx),
    ("Enable", k_xxx),
    ("ShaderCacheStrategy", k_xxx),
    # SkYUVAInfo_*
    ("PlanarConfig", k_xxx),
    ("Siting", k_xxx),
    ("PlaneConfig", k_xxx),
    # SkYUVAPixmapInfo
    ("DataType", k_xxx),
    # SkImageFilters::Dither
    ("Dither", k_xxx),
    ("SkScanlineOrder", k_xxx_name),
)


class EnumRewriteEngine:
    """
    Looks up and applies the rewrite function of an enum.

    Raises:
        EnumTableError: If the table names an enum twice
    """

    def __init__(self, table: Iterable[Tuple[str, RewriteFunction]]):
        self._rules: Dict[str, RewriteFunction] = {}
        for enum_name, rewrite in table:
            if enum_name in self._rules:
                raise EnumTableError(f"enum '{enum_name}' appears more than once in the rewrite table")
            self._rules[enum_name] = rewrite

    def __contains__(self, enum_name: str) -> bool:
        return enum_name in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def resolve(self, enum_name: str) -> Optional[str]:
        """
        The table name for an enum as it appears in generated code.

        Nested enums are generated as `SkPaint_Cap`, the table lists them
        by their short name `Cap`.
        """
        if enum_name in self._rules:
            return enum_name
        short_name = enum_name.rsplit("_", 1)[-1]
        if short_name in self._rules:
            return short_name
        return None

    def rename(self, enum_name: str, variant: str) -> Optional[str]:
        """
        The rewritten variant, None if the enum keeps its original naming.

        Raises:
            EnumRewriteError: If the variant does not match its rule
        """
        rewrite = self._rules.get(enum_name)
        if rewrite is None:
            return None
        return rewrite(enum_name, variant)


def default_engine() -> EnumRewriteEngine:
    return EnumRewriteEngine(ENUM_TABLE)
