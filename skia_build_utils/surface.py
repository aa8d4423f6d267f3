#!/usr/bin/env python3
"""
The curated binding surface.

Static tables decide which native symbols the binding generator exposes:
allowlisted functions, types and variables are generated, blocklisted
ones never are, and opaque types are generated as plain blobs of the
right size without fields. Blocking outweighs allowing; opaqueness is
independent of both.
"""

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import List, Pattern, Sequence, Tuple


class Access(Enum):
    ALLOW = "allow"
    BLOCK = "block"
    # Not mentioned by any rule, left to the binding generator.
    DEFAULT = "default"


class Kind(Enum):
    FUNCTION = "function"
    TYPE = "type"
    VAR = "var"


@dataclass(frozen=True)
class Verdict:
    access: Access
    opaque: bool = False

    @property
    def exposed(self) -> bool:
        return self.access is Access.ALLOW


########################################################################
# Surface Tables
########################################################################

ALLOWLISTED_FUNCTIONS = (
    # The C wrappers of src/*.cpp
    "C_.*",
    "SkAnnotateRectWithURL",
    "SkAnnotateNamedDestination",
    "SkAnnotateLinkToDestination",
    "SkColorTypeBytesPerPixel",
    "SkColorTypeIsAlwaysOpaque",
    "SkColorTypeValidateAlphaType",
    "SkRGBToHSV",
    # does not get allowlisted otherwise, probably because of inlining
    "SkColorToHSV",
    "SkHSVToColor",
    "SkPreMultiplyARGB",
    "SkPreMultiplyColor",
    "SkBlendMode_AsCoeff",
    "SkBlendMode_Name",
    "SkSwapRB",
    "SkColorFilter_asComponentTable",
    # pathops/
    "Op",
    "Simplify",
    "TightBounds",
    "AsWinding",
    # utils/
    "Sk3LookAt",
    "Sk3Perspective",
    "Sk3MapPts",
    "SkUnitCubicInterp",
)

ALLOWLISTED_TYPES = (
    # Vulkan reexports swallowed by making them opaque.
    "VkPhysicalDeviceFeatures",
    "VkPhysicalDeviceFeatures2",
)

ALLOWLISTED_VARS = (
    "SK_Color.*",
    "kAll_GrBackendState",
)

BLOCKLISTED_FUNCTIONS = (
    "SkPathRef_Editor_Editor",
    "GrContext_Base_.*",
    "GrRecordingContext_priv.*",
    "GrDirectContext_priv.*",
    "GrContext_priv.*",
    "SkDeferredDisplayList_priv.*",
    "SkVertices_priv.*",
    "std::bitset_flip.*",
    # declared, but not implemented
    "SkCustomTypefaceBuilder_setGlyph[123].*",
)

BLOCKLISTED_TYPES = (
    # skparagraph pulls in std::map, bindgen gets std::_Tree wrong.
    "std::_Tree.*",
    "std::map.*",
    # debug builds
    "SkLRUCache",
    "SkLRUCache_Entry",
    "std::vector.*",
    # too much template magic
    "SkRuntimeEffect_ConstIterable.*",
    # Linux LLVM9 c++17
    "std::_Rb_tree.*",
    "std::__cxx.*",
    "std::array.*",
    "SkPathRef_Editor",
)

# Private types that pull in inline functions which can not be linked.
# They are blocked and replaced by an uninhabitable stand-in.
OPAQUE_STAND_INS = (
    "GrContext_Base",
    "GrImageContext",
    "GrImageContextPriv",
    "GrContextThreadSafeProxy",
    "GrContextThreadSafeProxyPriv",
    "GrRecordingContextPriv",
    "GrContextPriv",
    "SkVerticesPriv",
)

OPAQUE_TYPES = (
    # pull in things that can not be compiled
    "SkDeferredDisplayList",
    "SkDeferredDisplayList_PendingPathsMap",
    # wrong layouts, containing types fail their layout tests
    "std::atomic",
    "std::function",
    "std::unique_ptr",
    "SkAutoTMalloc",
    "SkTHashMap",
    # derived from SkWeakRefCnt
    "SkWeakRefCnt",
    "GrContext",
    "GrGLInterface",
    "GrSurfaceProxy",
    "Sk2DPathEffect",
    "SkCornerPathEffect",
    "SkDataTable",
    "SkDiscretePathEffect",
    "SkDrawable",
    "SkLine2DPathEffect",
    "SkPath2DPathEffect",
    "SkPathRef_GenIDChangeListener",
    "SkPicture",
    "SkPixelRef",
    "SkSurface",
    # not needed
    "SkDeque",
    "SkDeque_Iter",
    "GrGLInterface_Functions",
    # Trivial*Iterator classes with two vtable pointers
    "SkShaper_TrivialBiDiRunIterator",
    "SkShaper_TrivialFontRunIterator",
    "SkShaper_TrivialLanguageRunIterator",
    "SkShaper_TrivialScriptRunIterator",
    # skparagraph
    "std::vector",
    "std::u16string",
    "skia::textlayout::FontCollection",
    "std::map",
    # Vulkan reexports with the wrong field naming conventions
    "VkPhysicalDeviceFeatures",
    "VkPhysicalDeviceFeatures2",
    "GrContextOptions_PersistentCache",
    "GrContextOptions_ShaderErrorHandler",
    "Sk1DPathEffect",
    "SkBBoxHierarchy",
    "SkBBHFactory",
    "SkBitmap_Allocator",
    "SkBitmap_HeapAllocator",
    "SkColorFilter",
    "SkDeque_F2BIter",
    "SkDrawLooper",
    "SkDrawLooper_Context",
    "SkDrawable_GpuDrawHandler",
    "SkFlattenable",
    "SkFontMgr",
    "SkFontStyleSet",
    "SkMaskFilter",
    "SkPathEffect",
    "SkPicture_AbortCallback",
    "SkPixelRef_GenIDChangeListener",
    "SkRasterHandleAllocator",
    "SkRefCnt",
    "SkShader",
    "SkStream",
    "SkStreamAsset",
    "SkStreamMemory",
    "SkStreamRewindable",
    "SkStreamSeekable",
    "SkTypeface_LocalizedStrings",
    "SkWStream",
    "GrVkMemoryAllocator",
    "SkShaper",
    "SkShaper_BiDiRunIterator",
    "SkShaper_FontRunIterator",
    "SkShaper_LanguageRunIterator",
    "SkShaper_RunHandler",
    "SkShaper_RunIterator",
    "SkShaper_ScriptRunIterator",
    "SkContourMeasure",
    "SkDocument",
    # tuples
    "SkRuntimeEffect_EffectResult",
    "SkRuntimeEffect_ByteCodeResult",
    "SkRuntimeEffect_SpecializeResult",
    # derived from std::string
    "SkSL::String",
    "std::basic_string",
    "std::basic_string_value_type",
    # wrong size on macOS and Linux
    "SkRuntimeEffect",
    "GrShaderCaps",
    # referred to from SkPath, but not used
    "SkPathRef",
    "SkMutex",
    "SkIDChangeListener",
    "GrRecordingContext",
    "GrDirectContext",
    "GrD3DAlloc",
    "GrD3DMemoryAllocator",
    "std::tuple",
    # private, fails layout tests
    "skstd::optional",
)

CONSTIFIED_ENUMS = (
    ".*Mask",
    ".*Flags",
    ".*Bits",
    "SkCanvas_SaveLayerFlagsSet",
    "GrVkAlloc_Flag",
    "GrGLBackendState",
)

RAW_LINES = (
    "#![allow(clippy::all)]",
    "#![allow(unknown_lints)]",
    "#![allow(deref_nullptr)]",
    # GrVkBackendContext contains u128 fields on macOS
    "#![allow(improper_ctypes)]",
)


@lru_cache(maxsize=None)
def _compile(patterns: Tuple[str, ...]) -> List[Pattern]:
    return [re.compile(pattern) for pattern in patterns]


def _matches(patterns: Sequence[str], name: str) -> bool:
    return any(p.fullmatch(name) for p in _compile(tuple(patterns)))


class BindingSurface:
    """The curated allow, block and opaque tables."""

    def __init__(
        self,
        allowlisted_functions=ALLOWLISTED_FUNCTIONS,
        allowlisted_types=ALLOWLISTED_TYPES,
        allowlisted_vars=ALLOWLISTED_VARS,
        blocklisted_functions=BLOCKLISTED_FUNCTIONS,
        blocklisted_types=BLOCKLISTED_TYPES + OPAQUE_STAND_INS,
        opaque_types=OPAQUE_TYPES,
        constified_enums=CONSTIFIED_ENUMS,
        stand_ins=OPAQUE_STAND_INS,
    ):
        self.allowlisted = {
            Kind.FUNCTION: tuple(allowlisted_functions),
            Kind.TYPE: tuple(allowlisted_types),
            Kind.VAR: tuple(allowlisted_vars),
        }
        self.blocklisted = {
            Kind.FUNCTION: tuple(blocklisted_functions),
            Kind.TYPE: tuple(blocklisted_types),
            Kind.VAR: (),
        }
        self.opaque_types = tuple(opaque_types)
        self.constified_enums = tuple(constified_enums)
        self.stand_ins = tuple(stand_ins)

    def classify(self, name: str, kind: Kind) -> Verdict:
        """Classify a symbol; a block rule wins over an allow rule."""
        if _matches(self.blocklisted[kind], name):
            access = Access.BLOCK
        elif _matches(self.allowlisted[kind], name):
            access = Access.ALLOW
        else:
            access = Access.DEFAULT
        opaque = kind is Kind.TYPE and _matches(self.opaque_types, name)
        return Verdict(access, opaque)

    def is_constified_enum(self, name: str) -> bool:
        return _matches(self.constified_enums, name)

    def raw_lines(self) -> List[str]:
        """Lines prepended to the generated source, including the stand-ins."""
        return list(RAW_LINES) + [f"pub enum {name} {{}}" for name in self.stand_ins]

    def bindgen_args(self) -> List[str]:
        """The tables as options of the `bindgen` command line."""
        args: List[str] = []

        def add(option, patterns):
            for pattern in patterns:
                args.extend([option, pattern])

        add("--allowlist-function", self.allowlisted[Kind.FUNCTION])
        add("--allowlist-type", self.allowlisted[Kind.TYPE])
        add("--allowlist-var", self.allowlisted[Kind.VAR])
        add("--blocklist-function", self.blocklisted[Kind.FUNCTION])
        add("--blocklist-type", self.blocklisted[Kind.TYPE])
        add("--opaque-type", self.opaque_types)
        add("--constified-enum", self.constified_enums)
        add("--raw-line", self.raw_lines())
        return args


def default_surface() -> BindingSurface:
    return BindingSurface()
