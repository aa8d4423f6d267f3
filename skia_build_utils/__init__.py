#!/usr/bin/env python3
"""
Build support package for the Skia bindings.

Modules:
- config: Paths, pinned sources and environment lookups
- errors: Exception types of the build
- utils: Console output, command execution, executable discovery
- target: Platform triple parsing
- features: Feature configuration
- arguments: GN argument containers
- platforms: Per-platform argument strategies
- gn_args: GN argument synthesis
- definitions: Preprocessor definitions of a completed build
- surface: Curated binding surface
- enum_rewrite: Enum variant renaming
- binaries: Built libraries and link configuration
- binary_cache: Prebuilt binaries download and export
- sources: Skia source provider
- bindgen: Binding generation
- builders: Native binding shim builder
- pipeline: The build pipeline
"""

from .config import (
    find_project_root,
    initialize_paths,
    DEFINES_FILE_NAME,
)

from .errors import (
    BuildError,
    TargetParseError,
    PrerequisiteError,
    ToolFailedError,
    DefinitionsParseError,
    EnumRewriteError,
    EnumTableError,
    BinariesDownloadError,
)

from .utils import (
    console,
    command_exists,
    run_streaming_cmd,
    ToolRunner,
    ToolResult,
    locate_python3,
    locate_executable,
)

from .target import (
    TargetDescriptor,
    parse_target,
    parse_target_for_host,
    target_from_environment,
    clang_target_arch,
)

from .features import FeatureConfiguration

from .arguments import ArgumentSet, GnArgsBuilder

from .platforms import (
    PlatformStrategy,
    resolve_platform,
)

from .gn_args import BuildArguments, synthesize

from .definitions import (
    Definition,
    Definitions,
    unescape,
    combine,
    from_descriptor_content,
    from_descriptor_files,
    descriptor_files_for_features,
    save_definitions,
    load_definitions,
    to_compiler_flags,
)

from .surface import (
    Access,
    Kind,
    Verdict,
    BindingSurface,
    default_surface,
)

from .enum_rewrite import (
    ENUM_TABLE,
    EnumRewriteEngine,
    default_engine,
)

from .binaries import BinariesConfiguration, binaries_key

from .binary_cache import BinaryCache

from .sources import SourceProvider

from .bindgen import BindgenGenerator, BindingRequest, apply_enum_rewrites

from .builders import ShimBuilder, binding_sources

from .pipeline import Pipeline, STAGES, PREBUILT_STAGE

__all__ = [
    # config
    'find_project_root',
    'initialize_paths',
    'DEFINES_FILE_NAME',
    # errors
    'BuildError',
    'TargetParseError',
    'PrerequisiteError',
    'ToolFailedError',
    'DefinitionsParseError',
    'EnumRewriteError',
    'EnumTableError',
    'BinariesDownloadError',
    # utils
    'console',
    'command_exists',
    'run_streaming_cmd',
    'ToolRunner',
    'ToolResult',
    'locate_python3',
    'locate_executable',
    # target
    'TargetDescriptor',
    'parse_target',
    'parse_target_for_host',
    'target_from_environment',
    'clang_target_arch',
    # features
    'FeatureConfiguration',
    # arguments
    'ArgumentSet',
    'GnArgsBuilder',
    # platforms
    'PlatformStrategy',
    'resolve_platform',
    # gn_args
    'BuildArguments',
    'synthesize',
    # definitions
    'Definition',
    'Definitions',
    'unescape',
    'combine',
    'from_descriptor_content',
    'from_descriptor_files',
    'descriptor_files_for_features',
    'save_definitions',
    'load_definitions',
    'to_compiler_flags',
    # surface
    'Access',
    'Kind',
    'Verdict',
    'BindingSurface',
    'default_surface',
    # enum_rewrite
    'ENUM_TABLE',
    'EnumRewriteEngine',
    'default_engine',
    # binaries
    'BinariesConfiguration',
    'binaries_key',
    # binary_cache
    'BinaryCache',
    # sources
    'SourceProvider',
    # bindgen
    'BindgenGenerator',
    'BindingRequest',
    'apply_enum_rewrites',
    # builders
    'ShimBuilder',
    'binding_sources',
    # pipeline
    'Pipeline',
    'STAGES',
    'PREBUILT_STAGE',
]
