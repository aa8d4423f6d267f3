#!/usr/bin/env python3
"""
Preprocessor definitions of a completed Skia build.

The definitions are recovered from the `defines = ` lines of the .ninja
files GN generates, so that the bindings and the shim are compiled with
exactly the macros Skia was built with.
"""

from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Tuple

from .config import DEFINES_FILE_NAME, ENV_BUILD_DEFINES
from .errors import DefinitionsParseError
from .features import FeatureConfiguration

Definition = Tuple[str, Optional[str]]
Definitions = List[Definition]

DEFINES_LINE_PREFIX = "defines = "
DEFINE_PREFIX = "-D"


def unescape(text: str) -> str:
    """
    Remove the escapes ninja puts into definition values.

    `$` escapes are removed first, then backslash escapes on the result,
    because some producers escape twice: `\\[\\[clang$:$:trivial_abi\\]\\]`
    becomes `[[clang::trivial_abi]]`.
    """
    return _remove_escapes(_remove_escapes(text, "$"), "\\")


def _remove_escapes(text: str, escape: str) -> str:
    if escape not in text:
        return text
    result = []
    chars = iter(text)
    for c in chars:
        if c == escape:
            # A trailing escape character has nothing to escape and is kept.
            c = next(chars, c)
        result.append(c)
    return "".join(result)


def parse_defines(defines: str, unescape_values: bool = True) -> Definitions:
    """
    Parse whitespace separated `-Dname` / `-Dname=value` tokens.

    Raises:
        DefinitionsParseError: If a token lacks the `-D` prefix
    """
    definitions = []
    for token in defines.split():
        if not token.startswith(DEFINE_PREFIX):
            raise DefinitionsParseError(
                f"missing '{DEFINE_PREFIX}' prefix from a definition: '{token}'"
            )
        definitions.append(_split_definition(token[len(DEFINE_PREFIX):], unescape_values))
    return definitions


def _split_definition(definition: str, unescape_values: bool) -> Definition:
    name, sep, value = definition.partition("=")
    if not sep:
        return name, None
    return name, unescape(value) if unescape_values else value


def from_descriptor_content(content: str) -> Definitions:
    """
    Extract the definitions of a single .ninja file.

    Raises:
        DefinitionsParseError: If the file has no `defines = ` line
    """
    for line in content.splitlines():
        if line.startswith(DEFINES_LINE_PREFIX):
            return parse_defines(line[len(DEFINES_LINE_PREFIX):])
    raise DefinitionsParseError(
        f"missing a line with the prefix '{DEFINES_LINE_PREFIX.strip()}' in a .ninja file"
    )


def combine(*definition_lists: Iterable[Definition]) -> Definitions:
    """Concatenate definitions, the first definition of a name wins."""
    seen = set()
    combined = []
    for definitions in definition_lists:
        for name, value in definitions:
            if name not in seen:
                seen.add(name)
                combined.append((name, value))
    return combined


def descriptor_files_for_features(features: FeatureConfiguration) -> List[Path]:
    """The .ninja files, relative to the output directory, to extract from."""
    files = [Path("obj/skia.ninja")]
    if features.text_layout:
        files.extend([
            Path("obj/modules/skshaper/skshaper.ninja"),
            Path("obj/modules/skparagraph/skparagraph.ninja"),
        ])
    return files


def from_descriptor_files(files: Iterable[Path], output_dir: Path) -> Definitions:
    """Extract and merge the definitions of the files in the given order."""
    definitions: Definitions = []
    for file in files:
        path = output_dir / file
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise DefinitionsParseError(f"Failed to read build descriptor {path}: {e}") from e
        definitions = combine(definitions, from_descriptor_content(content))
    return definitions


def from_features(features: FeatureConfiguration, output_dir: Path) -> Definitions:
    return from_descriptor_files(descriptor_files_for_features(features), output_dir)


def to_compiler_flags(definitions: Iterable[Definition]) -> List[str]:
    return [
        f"{DEFINE_PREFIX}{name}" if value is None else f"{DEFINE_PREFIX}{name}={value}"
        for name, value in definitions
    ]


def save_definitions(definitions: Iterable[Definition], output_dir: Path) -> Path:
    """Write `skia-defines.txt`, one `-Dname` or `-Dname=value` per line."""
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / DEFINES_FILE_NAME
    lines = to_compiler_flags(definitions)
    path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
    return path


def load_definitions(path: Path) -> Definitions:
    """
    Read a file written by `save_definitions`.

    Values are taken as they are, they were unescaped before saving.
    """
    definitions = []
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line:
            continue
        if not line.startswith(DEFINE_PREFIX):
            raise DefinitionsParseError(f"missing '{DEFINE_PREFIX}' prefix in {path}: '{line}'")
        definitions.append(_split_definition(line[len(DEFINE_PREFIX):], unescape_values=False))
    return definitions


def from_env(env: Mapping[str, str]) -> Optional[Definitions]:
    """Definitions from SKIA_BUILD_DEFINES, None if it is not set."""
    defines = env.get(ENV_BUILD_DEFINES)
    if defines is None:
        return None
    return parse_defines(defines)
