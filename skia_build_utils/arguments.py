#!/usr/bin/env python3
"""
GN argument containers and literal helpers.

GN arguments are kept as `key -> literal` pairs where the literal is
already spelled the way GN reads it: `true`, `false`, `"quoted"` or a
list.
"""

from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from .target import TargetDescriptor, clang_target_arch


def quote(s: str) -> str:
    return f'"{s}"'


def yes() -> str:
    return "true"


def no() -> str:
    return "false"


def yes_if(condition: bool) -> str:
    return yes() if condition else no()


def gn_list(items) -> str:
    """Render a GN list of strings, e.g. `["-O2","-g"]`."""
    return "[" + ",".join(quote(item) for item in items) + "]"


class ArgumentSet:
    """
    Ordered, key-unique GN arguments.

    Setting an existing key replaces its value but keeps the key at the
    position where it was first set.
    """

    def __init__(self, items: Optional[List[Tuple[str, str]]] = None):
        self._args: Dict[str, str] = {}
        for key, value in items or []:
            self.set(key, value)

    def set(self, key: str, value: str) -> "ArgumentSet":
        self._args[key] = value
        return self

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._args.get(key, default)

    def items(self) -> List[Tuple[str, str]]:
        return list(self._args.items())

    def keys(self) -> List[str]:
        return list(self._args)

    def render(self) -> str:
        """The single `key=value key=value` string passed to `gn gen --args`."""
        return " ".join(f"{key}={value}" for key, value in self._args.items())

    def __contains__(self, key: str) -> bool:
        return key in self._args

    def __getitem__(self, key: str) -> str:
        return self._args[key]

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self._args.items())

    def __len__(self) -> int:
        return len(self._args)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ArgumentSet):
            return NotImplemented
        return self.items() == other.items()

    def __repr__(self) -> str:
        return f"ArgumentSet({self.items()!r})"


def _append_unique(items: List[str], item: str) -> None:
    if item not in items:
        items.append(item)


class GnArgsBuilder:
    """
    Collects GN arguments, Skia compiler flags and binding generator
    arguments while a configuration is synthesized.

    Platform strategies read environment inputs from `env` only.
    """

    def __init__(self, target: TargetDescriptor, env: Optional[Mapping[str, str]] = None):
        self.target = target
        self.env: Mapping[str, str] = env if env is not None else {}
        self.args = ArgumentSet()
        self.cflags: List[str] = []
        self.clang_args: List[str] = []
        # Compiler target passed as `--target=`, none by default.
        self.compiler_target: Optional[str] = None
        self.sysroot_prefix = "--sysroot="

    def arg(self, key: str, value: str) -> "GnArgsBuilder":
        self.args.set(key, value)
        return self

    def cflag(self, flag: str) -> "GnArgsBuilder":
        _append_unique(self.cflags, flag)
        return self

    def cflags_from(self, flags) -> None:
        for flag in flags:
            self.cflag(flag)

    def clang_arg(self, arg: str) -> "GnArgsBuilder":
        _append_unique(self.clang_args, arg)
        return self

    def clang_args_from(self, args) -> None:
        for arg in args:
            self.clang_arg(arg)

    def target_os_and_default_cpu(self, os_name: str) -> None:
        """Set `target_os` and `target_cpu` to clang's name of the target architecture."""
        self.arg("target_os", quote(os_name))
        self.arg("target_cpu", quote(clang_target_arch(self.target.architecture)))

    def set_target(self, triple: Optional[str]) -> None:
        self.compiler_target = triple
