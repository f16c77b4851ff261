"""
Compiler configuration handed to the TypeScript single-file transpiler.

Only the options the façade needs are modelled. The numeric values mirror the
compiler's own `ts.ModuleKind` / `ts.NewLineKind` enums so they can be passed
through as-is.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict


class ModuleKind(IntEnum):
    NONE = 0
    COMMONJS = 1
    AMD = 2
    UMD = 3
    SYSTEM = 4
    ES2015 = 5


class NewLineKind(IntEnum):
    CARRIAGE_RETURN_LINE_FEED = 0
    LINE_FEED = 1


_MODULE_ALIASES = {
    "none": ModuleKind.NONE,
    "commonjs": ModuleKind.COMMONJS,
    "amd": ModuleKind.AMD,
    "umd": ModuleKind.UMD,
    "system": ModuleKind.SYSTEM,
    "es2015": ModuleKind.ES2015,
    "es6": ModuleKind.ES2015,
}

MODULE_NAMES = ("commonjs", "amd", "umd", "system", "es2015", "none")


@dataclass(frozen=True)
class CompilerOptions:
    """
    Options forwarded to `ts.transpileModule`.

    The embedded engine exposes no host `sys` object, so the compiler would
    default to CRLF line endings; `new_line` pins LF unless overridden.
    """

    module: ModuleKind = ModuleKind.COMMONJS
    new_line: NewLineKind = NewLineKind.LINE_FEED

    @classmethod
    def for_module(cls, name: str) -> "CompilerOptions":
        """Build options for a module convention given by name, e.g. `"amd"`."""
        try:
            module = _MODULE_ALIASES[name.strip().lower()]
        except KeyError:
            raise ValueError(
                f"Unknown module kind {name!r}; expected one of {', '.join(MODULE_NAMES)}"
            ) from None
        return cls(module=module)

    def to_compiler_options(self) -> Dict[str, Any]:
        return {"module": int(self.module), "newLine": int(self.new_line)}


# Synchronous require/exports is the most broadly compatible emit target.
DEFAULT_OPTIONS = CompilerOptions()


__all__ = [
    "CompilerOptions",
    "DEFAULT_OPTIONS",
    "MODULE_NAMES",
    "ModuleKind",
    "NewLineKind",
]
