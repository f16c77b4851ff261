"""TypeScript to CommonJS transpilation façade."""

from .facade import (
    DEFAULT_FILE_NAME,
    Diagnostic,
    DiagnosticCategory,
    TranspileResult,
    transpile,
    transpile_module,
)
from .options import DEFAULT_OPTIONS, MODULE_NAMES, CompilerOptions, ModuleKind, NewLineKind

__all__ = [
    "CompilerOptions",
    "DEFAULT_FILE_NAME",
    "DEFAULT_OPTIONS",
    "Diagnostic",
    "DiagnosticCategory",
    "MODULE_NAMES",
    "ModuleKind",
    "NewLineKind",
    "TranspileResult",
    "transpile",
    "transpile_module",
]
