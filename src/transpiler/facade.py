"""
Single-file TypeScript to JavaScript transpilation.

`transpile` is the minimal contract: source text in, output text out, using
the CommonJS module convention and discarding any diagnostics the compiler
produces. `transpile_module` exposes the configuration surface and lets
callers opt into receiving the compiler's diagnostics alongside the output.

Neither function inspects or rewrites code itself; all parsing, type erasure
and module emit happen inside the TypeScript compiler. Failures raised by the
engine propagate to the caller unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, List, Optional

from engine import run_compiler

from .options import DEFAULT_OPTIONS, CompilerOptions

DEFAULT_FILE_NAME = "module.ts"

_TRANSPILE_ENTRY = """
(function (request) {
    var result = ts.transpileModule(request.source, {
        compilerOptions: request.compilerOptions,
        fileName: request.fileName,
        reportDiagnostics: request.reportDiagnostics
    });
    var diagnostics = [];
    var reported = result.diagnostics || [];
    for (var i = 0; i < reported.length; i++) {
        var diagnostic = reported[i];
        var entry = {
            code: diagnostic.code,
            category: diagnostic.category,
            message: ts.flattenDiagnosticMessageText(diagnostic.messageText, "\\n"),
            start: diagnostic.start,
            length: diagnostic.length,
            line: null,
            column: null
        };
        if (diagnostic.file && typeof diagnostic.start === "number") {
            var position = diagnostic.file.getLineAndCharacterOfPosition(diagnostic.start);
            entry.line = position.line + 1;
            entry.column = position.character;
        }
        diagnostics.push(entry);
    }
    return { outputText: result.outputText, diagnostics: diagnostics };
})(dukpy.request)
"""


class DiagnosticCategory(IntEnum):
    WARNING = 0
    ERROR = 1
    MESSAGE = 2
    SUGGESTION = 3


@dataclass(frozen=True)
class Diagnostic:
    """A compiler diagnostic reported alongside the transpiled output."""

    code: int
    category: DiagnosticCategory
    message: str
    start: Optional[int] = None
    length: Optional[int] = None
    line: Optional[int] = None
    column: Optional[int] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "Diagnostic":
        return cls(
            code=payload["code"],
            category=DiagnosticCategory(payload["category"]),
            message=payload["message"],
            start=payload.get("start"),
            length=payload.get("length"),
            line=payload.get("line"),
            column=payload.get("column"),
        )

    def format(self, source_name: str = "<input>") -> str:
        loc = ""
        if self.line is not None:
            loc = f":{self.line}" if self.column is None else f":{self.line}:{self.column}"
        return f"{source_name}{loc}: {self.category.name.lower()} TS{self.code}: {self.message}"


@dataclass(frozen=True)
class TranspileResult:
    output_text: str
    diagnostics: List[Diagnostic]

    @property
    def has_errors(self) -> bool:
        return any(d.category == DiagnosticCategory.ERROR for d in self.diagnostics)


def transpile_module(
    source: str,
    options: Optional[CompilerOptions] = None,
    *,
    file_name: Optional[str] = None,
    report_diagnostics: bool = False,
) -> TranspileResult:
    """
    Transpile one unit of TypeScript source.

    Args:
        source: TypeScript source text; the empty string is valid.
        options: Compiler configuration (defaults to `DEFAULT_OPTIONS`, CommonJS).
        file_name: Name the compiler sees for the unit (defaults to `module.ts`).
        report_diagnostics: When True, the compiler's syntactic diagnostics are
            returned with the output instead of being discarded.

    Returns:
        TranspileResult holding the emitted text and any requested diagnostics.

    Raises:
        dukpy.JSRuntimeError: If the compiler throws.
    """
    options = options or DEFAULT_OPTIONS
    request = {
        "source": source,
        "compilerOptions": options.to_compiler_options(),
        "fileName": file_name or DEFAULT_FILE_NAME,
        "reportDiagnostics": report_diagnostics,
    }
    payload = run_compiler(_TRANSPILE_ENTRY, request=request)
    diagnostics: List[Diagnostic] = []
    if report_diagnostics:
        diagnostics = [Diagnostic.from_payload(item) for item in payload["diagnostics"]]
    return TranspileResult(output_text=payload["outputText"], diagnostics=diagnostics)


def transpile(source: str) -> str:
    """
    Transpile TypeScript source to CommonJS JavaScript, discarding diagnostics.

    Output uses LF line endings (`DEFAULT_OPTIONS.new_line`). The compiler's own
    fallback inside an engine without `ts.sys` is CRLF, so output is not
    byte-identical to a transpile that sets only the module kind.
    """
    return transpile_module(source).output_text


__all__ = [
    "DEFAULT_FILE_NAME",
    "Diagnostic",
    "DiagnosticCategory",
    "TranspileResult",
    "transpile",
    "transpile_module",
]
