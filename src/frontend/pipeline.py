"""
Pipeline utilities stitching together transpilation and output analysis.

`run_pipeline` accepts raw TypeScript source, transpiles it (collecting the
compiler's diagnostics), optionally parses the emitted CommonJS and analyses
its exports, and persists artefacts when asked to. The CLI and other callers
consume the aggregated result instead of repeating these steps.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from analyzer import ExportAnalysis, ParseError, analyze_exports, hash_source, parse_js
from transpiler import (
    DEFAULT_OPTIONS,
    CompilerOptions,
    DiagnosticCategory,
    ModuleKind,
    TranspileResult,
    transpile_module,
)

logger = logging.getLogger(__name__)

_LEVELS = {
    DiagnosticCategory.ERROR: "ERROR",
    DiagnosticCategory.WARNING: "WARNING",
    DiagnosticCategory.MESSAGE: "INFO",
    DiagnosticCategory.SUGGESTION: "INFO",
}


def _format_location(line: Optional[int], column: Optional[int] = None) -> str:
    if line is None:
        return ""
    if column is None:
        return f":{line}"
    return f":{line}:{column}"


@dataclass(frozen=True)
class PipelineResult:
    """Combined output from transpilation and analysis."""

    source_name: str
    source_hash: str
    transpile: TranspileResult
    analysis: Optional[ExportAnalysis]
    parse_errors: List[ParseError]

    @property
    def output_text(self) -> str:
        return self.transpile.output_text

    @property
    def diagnostics(self) -> List[str]:
        """Compiler diagnostics, output parse errors and analysis issues, one line each."""
        messages = [
            f"{_LEVELS[d.category]} {d.format(self.source_name)}" for d in self.transpile.diagnostics
        ]
        output_name = f"{self.source_name} (output)"
        for error in self.parse_errors:
            loc = _format_location(error.line, error.column)
            messages.append(f"WARNING {output_name}{loc}: {error.description}")
        if self.analysis:
            for issue in self.analysis.issues:
                loc = _format_location(issue.loc.line, issue.loc.column)
                messages.append(f"WARNING {output_name}{loc}: {issue.code}: {issue.message}")
        return messages

    def to_json(self) -> str:
        payload = {
            "source_name": self.source_name,
            "source_hash": self.source_hash,
            "diagnostics": [
                {**d.__dict__, "category": d.category.name} for d in self.transpile.diagnostics
            ],
            "parse_errors": [error.__dict__ for error in self.parse_errors],
            "exports": self.analysis.export_names if self.analysis else None,
            "requires": self.analysis.required_modules if self.analysis else None,
            "es_module": self.analysis.es_module if self.analysis else None,
        }
        return json.dumps(payload, ensure_ascii=False, indent=2)


def run_pipeline(
    source: str,
    *,
    source_name: str = "<input>",
    options: Optional[CompilerOptions] = None,
    report_diagnostics: bool = True,
    analyze: bool = True,
    cache_dir: Optional[Union[str, Path]] = None,
) -> PipelineResult:
    """
    Transpile TypeScript source and optionally analyse the emitted module.

    Args:
        source: Raw TypeScript source text.
        source_name: Identifier used in diagnostics, e.g. file path.
        options: Compiler configuration; defaults to CommonJS output.
        report_diagnostics: Forwarded to the transpiler.
        analyze: Toggle export analysis (only applies to CommonJS output).
        cache_dir: Optional directory to write artefacts (`None` disables).

    Returns:
        PipelineResult with the transpiled output, diagnostics and analysis.
    """
    options = options or DEFAULT_OPTIONS
    file_name = Path(source_name).name if not source_name.startswith("<") else None
    logger.debug("Transpiling %s (module=%s)", source_name, options.module.name)
    transpile_result = transpile_module(
        source,
        options,
        file_name=file_name,
        report_diagnostics=report_diagnostics,
    )

    analysis: Optional[ExportAnalysis] = None
    parse_errors: List[ParseError] = []
    if analyze and options.module == ModuleKind.COMMONJS:
        parse_result = parse_js(transpile_result.output_text, source_name=source_name)
        parse_errors = parse_result.errors
        if parse_result.ast is not None:
            analysis = analyze_exports(parse_result.ast, source_name=source_name)

    result = PipelineResult(
        source_name=source_name,
        source_hash=hash_source(source),
        transpile=transpile_result,
        analysis=analysis,
        parse_errors=parse_errors,
    )

    if cache_dir is not None:
        _persist_artefacts(cache_dir, result)

    return result


def _persist_artefacts(cache_dir: Union[str, Path], result: PipelineResult) -> None:
    """Store the output and a JSON summary of the run for inspection."""
    path = Path(cache_dir)
    path.mkdir(parents=True, exist_ok=True)
    (path / f"{result.source_hash}.js").write_text(result.output_text, encoding="utf-8")
    (path / f"{result.source_hash}.json").write_text(result.to_json(), encoding="utf-8")
    logger.debug("Wrote artefacts for %s to %s", result.source_name, path)


__all__ = ["PipelineResult", "run_pipeline"]
