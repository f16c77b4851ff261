import json
from pathlib import Path
from typing import List

import pytest

from analyzer import ParseError
from frontend import PipelineResult, run_pipeline
from transpiler import CompilerOptions, Diagnostic, DiagnosticCategory, ModuleKind, TranspileResult

TEST_CASES = [
    ("tests/cases/typed_function.ts", ["total"], []),
    ("tests/cases/named_export.ts", ["greeting", "greet", "default"], []),
    ("tests/cases/interface_and_class.ts", ["Rect", "describe"], []),
    ("tests/cases/imports.ts", ["render"], ["./math", "./format"]),
]


@pytest.mark.parametrize("relative_path, expected_exports, expected_requires", TEST_CASES)
def test_pipeline_handles_cases(
    relative_path: str,
    expected_exports: List[str],
    expected_requires: List[str],
    tmp_path,
):
    source_path = Path(relative_path)
    source = source_path.read_text(encoding="utf-8")
    result = run_pipeline(source, source_name=str(source_path), cache_dir=tmp_path)

    assert result.transpile.diagnostics == []
    assert result.parse_errors == []
    assert result.diagnostics == []

    assert result.analysis is not None
    assert set(expected_exports) <= set(result.analysis.export_names)
    assert result.analysis.required_modules == expected_requires

    assert (tmp_path / f"{result.source_hash}.js").read_text(encoding="utf-8") == result.output_text
    summary = json.loads((tmp_path / f"{result.source_hash}.json").read_text(encoding="utf-8"))
    assert summary["source_name"] == str(source_path)
    assert summary["exports"] == result.analysis.export_names


def test_pipeline_surfaces_compiler_diagnostics():
    source_path = Path("tests/cases/syntax_error.ts")
    result = run_pipeline(source_path.read_text(encoding="utf-8"), source_name=str(source_path))

    assert result.output_text
    assert result.transpile.has_errors
    assert result.diagnostics[0].startswith(f"ERROR {source_path}:4:")
    assert "error TS" in result.diagnostics[0]


def test_pipeline_can_discard_diagnostics():
    source = Path("tests/cases/syntax_error.ts").read_text(encoding="utf-8")
    result = run_pipeline(source, report_diagnostics=False, analyze=False)

    assert result.transpile.diagnostics == []
    assert result.analysis is None
    assert result.source_name == "<input>"


def test_pipeline_skips_analysis_for_other_module_kinds():
    source = Path("tests/cases/named_export.ts").read_text(encoding="utf-8")
    result = run_pipeline(source, options=CompilerOptions(module=ModuleKind.AMD))

    assert "define(" in result.output_text
    assert result.analysis is None


def test_pipeline_reports_output_issues():
    result = run_pipeline("export function run(code: string): any {\n    return eval(code);\n}\n")

    assert result.analysis is not None
    assert [issue.code for issue in result.analysis.issues] == ["EVAL_CALL"]
    assert any("EVAL_CALL" in message for message in result.diagnostics)


def test_pipeline_diagnostic_levels():
    diagnostics = [
        Diagnostic(code=1005, category=DiagnosticCategory.ERROR, message="';' expected.", line=2, column=4),
        Diagnostic(code=6133, category=DiagnosticCategory.SUGGESTION, message="unused"),
        Diagnostic(code=6000, category=DiagnosticCategory.MESSAGE, message="note"),
    ]
    result = PipelineResult(
        source_name="case.ts",
        source_hash="0" * 64,
        transpile=TranspileResult(output_text="", diagnostics=diagnostics),
        analysis=None,
        parse_errors=[ParseError(description="Unexpected token ;", line=3, column=7)],
    )

    assert result.diagnostics == [
        "ERROR case.ts:2:4: error TS1005: ';' expected.",
        "INFO case.ts: suggestion TS6133: unused",
        "INFO case.ts: message TS6000: note",
        "WARNING case.ts (output):3:7: Unexpected token ;",
    ]
