from pathlib import Path

import dukpy
import pytest

from runtime import call_export, export_names
from transpiler import (
    DEFAULT_OPTIONS,
    CompilerOptions,
    DiagnosticCategory,
    ModuleKind,
    NewLineKind,
    transpile,
    transpile_module,
)


def _read_case(name: str) -> str:
    return Path("tests/cases", name).read_text(encoding="utf-8")


def test_transpile_is_deterministic():
    source = _read_case("interface_and_class.ts")
    assert transpile(source) == transpile(source)


def test_transpile_empty_source():
    output = transpile("")
    assert isinstance(output, str)
    assert output == transpile("")


def test_transpile_strips_annotations():
    output = transpile(_read_case("typed_function.ts"))

    assert "function add(a, b)" in output
    assert ": number" not in output
    assert "number[]" not in output
    assert call_export(output, "total", [1, 2, 3, 4]) == 10


def test_transpile_erases_type_only_declarations():
    output = transpile(_read_case("interface_and_class.ts"))

    assert "interface" not in output
    assert "Unit" not in output
    assert call_export(output, "describe", 3, 4) == "12cm"
    assert call_export(output, "describe", 2, 5, "in") == "10in"


def test_transpile_named_export_uses_exports_object():
    output = transpile(_read_case("named_export.ts"))

    assert "exports.greet = greet" in output
    assert "require(" not in output
    assert {"greeting", "greet", "default"} <= set(export_names(output))
    assert call_export(output, "greet", "world") == "hello, world"


def test_transpile_import_becomes_require():
    output = transpile(_read_case("imports.ts"))

    assert 'require("./math")' in output
    assert 'require("./format")' in output
    assert "import " not in output


def test_transpile_tolerates_syntax_errors():
    output = transpile(_read_case("syntax_error.ts"))

    assert isinstance(output, str)
    assert "exports.kept = 1" in output
    assert transpile_module(_read_case("syntax_error.ts"), report_diagnostics=True).has_errors


def test_transpile_module_reports_diagnostics_on_request():
    source = _read_case("syntax_error.ts")

    silent = transpile_module(source)
    reported = transpile_module(source, report_diagnostics=True)

    assert silent.diagnostics == []
    assert reported.output_text == silent.output_text
    assert reported.has_errors
    first = reported.diagnostics[0]
    assert first.category == DiagnosticCategory.ERROR
    assert first.line == 4
    assert first.message
    assert first.format("syntax_error.ts").startswith("syntax_error.ts:4:")
    assert f"error TS{first.code}:" in first.format()


def test_transpile_module_clean_source_has_no_diagnostics():
    result = transpile_module(_read_case("typed_function.ts"), report_diagnostics=True)
    assert result.diagnostics == []
    assert not result.has_errors


def test_transpile_matches_default_options():
    source = _read_case("named_export.ts")
    assert transpile(source) == transpile_module(source, DEFAULT_OPTIONS).output_text


def test_transpile_module_honours_module_kind():
    source = _read_case("named_export.ts")

    amd = transpile_module(source, CompilerOptions(module=ModuleKind.AMD)).output_text
    system = transpile_module(source, CompilerOptions.for_module("system")).output_text

    assert "define(" in amd
    assert "System.register(" in system


def test_default_options_emit_line_feeds():
    output = transpile(_read_case("typed_function.ts"))
    assert "\r\n" not in output

    crlf = CompilerOptions(new_line=NewLineKind.CARRIAGE_RETURN_LINE_FEED)
    assert "\r\n" in transpile_module(_read_case("typed_function.ts"), crlf).output_text


def test_compiler_options_resolve_names():
    assert DEFAULT_OPTIONS.module == ModuleKind.COMMONJS
    assert CompilerOptions.for_module("CommonJS") == DEFAULT_OPTIONS
    assert CompilerOptions.for_module(" es6 ").module == ModuleKind.ES2015
    assert DEFAULT_OPTIONS.to_compiler_options() == {"module": 1, "newLine": 1}
    with pytest.raises(ValueError):
        CompilerOptions.for_module("esnext-bundle")


def test_engine_failures_propagate(monkeypatch):
    import transpiler.facade as facade

    def _explode(entry, **values):
        raise dukpy.JSRuntimeError("Error: compiler exploded")

    monkeypatch.setattr(facade, "run_compiler", _explode)
    with pytest.raises(dukpy.JSRuntimeError, match="compiler exploded"):
        transpile("let x = 1;")
