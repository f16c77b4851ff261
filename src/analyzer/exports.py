"""
Export analysis for CommonJS JavaScript emitted by the transpiler.

The analyzer walks an esprima-compatible AST and records how the module
publishes bindings (`exports.x = ...`, `module.exports.x = ...`,
`Object.defineProperty(exports, "x", ...)`), which modules it loads through
`require("...")`, and whether it carries the `__esModule` interop marker. It
also flags constructs (`eval`, `with`, computed `require`) that defeat static
reasoning about the module's shape.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

ES_MODULE_MARKER = "__esModule"


class ExportKind(str, Enum):
    ASSIGNMENT = "assignment"
    DEFINE_PROPERTY = "define_property"


@dataclass(frozen=True)
class SourcePosition:
    line: Optional[int]
    column: Optional[int]


@dataclass(frozen=True)
class ExportBinding:
    """A single exported name and how it was attached to `exports`."""

    name: str
    kind: ExportKind
    loc: SourcePosition


@dataclass(frozen=True)
class RequireCall:
    specifier: str
    loc: SourcePosition


@dataclass(frozen=True)
class AnalysisIssue:
    code: str
    message: str
    loc: SourcePosition


@dataclass
class ExportAnalysis:
    source_name: str
    exports: List[ExportBinding] = field(default_factory=list)
    requires: List[RequireCall] = field(default_factory=list)
    issues: List[AnalysisIssue] = field(default_factory=list)
    es_module: bool = False
    module_replaced: bool = False

    @property
    def export_names(self) -> List[str]:
        """Exported names without duplicates, in first-seen order."""
        seen: Dict[str, None] = {}
        for binding in self.exports:
            seen.setdefault(binding.name, None)
        return list(seen)

    @property
    def required_modules(self) -> List[str]:
        return [call.specifier for call in self.requires]


def _is_identifier(node: Any, name: str) -> bool:
    return isinstance(node, dict) and node.get("type") == "Identifier" and node.get("name") == name


def _is_string_literal(node: Any) -> bool:
    return isinstance(node, dict) and node.get("type") == "Literal" and isinstance(node.get("value"), str)


def _member_name(node: Dict[str, Any]) -> Optional[str]:
    """Property name of `obj.name` or `obj["name"]`; None when computed dynamically."""
    prop = node.get("property")
    if not node.get("computed"):
        return prop.get("name") if isinstance(prop, dict) else None
    if _is_string_literal(prop):
        return prop.get("value")
    return None


def _is_module_exports(node: Any) -> bool:
    return (
        isinstance(node, dict)
        and node.get("type") == "MemberExpression"
        and _is_identifier(node.get("object"), "module")
        and _member_name(node) == "exports"
    )


def _is_exports_object(node: Any) -> bool:
    return _is_identifier(node, "exports") or _is_module_exports(node)


def _is_placeholder(node: Any) -> bool:
    """`void 0`, possibly at the end of a chain like `exports.a = exports.b = void 0`."""
    if not isinstance(node, dict):
        return False
    if node.get("type") == "UnaryExpression" and node.get("operator") == "void":
        return True
    if node.get("type") == "AssignmentExpression":
        return _is_placeholder(node.get("right"))
    return False


class _ExportAnalyzer:
    def __init__(self, source_name: str) -> None:
        self._result = ExportAnalysis(source_name=source_name)

    def analyze(self, ast: Dict[str, Any]) -> ExportAnalysis:
        self._visit(ast)
        return self._result

    # ------------------------------------------------------------------ helpers

    @staticmethod
    def _source_position(node: Dict[str, Any]) -> SourcePosition:
        loc = node.get("loc") or {}
        start = loc.get("start") or {}
        return SourcePosition(line=start.get("line"), column=start.get("column"))

    def _add_issue(self, code: str, message: str, node: Dict[str, Any]) -> None:
        self._result.issues.append(
            AnalysisIssue(code=code, message=message, loc=self._source_position(node))
        )

    def _add_export(self, name: str, kind: ExportKind, node: Dict[str, Any]) -> None:
        if name == ES_MODULE_MARKER:
            self._result.es_module = True
            return
        self._result.exports.append(
            ExportBinding(name=name, kind=kind, loc=self._source_position(node))
        )

    def _visit(self, node: Any) -> None:
        if node is None:
            return
        if isinstance(node, list):
            for element in node:
                self._visit(element)
            return
        if not isinstance(node, dict):
            return

        handler = getattr(self, f"_visit_{node.get('type')}", None)
        if handler:
            handler(node)
        else:
            self._generic_visit(node)

    def _generic_visit(self, node: Dict[str, Any]) -> None:
        for key, value in node.items():
            if key in {"loc", "range"}:
                continue
            self._visit(value)

    # ----------------------------------------------------------------- visitors

    def _visit_AssignmentExpression(self, node: Dict[str, Any]) -> None:
        target = node.get("left")
        if _is_module_exports(target):
            self._result.module_replaced = True
        elif (
            isinstance(target, dict)
            and target.get("type") == "MemberExpression"
            and _is_exports_object(target.get("object"))
            and not _is_placeholder(node.get("right"))
        ):
            name = _member_name(target)
            if name is not None:
                self._add_export(name, ExportKind.ASSIGNMENT, target)
        self._visit(node.get("right"))

    def _visit_CallExpression(self, node: Dict[str, Any]) -> None:
        callee = node.get("callee")
        arguments = node.get("arguments") or []

        if _is_identifier(callee, "require"):
            if arguments and _is_string_literal(arguments[0]):
                self._result.requires.append(
                    RequireCall(specifier=arguments[0]["value"], loc=self._source_position(node))
                )
            else:
                self._add_issue(
                    code="DYNAMIC_REQUIRE",
                    message="require() with a computed specifier cannot be resolved statically.",
                    node=node,
                )
        elif _is_identifier(callee, "eval"):
            self._add_issue(
                code="EVAL_CALL",
                message="Use of eval makes static analysis unreliable.",
                node=callee,
            )
        elif (
            isinstance(callee, dict)
            and callee.get("type") == "MemberExpression"
            and _is_identifier(callee.get("object"), "Object")
            and _member_name(callee) == "defineProperty"
            and len(arguments) >= 2
            and _is_exports_object(arguments[0])
            and _is_string_literal(arguments[1])
        ):
            self._add_export(arguments[1]["value"], ExportKind.DEFINE_PROPERTY, node)

        self._visit(callee)
        self._visit(arguments)

    def _visit_WithStatement(self, node: Dict[str, Any]) -> None:
        self._add_issue(
            code="WITH_STATEMENT",
            message="`with` statement changes scope resolution dynamically.",
            node=node,
        )
        self._visit(node.get("object"))
        self._visit(node.get("body"))


def analyze_exports(ast: Dict[str, Any], *, source_name: str = "<output>") -> ExportAnalysis:
    """
    Collect the exports, requires and analysis issues of a CommonJS module.

    Args:
        ast: esprima-compatible AST (result of `parse_js`).
        source_name: Label for diagnostics and reporting.
    """
    analyzer = _ExportAnalyzer(source_name=source_name)
    return analyzer.analyze(ast)


__all__ = [
    "AnalysisIssue",
    "ES_MODULE_MARKER",
    "ExportAnalysis",
    "ExportBinding",
    "ExportKind",
    "RequireCall",
    "SourcePosition",
    "analyze_exports",
]
