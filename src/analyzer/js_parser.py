"""
JavaScript parsing utilities built on top of the Python `esprima` port.

Used to inspect the text emitted by the transpiler. `parse_js` returns the
JSON-compatible AST along with metadata describing the parse run; callers pick
recoverable parsing via `tolerant` and script / module source types (emitted
ES2015 modules need the latter).
"""

from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import dataclass
from typing import Any, List, Optional

import esprima

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParseError:
    """Represents a parsing issue detected by esprima."""

    description: str
    line: Optional[int]
    column: Optional[int]


@dataclass(frozen=True)
class ParseResult:
    """Aggregate of the output AST plus metadata about the parse run."""

    ast: Any
    errors: List[ParseError]
    source_hash: str
    source_name: str

    def to_json(self) -> str:
        payload = {
            "ast": self.ast,
            "errors": [error.__dict__ for error in self.errors],
            "source_hash": self.source_hash,
            "source_name": self.source_name,
        }
        return json.dumps(payload, ensure_ascii=False, indent=2, default=str)


def hash_source(source: str) -> str:
    """Create a deterministic hash for artefact naming."""
    return hashlib.sha256(source.encode("utf-8")).hexdigest()


def _error_field(error: Any, name: str) -> Any:
    if isinstance(error, dict):
        return error.get(name)
    return getattr(error, name, None)


def parse_js(
    source: str,
    *,
    source_name: str = "<output>",
    tolerant: bool = True,
    source_type: str = "script",
) -> ParseResult:
    """
    Parse JavaScript source text into an esprima AST.

    Args:
        source: JavaScript source code, typically transpiler output.
        source_name: Label used for diagnostics.
        tolerant: When True, esprima performs error recovery instead of raising.
        source_type: `"script"` or `"module"`; modules enable import/export.

    Returns:
        ParseResult containing the AST, any recoverable errors, and metadata.

    Raises:
        esprima.Error: If parsing fails and `tolerant` is False.
    """
    options = dict(loc=True, range=True, tolerant=tolerant)
    parser = esprima.parseModule if source_type == "module" else esprima.parseScript
    try:
        ast = parser(source, **options)
    except esprima.Error as exc:
        if not tolerant:
            raise
        logger.debug("Hard parse failure in %s: %s", source_name, exc)
        return ParseResult(
            ast=None,
            errors=[ParseError(description=str(exc) or "Failed to parse source.", line=None, column=None)],
            source_hash=hash_source(source),
            source_name=source_name,
        )

    errors: List[ParseError] = []
    raw_ast = ast.toDict() if hasattr(ast, "toDict") else ast

    if tolerant and isinstance(raw_ast, dict):
        # Recoverable errors collected by esprima in tolerant mode.
        for error in raw_ast.get("errors") or []:
            errors.append(
                ParseError(
                    description=_error_field(error, "description"),
                    line=_error_field(error, "lineNumber"),
                    column=_error_field(error, "column"),
                )
            )

    return ParseResult(
        ast=raw_ast,
        errors=errors,
        source_hash=hash_source(source),
        source_name=source_name,
    )


__all__ = ["ParseError", "ParseResult", "hash_source", "parse_js"]
