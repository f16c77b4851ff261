"""Static analysis of emitted CommonJS JavaScript."""

from .exports import (
    ES_MODULE_MARKER,
    AnalysisIssue,
    ExportAnalysis,
    ExportBinding,
    ExportKind,
    RequireCall,
    SourcePosition,
    analyze_exports,
)
from .js_parser import ParseError, ParseResult, hash_source, parse_js

__all__ = [
    "AnalysisIssue",
    "ES_MODULE_MARKER",
    "ExportAnalysis",
    "ExportBinding",
    "ExportKind",
    "ParseError",
    "ParseResult",
    "RequireCall",
    "SourcePosition",
    "analyze_exports",
    "hash_source",
    "parse_js",
]
