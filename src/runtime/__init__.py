"""Execution of emitted CommonJS modules in the embedded engine."""

from .loader import ENTRY_MODULE, call_export, export_names, load_module

__all__ = ["ENTRY_MODULE", "call_export", "export_names", "load_module"]
