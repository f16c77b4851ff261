"""Embedded JavaScript engine hosting the bundled TypeScript compiler."""

from .host import compiler_script, evaluate, run_compiler

__all__ = ["compiler_script", "evaluate", "run_compiler"]
