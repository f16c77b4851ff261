"""
Host for JavaScript evaluation built on top of `dukpy` (Duktape bindings).

`dukpy` ships the TypeScript compiler services script alongside the Duktape
interpreter, which lets the transpiler run the real compiler in-process without
a Node.js installation. Every evaluation gets its own interpreter instance, so
callers may evaluate concurrently without coordinating. Exceptions thrown by a
script surface unmodified as `dukpy.JSRuntimeError`.
"""

from __future__ import annotations

import functools
import logging
from typing import Any

import dukpy
from dukpy.tsc import TS_COMPILER

logger = logging.getLogger(__name__)


@functools.lru_cache(maxsize=1)
def compiler_script() -> str:
    """Return the source of the bundled TypeScript services script."""
    with open(TS_COMPILER, "r", encoding="utf-8") as handle:
        source = handle.read()
    logger.debug("Loaded TypeScript compiler script (%d characters)", len(source))
    return source


def evaluate(*chunks: str, **values: Any) -> Any:
    """
    Evaluate JavaScript chunks in a fresh Duktape interpreter.

    Args:
        chunks: Script fragments, evaluated in order as a single program.
        values: JSON-serialisable values exposed to scripts as `dukpy.<name>`.

    Returns:
        The JSON-decoded value of the last expression (`None` for undefined).

    Raises:
        dukpy.JSRuntimeError: If evaluation throws.
    """
    logger.debug(
        "Evaluating %d chunk(s), %d characters, values=%s",
        len(chunks),
        sum(len(chunk) for chunk in chunks),
        sorted(values),
    )
    interpreter = dukpy.JSInterpreter()
    return interpreter.evaljs(list(chunks), **values)


def run_compiler(entry: str, **values: Any) -> Any:
    """Evaluate `entry` with the TypeScript compiler (`ts`) already loaded."""
    return evaluate(compiler_script(), entry, **values)


__all__ = ["compiler_script", "evaluate", "run_compiler"]
