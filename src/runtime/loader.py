"""
Execute CommonJS modules inside the embedded Duktape engine.

Each call evaluates the entry module in a fresh interpreter wrapped in the
usual `function (exports, require, module)` shim. `require` resolves against
an in-memory mapping of module name to CommonJS source and caches instances
for the duration of the call only. Values cross the boundary as JSON, so
functions in `module.exports` are dropped by `load_module`; use `call_export`
to invoke them.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

from engine import evaluate

logger = logging.getLogger(__name__)

ENTRY_MODULE = "<entry>"

_LOADER = """
var __load = (function (modules) {
    var cache = {};
    function require(name) {
        if (!Object.prototype.hasOwnProperty.call(modules, name)) {
            throw new Error("Cannot find module '" + name + "'");
        }
        return load(name, modules[name]);
    }
    function load(name, code) {
        if (Object.prototype.hasOwnProperty.call(cache, name)) {
            return cache[name].exports;
        }
        var module = { id: name, exports: {} };
        cache[name] = module;
        var factory = new Function("exports", "require", "module", code);
        factory.call(module.exports, module.exports, require, module);
        return module.exports;
    }
    return load;
})(dukpy.modules)
"""

_LOAD_ENTRY = "__load(dukpy.entryName, dukpy.entry)"

_NAMES_ENTRY = "Object.keys(__load(dukpy.entryName, dukpy.entry))"

_CALL_ENTRY = """
(function (exported, name, args) {
    var target = exported === null || exported === undefined ? undefined : exported[name];
    if (typeof target !== "function") {
        throw new TypeError("Export '" + name + "' is not a function");
    }
    return target.apply(exported, args);
})(__load(dukpy.entryName, dukpy.entry), dukpy.exportName, dukpy.args)
"""


def _run(entry_script: str, code: str, modules: Optional[Mapping[str, str]], **values: Any) -> Any:
    registry = dict(modules or {})
    logger.debug("Running CommonJS entry with %d registered module(s)", len(registry))
    return evaluate(
        _LOADER,
        entry_script,
        entry=code,
        entryName=ENTRY_MODULE,
        modules=registry,
        **values,
    )


def load_module(code: str, *, modules: Optional[Mapping[str, str]] = None) -> Any:
    """
    Execute a CommonJS module and return a JSON view of its `module.exports`.

    Args:
        code: CommonJS source of the entry module.
        modules: Sources resolvable through `require(name)`.

    Raises:
        dukpy.JSRuntimeError: If the module (or a required one) throws.
    """
    return _run(_LOAD_ENTRY, code, modules)


def export_names(code: str, *, modules: Optional[Mapping[str, str]] = None) -> List[str]:
    """Enumerable keys of `module.exports` after executing the module."""
    return _run(_NAMES_ENTRY, code, modules) or []


def call_export(
    code: str,
    name: str,
    *args: Any,
    modules: Optional[Mapping[str, str]] = None,
) -> Any:
    """
    Execute a CommonJS module and call one of its exported functions.

    Arguments and the return value must be JSON-serialisable. A missing or
    non-callable export raises a `TypeError` inside the engine.
    """
    return _run(_CALL_ENTRY, code, modules, exportName=name, args=list(args))


__all__ = ["ENTRY_MODULE", "call_export", "export_names", "load_module"]
