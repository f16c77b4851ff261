"""
Command-line interface for transpiling TypeScript files to CommonJS JavaScript.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List

import dukpy

from frontend import run_pipeline
from runtime import call_export, load_module
from transpiler import MODULE_NAMES, CompilerOptions, transpile

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT)


def _print_diagnostics(messages: List[str]) -> None:
    for message in messages:
        sys.stderr.write(message + "\n")


def _read_source(input_path: Path) -> str | None:
    if not input_path.exists():
        sys.stderr.write(f"ERROR: Input file not found: {input_path}\n")
        return None
    try:
        return input_path.read_text(encoding="utf-8")
    except OSError as exc:
        sys.stderr.write(f"ERROR: Failed to read {input_path}: {exc}\n")
        return None


def transpile_command(args: argparse.Namespace) -> int:
    input_path = Path(args.input).resolve()
    source = _read_source(input_path)
    if source is None:
        return 1

    options = CompilerOptions.for_module(args.module)
    try:
        result = run_pipeline(source, source_name=str(input_path), options=options)
    except dukpy.JSRuntimeError as exc:
        sys.stderr.write(f"ERROR: Transpilation failed: {exc}\n")
        return 1

    output_path = Path(args.out) if args.out else input_path.with_suffix(".js")
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(result.output_text, encoding="utf-8")
    except OSError as exc:
        sys.stderr.write(f"ERROR: Failed to write {output_path}: {exc}\n")
        return 1

    if not args.quiet:
        _print_diagnostics(result.diagnostics)

    if args.exports and result.analysis:
        for name in result.analysis.export_names:
            sys.stdout.write(name + "\n")

    if not args.strict:
        return 0
    has_errors = result.transpile.has_errors or bool(result.parse_errors)
    if result.analysis and result.analysis.issues:
        has_errors = True
    return 1 if has_errors else 0


def run_command(args: argparse.Namespace) -> int:
    input_path = Path(args.input).resolve()
    source = _read_source(input_path)
    if source is None:
        return 1

    try:
        call_args = json.loads(args.args)
    except ValueError as exc:
        sys.stderr.write(f"ERROR: --args is not valid JSON: {exc}\n")
        return 1
    if not isinstance(call_args, list):
        call_args = [call_args]

    try:
        output_text = transpile(source)
        if args.call:
            value = call_export(output_text, args.call, *call_args)
        else:
            value = load_module(output_text)
    except dukpy.JSRuntimeError as exc:
        sys.stderr.write(f"ERROR: {exc}\n")
        return 1

    sys.stdout.write(json.dumps(value) + "\n")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ts2cjs", description="Transpile TypeScript to CommonJS JavaScript"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    subparsers = parser.add_subparsers(dest="command")

    transpile_parser = subparsers.add_parser("transpile", help="Transpile a single TypeScript file")
    transpile_parser.add_argument("input", help="Path to the TypeScript file")
    transpile_parser.add_argument(
        "--out",
        help="Output JavaScript file path (defaults to same directory with .js extension)",
    )
    transpile_parser.add_argument(
        "--module",
        choices=MODULE_NAMES,
        default="commonjs",
        help="Module convention of the emitted code.",
    )
    transpile_parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit non-zero on compiler errors and output analysis warnings.",
    )
    transpile_parser.add_argument(
        "--quiet",
        action="store_true",
        help="Do not print diagnostics.",
    )
    transpile_parser.add_argument(
        "--exports",
        action="store_true",
        help="Print the names exported by the emitted module.",
    )
    transpile_parser.set_defaults(func=transpile_command)

    run_parser = subparsers.add_parser("run", help="Transpile a file and execute it as a CommonJS module")
    run_parser.add_argument("input", help="Path to the TypeScript file")
    run_parser.add_argument("--call", help="Name of an exported function to call")
    run_parser.add_argument(
        "--args",
        default="[]",
        help="JSON array of arguments passed to --call (defaults to [])",
    )
    run_parser.set_defaults(func=run_command)

    return parser


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)
    if not hasattr(args, "func"):
        parser.print_help()
        return 1
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
