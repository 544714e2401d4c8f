#!/usr/bin/env python3
"""Compile a template file (or stdin) to a JavaScript render factory."""

import argparse
import os
import sys

# Ensure project root is on the path
_this_dir = os.path.dirname(os.path.abspath(__file__))
_project_root = os.path.dirname(_this_dir)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from template_compiler import (
    CodeGenOptions,
    TemplateCompileError,
    build_ssa,
    compile_template,
    format_ir,
    parse,
)


def add_compiler_flags(parser: argparse.ArgumentParser) -> None:
    """Add compiler diagnostic flags to an argument parser."""
    parser.add_argument("--print-ir", action="store_true",
                        help="Print the optimized SSA IR instead of generated code")
    parser.add_argument("--print-after-all", action="store_true",
                        help="Print IR after each compilation pass")
    parser.add_argument("--print-metrics", action="store_true",
                        help="Print pass metrics and diagnostics")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Template compiler")
    parser.add_argument("source", nargs="?", help="Path to a template file (default: stdin)")
    parser.add_argument("--debug", action="store_true",
                        help="Readable output: no minification, no caching")
    parser.add_argument("--target", choices=["js", "wasm"], default="js",
                        help="Emission target (default: js)")
    parser.add_argument("--no-inline-cache", action="store_true",
                        help="Disable the runtime element cache")
    parser.add_argument("--no-static-optimization", action="store_true",
                        help="Disable compile-time deduplication of static literals")
    add_compiler_flags(parser)
    return parser


def options_from_args(args: argparse.Namespace) -> CodeGenOptions:
    """Translate CLI flags into codegen options."""
    if args.debug:
        return CodeGenOptions(target=args.target, minify=False,
                              inline_cache=False, static_optimization=False)
    return CodeGenOptions(
        target=args.target,
        minify=True,
        inline_cache=not args.no_inline_cache,
        static_optimization=not args.no_static_optimization,
    )


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        if args.source:
            with open(args.source) as f:
                source = f.read()
        else:
            source = sys.stdin.read()
    except OSError as exc:
        print(f"error: unable to read source: {exc}", file=sys.stderr)
        return 1

    try:
        if args.print_ir:
            ir = build_ssa(parse(source),
                           print_after_all=args.print_after_all,
                           print_metrics=args.print_metrics)
            print(format_ir(ir))
        else:
            code = compile_template(
                source,
                options_from_args(args),
                print_after_all=args.print_after_all,
                print_metrics=args.print_metrics,
            )
            print(code)
    except TemplateCompileError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
