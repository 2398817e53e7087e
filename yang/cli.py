"""Command-line driver for yang.

Two subcommands:

* ``yang build [INPUT]`` generates Rust code for every concept in the input
  file (``yin.md``/``yin.yml``/``yin.yaml`` in the current directory by
  default).
* ``yang clean`` deletes every file recorded in the autogeneration manifest.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from yang.codegen.generator import CodeGenerator
from yang.codegen.ledger import clean_autogen
from yang.config import CodegenConfig
from yang.errors import YangError
from yang.parser import find_input, load_requests
from yang.utils import console, print_error, print_success, print_summary_table


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="yang",
        description="Yang -- code generator for concepts built on the Yin knowledge base",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  yang build\n"
            "  yang build concepts.md -o ./my-crate --track-autogen\n"
            "  yang clean\n"
        ),
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="Generate code from an input file")
    build.add_argument(
        "input",
        nargs="?",
        default=None,
        help="Markdown or YAML input file (default: yin.md, yin.yml or yin.yaml)",
    )
    build.add_argument(
        "--output", "-o",
        default=None,
        help="Crate root that generated paths are relative to (default: .)",
    )
    build.add_argument(
        "--config",
        default=None,
        help="JSON file with saved codegen options (default: read YANG_* variables)",
    )
    build.add_argument("--yin", action="store_true", help="Generate the base library itself")
    build.add_argument("--release", action="store_true", help="Skip all postprocessing")
    build.add_argument(
        "--track-autogen",
        action="store_true",
        help="Record generated files in the manifest and print cargo rerun lines",
    )
    build.add_argument(
        "--no-comment-autogen",
        action="store_true",
        help="Do not mark generated lines as autogenerated",
    )
    build.add_argument("--width", type=int, default=None, help="Maximum line width")
    build.add_argument(
        "--current-crate",
        default=None,
        help="Name of the crate being generated, rewritten to crate:: in imports",
    )
    build.add_argument(
        "--no-init",
        action="store_true",
        help="Do not generate the knowledge-base init file",
    )
    build.add_argument(
        "--no-modules",
        action="store_true",
        help="Do not generate mod.rs files for concept modules",
    )

    clean = subparsers.add_parser("clean", help="Delete previously generated files")
    clean.add_argument(
        "--tracker",
        default=None,
        help="Manifest file listing generated files (default: .autogen.txt)",
    )
    return parser


def _resolve_config(args: argparse.Namespace) -> CodegenConfig:
    config = CodegenConfig.load(Path(args.config)) if args.config else CodegenConfig.from_env()

    overrides: dict[str, Any] = {}
    if args.output:
        overrides["output_root"] = Path(args.output)
    if args.yin:
        overrides["yin"] = True
    if args.release:
        overrides["release"] = True
    if args.track_autogen:
        overrides["track_autogen"] = True
    if args.no_comment_autogen:
        overrides["comment_autogen"] = False
    if args.width is not None:
        overrides["code_width"] = args.width
    if args.current_crate:
        overrides["current_crate"] = args.current_crate
    # re-validate so that overrides go through the same field constraints
    return CodegenConfig.model_validate({**config.model_dump(), **overrides})


def _build(args: argparse.Namespace) -> None:
    config = _resolve_config(args)
    input_path = find_input(args.input)
    requests = load_requests(input_path)
    if not requests:
        console.print(f"[bold yellow]No concepts found in {input_path}[/bold yellow]")
        return

    generator = CodeGenerator(config)
    written = generator.generate(
        requests, include_init=not args.no_init, include_modules=not args.no_modules
    )
    print_summary_table(
        {
            "Input": str(input_path),
            "Concepts": str(len(requests)),
            "Files written": str(len(written)),
            "Mode": "yin" if config.yin else "yang",
            "Release": str(config.release),
        },
        title="Generation Summary",
    )
    print_success("Code generation complete.")


def _clean(args: argparse.Namespace) -> None:
    tracker = Path(args.tracker) if args.tracker else CodegenConfig.from_env().tracker_path
    removed = clean_autogen(tracker)
    if removed:
        print_success(f"Removed {len(removed)} generated file(s).")


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entry point for ``yang`` and ``python -m yang``."""
    args = _build_parser().parse_args(argv)
    try:
        if args.command == "build":
            _build(args)
        else:
            _clean(args)
    except (YangError, FileNotFoundError, ValidationError) as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
