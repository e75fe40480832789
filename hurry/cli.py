"""Command-line entry point for the offline shorthand generator.

Usage::

    python -m hurry types.yaml -o myapp/shorthands.py
    python -m hurry myapp/models.py --dry-run
    python -m hurry types.json --reserved widget --reserved gadget
"""

from __future__ import annotations

import argparse
import asyncio
import time
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from hurry.config import GeneratorConfig
from hurry.shorthand.errors import ShorthandError
from hurry.shorthand.extractor import load_declarations
from hurry.shorthand.generator import ShorthandGenerator
from hurry.shorthand.models import TypeDeclaration
from hurry.utils import (
    console,
    format_duration,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hurry",
        description="hurry -- generate shorthand constructor functions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python -m hurry types.yaml -o shorthands.py\n"
            "  python -m hurry myapp/models.py --dry-run\n"
        ),
    )
    parser.add_argument(
        "inputs",
        nargs="+",
        help="Manifest (.yaml/.yml/.json) or Python source files to scan",
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Generated module path (default: shorthands.py or $HURRY_OUTPUT)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="JSON configuration file saved by GeneratorConfig.save()",
    )
    parser.add_argument(
        "--module",
        default=None,
        help="Import path of the types in scanned .py inputs (default: file stem), and of manifest types that name none",
    )
    parser.add_argument(
        "--reserved",
        action="append",
        default=[],
        help="Name already bound in the generated module (repeatable)",
    )
    parser.add_argument(
        "--all",
        action="store_true",
        help="Generate for every declaration, not only those carrying the marker",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the generated module instead of writing it",
    )
    return parser


def _build_config(args: argparse.Namespace) -> GeneratorConfig:
    config = GeneratorConfig.load(Path(args.config)) if args.config else GeneratorConfig.from_env()
    updates: dict[str, object] = {}
    if args.output:
        updates["output_path"] = Path(args.output)
    if args.reserved:
        updates["reserved_names"] = [*config.reserved_names, *args.reserved]
    if args.all:
        updates["require_marker"] = False
    return config.model_copy(update=updates)


def _collect(paths: list[str], module: Optional[str]) -> list[TypeDeclaration]:
    declarations: list[TypeDeclaration] = []
    for raw in paths:
        declarations.extend(load_declarations(raw, module))
    return declarations


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entry point for ``python -m hurry``.  Returns the exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    missing = [p for p in args.inputs if not Path(p).exists()]
    if missing:
        print_error(f"Error: input file not found: {', '.join(missing)}")
        return 2
    if args.config and not Path(args.config).is_file():
        print_error(f"Error: config file not found: {args.config}")
        return 2

    started = time.monotonic()
    try:
        config = _build_config(args)
        declarations = _collect(args.inputs, args.module)
        generator = ShorthandGenerator(config)
        result = generator.run(declarations)
        if args.dry_run:
            console.print(generator.render(result), markup=False, highlight=False, soft_wrap=True)
        else:
            path = asyncio.run(generator.write(result))
    except ShorthandError as exc:
        print_error(f"Generation failed for {exc.type_name} [{exc.rule}]: {exc}")
        return 1
    except (ValidationError, ValueError, SyntaxError, yaml.YAMLError) as exc:
        print_error(f"Invalid declarations: {exc}")
        return 1
    except OSError as exc:
        print_error(f"Error: {exc}")
        return 1

    for name in result.skipped:
        print_warning(f"Skipped {name}: no shorthand marker")
    if not args.dry_run:
        print_summary_table(
            [
                (item.name, item.shorthand.owner, "*" if item.shorthand.variadic else str(item.shorthand.arity))
                for item in result.callables
            ],
            ["Shorthand", "Type", "Arity"],
            title="Generated shorthands",
        )
        print_success(
            f"Wrote {len(result.callables)} shorthand(s) to {path} "
            f"in {format_duration(time.monotonic() - started)}"
        )
    return 0
