"""Command-line interface for craft-config-gen.

Usage::

    craft-config-gen field --name "Heading" --handle heading --field-type text
    craft-config-gen entry-type --name Page --handle page --fields heading body
    craft-config-gen generate --config content-model.json --output-dir config/project
    craft-config-gen example --output example-config.json
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

from craftgen.compiler.emitter import ProjectWriter, serialize, write_record
from craftgen.compiler.entry_types import build_adhoc_entry_type
from craftgen.compiler.fields import build_field
from craftgen.compiler.project import ProjectCompiler
from craftgen.config import GeneratorConfig
from craftgen.errors import ConfigGenError, InputError, OutputError
from craftgen.identity import make_uid_generator
from craftgen.schema.models import ProjectDeclaration, load_project, validate_handle
from craftgen.target.models import ConfigRecord
from craftgen.utils import (
    print_error,
    print_record,
    print_success,
    print_summary_table,
    print_warning,
    save_json,
)

DEFAULT_EXAMPLE_PATH = "example-config.json"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _config_from_args(args: argparse.Namespace) -> GeneratorConfig:
    """Environment settings, overridden by any flags given on the command line."""
    try:
        config = GeneratorConfig.from_env()
    except ValueError as exc:
        raise InputError(f"Invalid CRAFTGEN_* environment setting: {exc}") from exc
    updates: dict[str, Any] = {}
    if getattr(args, "output_dir", None):
        updates["output_dir"] = Path(args.output_dir)
    if getattr(args, "strict", False):
        updates["strict"] = True
    if getattr(args, "seed", None) is not None:
        updates["seed"] = args.seed
    if getattr(args, "format", None):
        updates["output_format"] = args.format
    if getattr(args, "no_stage", False):
        updates["stage_writes"] = False
    return config.model_copy(update=updates)


def _split_handles(values: Sequence[str]) -> list[str]:
    """Accept ``--fields a b`` as well as ``--fields a,b``."""
    handles: list[str] = []
    for value in values:
        handles.extend(part.strip() for part in value.split(",") if part.strip())
    return handles


def _emit(record: ConfigRecord, config: GeneratorConfig, output: Optional[str], label: str) -> None:
    if output:
        path = write_record(record, output, config.output_format)
        print_success(f"{label} config written to: {path}")
    else:
        print_record(serialize(record, config.output_format))


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def cmd_field(args: argparse.Namespace) -> None:
    config = _config_from_args(args)
    validate_handle(args.handle)
    record = build_field(
        args.field_type,
        args.name,
        args.handle,
        args.instructions,
        searchable=args.searchable,
        uids=make_uid_generator(config.seed),
    )
    _emit(record, config, args.output, "Field")


def cmd_entry_type(args: argparse.Namespace) -> None:
    config = _config_from_args(args)
    validate_handle(args.handle, "entry type")
    field_handles = [validate_handle(h) for h in _split_handles(args.fields)]
    record = build_adhoc_entry_type(
        args.name,
        args.handle,
        field_handles,
        has_title_field=not args.no_title_field,
        uids=make_uid_generator(config.seed),
    )
    _emit(record, config, args.output, "Entry type")


def cmd_generate(args: argparse.Namespace) -> None:
    config = _config_from_args(args)
    project = load_project(args.config)

    result = ProjectCompiler(config).compile(project)
    for warning in result.warnings:
        print_warning(warning.message)

    written = ProjectWriter(config).write(result)

    print_summary_table(
        {
            "Fields": str(len(result.fields)),
            "Entry types": str(len(result.entry_types)),
            "Skipped": str(len(result.warnings)),
            "Files written": str(len(written)),
        },
        title="Project config",
    )
    print_success(f"Project config files generated in: {config.output_dir}")


def cmd_example(args: argparse.Namespace) -> None:
    example = ProjectDeclaration.example()
    try:
        path = save_json(example.model_dump(mode="json", exclude_none=True), args.output)
    except OSError as exc:
        raise OutputError(f"Failed to write {args.output}: {exc}") from exc
    print_success(f"Example config written to: {path}")


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for reproducible identifiers (random when omitted)",
    )
    parser.add_argument(
        "--format",
        choices=["yaml", "json"],
        default=None,
        help="Output format (default: yaml)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="craft-config-gen",
        description="Generate Craft CMS project config files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  craft-config-gen field --name Heading --handle heading --field-type text\n"
            "  craft-config-gen entry-type --name Page --handle page --fields heading,body\n"
            "  craft-config-gen generate --config content-model.json\n"
            "  craft-config-gen example --output example-config.json\n"
        ),
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    field_parser = subparsers.add_parser("field", help="Generate a single field config")
    field_parser.add_argument("--name", required=True, help="Field display name")
    field_parser.add_argument("--handle", required=True, help="Field handle")
    field_parser.add_argument(
        "--field-type", required=True, help="Field type, e.g. text, textarea, richtext, image"
    )
    field_parser.add_argument("--instructions", default=None, help="Instructions for editors")
    field_parser.add_argument(
        "--searchable", action="store_true", help="Mark the field as searchable"
    )
    field_parser.add_argument("--output", "-o", default=None, help="Write to this file")
    _add_common_options(field_parser)
    field_parser.set_defaults(handler=cmd_field)

    entry_parser = subparsers.add_parser("entry-type", help="Generate a single entry type config")
    entry_parser.add_argument("--name", required=True, help="Entry type display name")
    entry_parser.add_argument("--handle", required=True, help="Entry type handle")
    entry_parser.add_argument(
        "--fields",
        nargs="*",
        default=[],
        help="Field handles in layout order (space- or comma-separated)",
    )
    entry_parser.add_argument(
        "--no-title-field", action="store_true", help="Leave the title element out of the layout"
    )
    entry_parser.add_argument("--output", "-o", default=None, help="Write to this file")
    _add_common_options(entry_parser)
    entry_parser.set_defaults(handler=cmd_entry_type)

    generate_parser = subparsers.add_parser(
        "generate", help="Generate a project config tree from a JSON description"
    )
    generate_parser.add_argument("--config", required=True, help="Path to the project JSON file")
    generate_parser.add_argument(
        "--output-dir",
        default=None,
        help="Output directory (default: config/project)",
    )
    generate_parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on unsupported field types and unknown field references",
    )
    generate_parser.add_argument(
        "--no-stage",
        action="store_true",
        help="Write files in place instead of staging them first",
    )
    _add_common_options(generate_parser)
    generate_parser.set_defaults(handler=cmd_generate)

    example_parser = subparsers.add_parser("example", help="Write a sample project JSON file")
    example_parser.add_argument(
        "--output",
        "-o",
        default=DEFAULT_EXAMPLE_PATH,
        help=f"Destination file (default: {DEFAULT_EXAMPLE_PATH})",
    )
    example_parser.set_defaults(handler=cmd_example)

    return parser


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main(argv: Optional[Sequence[str]] = None) -> None:
    """CLI entry point for ``craft-config-gen`` and ``python -m craftgen``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        args.handler(args)
    except ConfigGenError as exc:
        print_error(str(exc))
        sys.exit(1)


if __name__ == "__main__":
    main()
