"""Platter CLI entry points.
This module exposes commands for cleaning and verifying table snapshots.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from cli.verify_command import add_verify_command, run_verify_command
from core.config import PlatterConfig
from core.errors import PlatterError, RuleExecutionError
from core.types import CleanOptions
from store.dataset_sdk import PlatterClient
from transforms.rule_registry import describe_rule_kinds


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="platter", description="Platter dataset cleaning CLI")
    parser.add_argument("--output-root", help="Override PLATTER_OUTPUT_ROOT for this command")
    parser.add_argument("--workers", type=int, help="Override PLATTER_WORKERS for this command")
    parser.add_argument(
        "--sample-limit",
        type=int,
        help="Override PLATTER_SAMPLE_LIMIT for this command",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_clean_command(subparsers)
    add_verify_command(subparsers)
    _add_rules_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Platter CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        client = _build_client(args)
        if args.command == "clean":
            return _run_clean_command(client, args)
        if args.command == "verify":
            return run_verify_command(client, args)
        if args.command == "rules":
            return _run_rules_command()
    except RuleExecutionError as error:
        print(f"error={error}")
        print(f"failed_rule={error.rule_name}\tfailed_record={error.record_index}")
        return 1
    except PlatterError as error:
        print(f"error={error}")
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_client(args: argparse.Namespace) -> PlatterClient:
    """Build SDK client with optional config overrides.

    Args:
        args: Parsed CLI args.

    Returns:
        Configured SDK client.
    """
    config = PlatterConfig.from_env()
    if args.output_root:
        config = replace(config, output_root=Path(args.output_root).expanduser().resolve())
    if args.workers is not None:
        config = replace(config, workers=args.workers)
    if args.sample_limit is not None:
        config = replace(config, sample_limit=args.sample_limit)
    return PlatterClient(config)


def _run_clean_command(client: PlatterClient, args: argparse.Namespace) -> int:
    """Handle clean command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    options = CleanOptions(source_dir=args.source, recipe_path=args.recipe)
    result = client.clean(options)
    for table_name, report in result.reports.items():
        print(
            f"{table_name}\t"
            f"{report.input_count}\t"
            f"{report.output_count}\t"
            f"{report.total_changed}\t"
            f"{report.total_pruned}"
        )
    print(f"run_id={result.run_id}")
    print(f"output_dir={result.output_dir}")
    return 0


def _run_rules_command() -> int:
    """Handle rules command."""
    for kind, summary in describe_rule_kinds():
        print(f"{kind}\t{summary}")
    return 0


def _add_clean_command(subparsers: Any) -> None:
    """Register clean subcommand."""
    parser = subparsers.add_parser("clean", help="Clean a directory of table snapshots")
    parser.add_argument("source", help="Directory with one .csv/.jsonl/.parquet file per table")
    parser.add_argument("--recipe", help="Optional YAML recipe; built-in recipe if omitted")


def _add_rules_command(subparsers: Any) -> None:
    """Register rules subcommand."""
    subparsers.add_parser("rules", help="List supported rule kinds")
