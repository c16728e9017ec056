"""Verification command wiring for Platter CLI."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any

from core.constants import TABLES_DIR_NAME
from store.dataset_sdk import PlatterClient


def add_verify_command(subparsers: Any) -> None:
    """Register verify subcommand."""
    parser = subparsers.add_parser(
        "verify",
        help="Re-run the recipe over cleaned tables and fail on any change",
    )
    parser.add_argument("source", help="Cleaning run directory or table snapshot directory")
    parser.add_argument("--recipe", help="Optional YAML recipe; built-in recipe if omitted")


def run_verify_command(client: PlatterClient, args: argparse.Namespace) -> int:
    """Execute verification and print one status row per table."""
    reports = client.verify(_resolve_tables_dir(args.source), args.recipe)
    dirty_tables = 0
    for table_name, report in reports.items():
        is_clean = report.total_changed == 0 and report.total_pruned == 0
        dirty_tables += 0 if is_clean else 1
        status = "clean" if is_clean else "dirty"
        print(f"{table_name}\t{status}\t{report.total_changed}\t{report.total_pruned}")
    print(f"verified_tables={len(reports)} dirty_tables={dirty_tables}")
    return 0 if dirty_tables == 0 else 1


def _resolve_tables_dir(source: str) -> str:
    """Use the run's tables directory when a run directory is given."""
    tables_dir = Path(source).expanduser() / TABLES_DIR_NAME
    return str(tables_dir) if tables_dir.is_dir() else source
