"""Cleaning run persistence.

This module writes cleaned tables, pre-pruning backups, and the JSON
cleaning report of one run into its own directory under the output root.
Runs are never overwritten.
"""

from __future__ import annotations

import hashlib
import json
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Mapping, Sequence

from core.config import PlatterConfig
from core.constants import BACKUPS_DIR_NAME, HASH_ALGORITHM, REPORT_FILE_NAME, TABLES_DIR_NAME
from core.errors import PlatterStoreError
from core.logging_config import get_logger
from core.types import CleaningReport, PruneRelation, Record
from store.record_payload import write_records_jsonl

_LOGGER = get_logger(__name__)


class CleaningRunStore:
    """Filesystem store for cleaning run outputs."""

    def __init__(self, config: PlatterConfig) -> None:
        self._output_root = config.output_root

    def create_run(
        self,
        tables: Mapping[str, Sequence[Record]],
        backups: Mapping[PruneRelation, Sequence[Record]],
        reports: Mapping[str, CleaningReport],
    ) -> tuple[str, Path]:
        """Persist one cleaning run.

        Args:
            tables: Cleaned records per table.
            backups: Pre-pruning child records per prune relation.
            reports: Cleaning report per table.

        Returns:
            Run id and run output directory.

        Raises:
            PlatterStoreError: If the run directory exists or writes fail.
        """
        run_id = build_run_id(tables)
        run_dir = self._output_root / run_id
        try:
            run_dir.mkdir(parents=True, exist_ok=False)
        except OSError as error:
            raise PlatterStoreError(
                f"Failed to create run directory {run_dir}: {error}. "
                "Check PLATTER_OUTPUT_ROOT and retry."
            ) from error
        for table_name, records in tables.items():
            write_records_jsonl(run_dir / TABLES_DIR_NAME / f"{table_name}.jsonl", records)
        for relation, records in backups.items():
            write_records_jsonl(run_dir / BACKUPS_DIR_NAME / backup_file_name(relation), records)
        write_report_file(run_dir / REPORT_FILE_NAME, run_id, reports)
        _LOGGER.info(
            "run_persisted",
            run_id=run_id,
            run_dir=str(run_dir),
            table_count=len(tables),
            backup_count=len(backups),
        )
        return run_id, run_dir


def build_run_id(tables: Mapping[str, Sequence[Record]]) -> str:
    """Build a unique run id from the timestamp, table sizes, and a random suffix."""
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
    digest_seed = "|".join(f"{name}:{len(records)}" for name, records in sorted(tables.items()))
    hasher = hashlib.new(HASH_ALGORITHM)
    hasher.update(digest_seed.encode("utf-8"))
    return f"clean-{timestamp}-{hasher.hexdigest()[:10]}-{uuid.uuid4().hex[:6]}"


def backup_file_name(relation: PruneRelation) -> str:
    """Return the backup file name of a prune relation."""
    return f"{relation.child}__{relation.foreign_key}.jsonl"


def write_report_file(
    report_path: Path,
    run_id: str,
    reports: Mapping[str, CleaningReport],
) -> None:
    """Write the run report as indented JSON.

    Raises:
        PlatterStoreError: If write fails.
    """
    payload = {
        "run_id": run_id,
        "created_at": datetime.now(timezone.utc).isoformat(),
        "tables": {name: report.to_dict() for name, report in reports.items()},
    }
    try:
        report_path.write_text(
            json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
        )
    except OSError as error:
        raise PlatterStoreError(
            f"Failed to write cleaning report at {report_path}: {error}."
        ) from error
