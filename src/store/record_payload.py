"""JSONL persistence helpers for table records.

This module writes record sets as one JSON object per line, keeping
column order and null values intact.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Sequence

from core.errors import PlatterStoreError
from core.types import Record


def write_records_jsonl(records_path: Path, records: Sequence[Record]) -> None:
    """Write records to a JSONL file.

    Args:
        records_path: Destination file.
        records: Records to persist in order.

    Raises:
        PlatterStoreError: If write fails.
    """
    lines = [json.dumps(dict(record), ensure_ascii=False) for record in records]
    payload = "\n".join(lines) + "\n" if lines else ""
    try:
        records_path.parent.mkdir(parents=True, exist_ok=True)
        records_path.write_text(payload, encoding="utf-8")
    except OSError as error:
        raise PlatterStoreError(
            f"Failed to persist records at {records_path}: {error}. "
            "Check write permissions and available disk space."
        ) from error
