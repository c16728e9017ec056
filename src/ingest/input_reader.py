"""Table snapshot readers.

This module loads one record set per table from a snapshot directory.
The file stem names the table; CSV, JSONL, and Parquet are supported.
Empty CSV fields are read as nulls.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any

from core.constants import SUPPORTED_TABLE_EXTENSIONS
from core.errors import PlatterDependencyError, PlatterIngestError
from core.types import Record, RecordValue, TableSnapshot


def read_table_snapshots(source_dir: str) -> dict[str, TableSnapshot]:
    """Load every supported table snapshot under a directory.

    Args:
        source_dir: Directory holding one file per table.

    Returns:
        Snapshots keyed by table name.

    Raises:
        PlatterIngestError: If the directory is missing, empty, or holds
            two files for the same table.
    """
    source_path = Path(source_dir).expanduser()
    if not source_path.is_dir():
        raise PlatterIngestError(
            f"Failed to read snapshots at {source_path}: directory does not exist. "
            "Provide a directory with one file per table."
        )
    snapshots: dict[str, TableSnapshot] = {}
    for file_path in sorted(source_path.iterdir()):
        if not file_path.is_file() or not _is_supported_file(file_path):
            continue
        if file_path.stem in snapshots:
            raise PlatterIngestError(
                f"Table '{file_path.stem}' has more than one snapshot file in {source_path}. "
                "Keep exactly one file per table."
            )
        snapshots[file_path.stem] = read_table_snapshot(file_path)
    if not snapshots:
        raise PlatterIngestError(
            f"No table snapshots found under {source_path}. "
            f"Supported extensions: {SUPPORTED_TABLE_EXTENSIONS}."
        )
    return snapshots


def read_table_snapshot(file_path: Path) -> TableSnapshot:
    """Read one table snapshot file.

    Args:
        file_path: CSV, JSONL, or Parquet file.

    Returns:
        Snapshot named after the file stem.

    Raises:
        PlatterIngestError: If the file cannot be parsed.
    """
    suffix = file_path.suffix.lower()
    if suffix == ".csv":
        records = _read_csv_records(file_path)
    elif suffix == ".jsonl":
        records = _read_jsonl_records(file_path)
    elif suffix == ".parquet":
        records = _read_parquet_records(file_path)
    else:
        raise PlatterIngestError(
            f"Unsupported snapshot file {file_path}. "
            f"Supported extensions: {SUPPORTED_TABLE_EXTENSIONS}."
        )
    return TableSnapshot(name=file_path.stem, records=tuple(records), source_path=file_path)


def _read_csv_records(file_path: Path) -> list[Record]:
    """Read CSV rows; a UTF-8 BOM is tolerated."""
    try:
        with file_path.open(encoding="utf-8-sig", newline="") as handle:
            reader = csv.DictReader(handle)
            if reader.fieldnames is None:
                raise PlatterIngestError(
                    f"CSV snapshot {file_path} has no header row. Add column names and retry."
                )
            records: list[Record] = []
            for line_number, row in enumerate(reader, 2):
                if None in row:
                    raise PlatterIngestError(
                        f"CSV snapshot row {file_path}:{line_number} has more fields "
                        "than the header. Fix the row and retry."
                    )
                records.append({column: (value or None) for column, value in row.items()})
            return records
    except (OSError, UnicodeDecodeError, csv.Error) as error:
        raise PlatterIngestError(f"Failed to read CSV snapshot {file_path}: {error}.") from error


def _read_jsonl_records(file_path: Path) -> list[Record]:
    records: list[Record] = []
    for line_number, line in enumerate(file_path.read_text(encoding="utf-8").splitlines(), 1):
        if not line.strip():
            continue
        records.append(_parse_jsonl_line(file_path, line, line_number))
    return records


def _parse_jsonl_line(file_path: Path, line: str, line_number: int) -> Record:
    """Parse and validate a JSONL row.

    Raises:
        PlatterIngestError: If the line is not a flat JSON object.
    """
    try:
        payload = json.loads(line)
    except json.JSONDecodeError as error:
        raise PlatterIngestError(
            f"Failed to parse JSONL record at {file_path}:{line_number}: "
            f"{error.msg}. Fix the JSON syntax and retry."
        ) from error
    if not isinstance(payload, dict):
        raise PlatterIngestError(
            f"Invalid JSONL record at {file_path}:{line_number}: expected a JSON object."
        )
    return {
        str(column): _validate_scalar(value, f"{file_path}:{line_number}", str(column))
        for column, value in payload.items()
    }


def _read_parquet_records(file_path: Path) -> list[Record]:
    """Read a Parquet snapshot through pyarrow.

    Raises:
        PlatterDependencyError: If pyarrow is missing.
        PlatterIngestError: If the file cannot be read.
    """
    try:
        import pyarrow.parquet as pq
    except ImportError as error:
        raise PlatterDependencyError(
            "Parquet snapshots require pyarrow, but it is not installed. "
            "Install the 'parquet' extra to read .parquet tables."
        ) from error
    try:
        rows: list[dict[str, Any]] = pq.read_table(file_path).to_pylist()
    except Exception as error:
        raise PlatterIngestError(
            f"Failed to read Parquet snapshot {file_path}: {error}."
        ) from error
    return [
        {
            column: _validate_scalar(value, f"{file_path}#{index}", column)
            for column, value in row.items()
        }
        for index, row in enumerate(rows)
    ]


def _validate_scalar(value: object, location: str, column: str) -> RecordValue:
    if value is None or isinstance(value, (str, float)):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    raise PlatterIngestError(
        f"Unsupported value in column '{column}' at {location}: "
        f"expected string, number, or null, got {type(value).__name__}."
    )


def _is_supported_file(file_path: Path) -> bool:
    """Return whether a local file extension is supported."""
    return file_path.suffix.lower() in SUPPORTED_TABLE_EXTENSIONS
