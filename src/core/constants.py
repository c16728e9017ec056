"""Core constants used across Platter modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_OUTPUT_ROOT = Path(".platter")
DEFAULT_WORKERS = 1
DEFAULT_SAMPLE_LIMIT = 5
TABLES_DIR_NAME = "tables"
BACKUPS_DIR_NAME = "backups"
REPORT_FILE_NAME = "report.json"
SUPPORTED_TABLE_EXTENSIONS = (".csv", ".jsonl", ".parquet")
RECIPE_VERSION = 1
DEFAULT_LIST_DELIMITER = ","
DEFAULT_NOISE_SUBSTRING = "\\"
HASH_ALGORITHM = "sha256"
