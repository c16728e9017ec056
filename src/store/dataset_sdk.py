"""Python SDK for dataset cleaning.

This module exposes high-level APIs for cleaning snapshot directories
and verifying already-cleaned output.
"""

from __future__ import annotations

from typing import Sequence

from core.config import PlatterConfig
from core.types import CleaningReport, CleanOptions, DatasetCleaningResult, Record
from ingest.pipeline import clean_dataset, verify_dataset
from transforms.normalization_pipeline import run
from transforms.rule_base import Rule


class PlatterClient:
    """Primary SDK entry point for cleaning workflows."""

    def __init__(self, config: PlatterConfig | None = None) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
        """
        self._config = config or PlatterConfig.from_env()

    @property
    def config(self) -> PlatterConfig:
        """Return the client's runtime configuration."""
        return self._config

    def clean(self, options: CleanOptions) -> DatasetCleaningResult:
        """Clean a snapshot directory and persist the run.

        Args:
            options: Clean options.

        Returns:
            Persisted run summary.

        Raises:
            PlatterError: If loading, cleaning, or persistence fails.
        """
        return clean_dataset(options, self._config)

    def verify(self, source_dir: str, recipe_path: str | None = None) -> dict[str, CleaningReport]:
        """Re-run a recipe over cleaned tables and return the reports."""
        return verify_dataset(source_dir, recipe_path, self._config)

    def clean_records(
        self,
        records: Sequence[Record],
        rules: Sequence[Rule],
        table_name: str = "",
    ) -> tuple[list[Record], CleaningReport]:
        """Run rules over in-memory records using the client's settings."""
        return run(
            records,
            rules,
            workers=self._config.workers,
            sample_limit=self._config.sample_limit,
            table_name=table_name,
        )
