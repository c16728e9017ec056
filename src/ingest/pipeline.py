"""Dataset cleaning orchestration.

This module coordinates snapshot loading, per-table rule pipelines,
referential pruning, and run persistence for a whole dataset.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.config import PlatterConfig
from core.errors import PlatterIngestError
from core.logging_config import get_logger
from core.recipe import CleaningRecipe, load_recipe
from core.types import (
    CleaningReport,
    CleanOptions,
    DatasetCleaningResult,
    PruneOutcome,
    PruneRelation,
    Record,
    TableSnapshot,
)
from ingest.input_reader import read_table_snapshots
from store.run_store import CleaningRunStore
from transforms.food_delivery import build_food_delivery_recipe
from transforms.normalization_pipeline import run
from transforms.referential_pruning import prune_orphans
from transforms.rule_registry import build_rules

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class CleanedDataset:
    """In-memory cleaning output before persistence."""

    tables: dict[str, tuple[Record, ...]]
    backups: dict[PruneRelation, tuple[Record, ...]]
    reports: dict[str, CleaningReport]


class CleaningRunner:
    """Runner for one dataset cleaning pass."""

    def __init__(self, recipe: CleaningRecipe, config: PlatterConfig) -> None:
        self._recipe = recipe
        self._config = config

    def clean(self, snapshots: dict[str, TableSnapshot]) -> CleanedDataset:
        """Clean every table, then prune relations in declared order.

        Args:
            snapshots: Loaded table snapshots keyed by table name.

        Returns:
            Cleaned tables, pre-pruning backups, and per-table reports.

        Raises:
            PlatterIngestError: If a table named by the recipe is missing.
            RuleExecutionError: If any rule fails.
        """
        _require_tables(self._recipe, snapshots)
        tables: dict[str, tuple[Record, ...]] = {}
        reports: dict[str, CleaningReport] = {}
        for table_name, snapshot in snapshots.items():
            rules = build_rules(self._recipe.tables.get(table_name, ()))
            cleaned, report = run(
                snapshot.records,
                rules,
                workers=self._config.workers,
                sample_limit=self._config.sample_limit,
                table_name=table_name,
            )
            tables[table_name] = tuple(cleaned)
            reports[table_name] = report
            _LOGGER.info(
                "table_cleaned",
                table_name=table_name,
                input_count=report.input_count,
                output_count=report.output_count,
                records_changed=report.total_changed,
            )
        backups = self._prune(tables, reports)
        return CleanedDataset(tables=tables, backups=backups, reports=reports)

    def _prune(
        self,
        tables: dict[str, tuple[Record, ...]],
        reports: dict[str, CleaningReport],
    ) -> dict[PruneRelation, tuple[Record, ...]]:
        backups: dict[PruneRelation, tuple[Record, ...]] = {}
        for relation in self._recipe.relations:
            result = prune_orphans(
                tables[relation.child],
                tables[relation.parent],
                relation.foreign_key,
                relation.parent_key,
            )
            backups[relation] = result.backup
            tables[relation.child] = result.kept
            child_report = reports[relation.child]
            child_report.prune_outcomes[relation.name] = PruneOutcome(
                relation_name=relation.name,
                pruned_count=len(result.pruned),
                backup_count=len(result.backup),
            )
            child_report.output_count = len(result.kept)
        return backups


def clean_dataset(options: CleanOptions, config: PlatterConfig) -> DatasetCleaningResult:
    """Clean a snapshot directory and persist the run.

    Args:
        options: Clean request options.
        config: Runtime configuration.

    Returns:
        Persisted run summary with cleaned tables and reports.

    Raises:
        PlatterIngestError: If snapshots cannot be read.
        PlatterRecipeError: If the recipe is invalid.
        RuleExecutionError: If any rule fails; nothing is persisted.
        PlatterStoreError: If persistence fails.
    """
    recipe = resolve_recipe(options.recipe_path)
    snapshots = read_table_snapshots(options.source_dir)
    cleaned = CleaningRunner(recipe, config).clean(snapshots)
    run_id, run_dir = CleaningRunStore(config).create_run(
        cleaned.tables, cleaned.backups, cleaned.reports
    )
    _LOGGER.info(
        "dataset_cleaned",
        run_id=run_id,
        source_dir=options.source_dir,
        table_count=len(cleaned.tables),
        records_changed=sum(report.total_changed for report in cleaned.reports.values()),
        records_pruned=sum(report.total_pruned for report in cleaned.reports.values()),
    )
    return DatasetCleaningResult(
        run_id=run_id,
        output_dir=run_dir,
        reports=cleaned.reports,
        tables=cleaned.tables,
    )


def verify_dataset(
    source_dir: str,
    recipe_path: str | None,
    config: PlatterConfig,
) -> dict[str, CleaningReport]:
    """Re-run the recipe over already-cleaned tables without persisting.

    Clean data yields reports with no changes and no pruned records.

    Returns:
        Per-table reports of the verification pass.
    """
    recipe = resolve_recipe(recipe_path)
    snapshots = read_table_snapshots(source_dir)
    return CleaningRunner(recipe, config).clean(snapshots).reports


def resolve_recipe(recipe_path: str | None) -> CleaningRecipe:
    """Load a recipe file, or fall back to the food-delivery recipe."""
    if recipe_path is None:
        return build_food_delivery_recipe()
    return load_recipe(recipe_path)


def _require_tables(recipe: CleaningRecipe, snapshots: dict[str, TableSnapshot]) -> None:
    missing_tables = [name for name in recipe.table_names if name not in snapshots]
    if missing_tables:
        raise PlatterIngestError(
            f"Snapshot directory is missing tables required by the recipe: "
            f"{', '.join(missing_tables)}. Add one file per missing table."
        )
