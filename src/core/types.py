"""Shared typed models.

This module defines the record, report, and request models used by
transforms, ingest, store, and CLI layers to keep interfaces explicit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Union

RecordValue = Union[str, int, float, None]
Record = Mapping[str, RecordValue]


@dataclass(frozen=True)
class SampleDiff:
    """One before/after value pair captured for auditability.

    Attributes:
        record_index: Zero-based position of the record in the original
            pipeline input, stable across earlier removals.
        column: Column whose value changed, or the column identifying a
            removed record.
        before: Value before the rule ran.
        after: Value after the rule ran; None when the record was removed.
    """

    record_index: int
    column: str
    before: RecordValue
    after: RecordValue


@dataclass(frozen=True)
class RuleOutcome:
    """Per-rule counters accumulated by one pipeline run.

    Attributes:
        rule_name: Unique rule name within the run.
        kind: Rule kind identifier.
        records_changed: Number of records whose values changed.
        records_removed: Number of records dropped by set-level rules.
        sample_diffs: Ordered sample of changed values or removed records.
    """

    rule_name: str
    kind: str
    records_changed: int = 0
    records_removed: int = 0
    sample_diffs: tuple[SampleDiff, ...] = ()


@dataclass(frozen=True)
class PruneOutcome:
    """Result counters for one referential-pruning step.

    Attributes:
        relation_name: Relation identifier, ``child.fk->parent.key``.
        pruned_count: Child records removed as orphans.
        backup_count: Child records kept in the pre-prune backup.
    """

    relation_name: str
    pruned_count: int
    backup_count: int


@dataclass(frozen=True)
class RuleFailure:
    """Failure location recorded when a rule aborts a run."""

    rule_name: str
    record_index: int | None
    message: str


@dataclass
class CleaningReport:
    """Accumulated audit report for one table cleaning run.

    Attributes:
        table_name: Logical table the report describes.
        input_count: Records handed to the pipeline.
        output_count: Records remaining after all rules and pruning.
        rule_outcomes: Per-rule outcomes in rule execution order.
        prune_outcomes: Per-relation pruning outcomes.
        failure: Failure location when the run aborted.
    """

    table_name: str = ""
    input_count: int = 0
    output_count: int = 0
    rule_outcomes: dict[str, RuleOutcome] = field(default_factory=dict)
    prune_outcomes: dict[str, PruneOutcome] = field(default_factory=dict)
    failure: RuleFailure | None = None

    @property
    def total_changed(self) -> int:
        """Return changed plus removed records across all rules."""
        return sum(
            outcome.records_changed + outcome.records_removed
            for outcome in self.rule_outcomes.values()
        )

    @property
    def total_pruned(self) -> int:
        """Return records removed by referential pruning."""
        return sum(outcome.pruned_count for outcome in self.prune_outcomes.values())

    def to_dict(self) -> dict[str, object]:
        """Serialize report to a JSON-safe dictionary."""
        return {
            "table_name": self.table_name,
            "input_count": self.input_count,
            "output_count": self.output_count,
            "rules": {
                name: {
                    "kind": outcome.kind,
                    "records_changed": outcome.records_changed,
                    "records_removed": outcome.records_removed,
                    "sample_diffs": [
                        {
                            "record_index": diff.record_index,
                            "column": diff.column,
                            "before": diff.before,
                            "after": diff.after,
                        }
                        for diff in outcome.sample_diffs
                    ],
                }
                for name, outcome in self.rule_outcomes.items()
            },
            "pruning": {
                name: {
                    "pruned_count": outcome.pruned_count,
                    "backup_count": outcome.backup_count,
                }
                for name, outcome in self.prune_outcomes.items()
            },
            "failure": None
            if self.failure is None
            else {
                "rule_name": self.failure.rule_name,
                "record_index": self.failure.record_index,
                "message": self.failure.message,
            },
        }


@dataclass(frozen=True)
class PruneRelation:
    """Foreign-key relation used for referential pruning.

    Attributes:
        child: Child table name.
        foreign_key: Child column referencing the parent.
        parent: Parent table name.
        parent_key: Parent key column.
    """

    child: str
    foreign_key: str
    parent: str
    parent_key: str

    @property
    def name(self) -> str:
        """Return stable relation identifier."""
        return f"{self.child}.{self.foreign_key}->{self.parent}.{self.parent_key}"


@dataclass(frozen=True)
class PruneResult:
    """Referential pruning output.

    Attributes:
        kept: Child records with a matching parent key.
        pruned: Orphaned child records removed.
        backup: Full child set as it was before pruning.
    """

    kept: tuple[Record, ...]
    pruned: tuple[Record, ...]
    backup: tuple[Record, ...]


@dataclass(frozen=True)
class TableSnapshot:
    """One table loaded from a snapshot file.

    Attributes:
        name: Logical table name, taken from the file stem.
        records: Ordered table rows.
        source_path: File the snapshot was read from.
    """

    name: str
    records: tuple[Record, ...]
    source_path: Path


@dataclass(frozen=True)
class CleanOptions:
    """Clean command options.

    Attributes:
        source_dir: Directory holding one snapshot file per table.
        recipe_path: Optional YAML recipe; built-in food-delivery recipe if omitted.
    """

    source_dir: str
    recipe_path: str | None = None


@dataclass(frozen=True)
class DatasetCleaningResult:
    """Dataset-level cleaning output.

    Attributes:
        run_id: Identifier of the persisted cleaning run.
        output_dir: Directory holding cleaned tables, backups, and report.
        reports: Per-table cleaning reports.
        tables: Cleaned records per table.
    """

    run_id: str
    output_dir: Path
    reports: Mapping[str, CleaningReport]
    tables: Mapping[str, tuple[Record, ...]]
