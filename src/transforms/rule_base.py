"""Shared rule contracts for the normalization pipeline.

Per-record rules rewrite column values one record at a time and may be
fanned out across workers. Set rules see the whole record set at once
and always run single-threaded.
"""

from __future__ import annotations

from typing import ClassVar, Sequence, Union

from core.errors import MalformedValueError
from core.types import Record, RecordValue, SampleDiff


class RecordRule:
    """Base class for rules that rewrite column values of one record.

    Subclasses are frozen dataclasses declaring ``name`` and ``columns``
    fields and implementing :meth:`normalize_value`. Columns missing from
    a record are left absent.
    """

    kind: ClassVar[str] = "record"
    scope: ClassVar[str] = "record"
    name: str
    columns: tuple[str, ...]

    def apply(self, record: Record) -> tuple[Record, bool]:
        """Apply the rule to one record without mutating it.

        Args:
            record: Input record.

        Returns:
            Tuple of the resulting record and whether any value changed.

        Raises:
            MalformedValueError: If a value falls outside the rule's expected shape.
        """
        updates: dict[str, RecordValue] = {}
        for column in self.columns:
            if column not in record:
                continue
            value = record[column]
            normalized = self.normalize_value(column, value)
            if values_differ(value, normalized):
                updates[column] = normalized
        if not updates:
            return record, False
        return {**record, **updates}, True

    def normalize_value(self, column: str, value: RecordValue) -> RecordValue:
        raise NotImplementedError


class SetRule:
    """Base class for rules that operate across the whole record set."""

    kind: ClassVar[str] = "set"
    scope: ClassVar[str] = "set"
    name: str
    columns: tuple[str, ...]

    def apply_all(self, records: Sequence[Record]) -> tuple[list[Record], tuple[int, ...]]:
        """Return retained records and the positions of removed ones."""
        raise NotImplementedError

    @property
    def audit_column(self) -> str:
        """Column whose value identifies a removed record in report samples."""
        return self.columns[0]


Rule = Union[RecordRule, SetRule]


def values_differ(before: RecordValue, after: RecordValue) -> bool:
    """Return whether two values differ in type or content."""
    return type(before) is not type(after) or before != after


def require_text(column: str, value: RecordValue, kind: str) -> str:
    """Return ``value`` as text or raise for non-text input.

    Args:
        column: Column name for error context.
        value: Non-null value to check.
        kind: Rule kind for error context.

    Returns:
        The value, typed as ``str``.

    Raises:
        MalformedValueError: If value is not a string.
    """
    if isinstance(value, str):
        return value
    raise MalformedValueError(
        column, value, f"{kind} expects text, got {type(value).__name__}"
    )


def build_sample_diffs(
    record_index: int,
    before: Record,
    after: Record,
    columns: Sequence[str],
) -> list[SampleDiff]:
    """Collect before/after pairs for columns a rule changed.

    Args:
        record_index: Record position in the pipeline input.
        before: Record before the rule ran.
        after: Record after the rule ran.
        columns: Columns the rule is scoped to.

    Returns:
        One sample per changed column, in column order.
    """
    diffs: list[SampleDiff] = []
    for column in columns:
        if column not in before:
            continue
        if values_differ(before[column], after[column]):
            diffs.append(
                SampleDiff(
                    record_index=record_index,
                    column=column,
                    before=before[column],
                    after=after[column],
                )
            )
    return diffs
