"""Exact duplicate elimination across a record set.

Records are grouped by their identity columns; inside each group the
record with the lowest (or highest) tie-break value survives. Retained
records keep their original relative order.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import ClassVar, Literal, Sequence

from core.errors import MalformedValueError, PlatterConfigError
from core.types import Record, RecordValue
from transforms.rule_base import SetRule

KeepPolicy = Literal["lowest", "highest"]
SUPPORTED_KEEP_POLICIES: tuple[KeepPolicy, ...] = ("lowest", "highest")
_ZERO = Decimal(0)


@dataclass(frozen=True)
class DuplicateEliminationRule(SetRule):
    """Keep exactly one record per distinct identity tuple.

    Attributes:
        columns: Identity columns defining row equality.
        tie_break: Column ordering records inside a duplicate group.
        keep: Which end of the tie-break ordering survives.
    """

    kind: ClassVar[str] = "deduplicate"
    name: str
    columns: tuple[str, ...]
    tie_break: str
    keep: KeepPolicy = "lowest"

    def __post_init__(self) -> None:
        if not self.columns:
            raise PlatterConfigError(f"Rule '{self.name}' needs at least one identity column.")
        if self.keep not in SUPPORTED_KEEP_POLICIES:
            raise PlatterConfigError(
                f"Rule '{self.name}' has unsupported keep policy '{self.keep}'. "
                f"Use one of: {', '.join(SUPPORTED_KEEP_POLICIES)}."
            )

    def apply_all(self, records: Sequence[Record]) -> tuple[list[Record], tuple[int, ...]]:
        """Remove duplicates and report removed positions.

        Args:
            records: Full record set.

        Returns:
            Retained records in input order and sorted removed positions.

        Raises:
            MalformedValueError: If a record lacks an identity or tie-break column.
        """
        return remove_exact_duplicates(records, self.columns, self.tie_break, self.keep)

    @property
    def audit_column(self) -> str:
        return self.tie_break


def remove_exact_duplicates(
    records: Sequence[Record],
    identity_columns: Sequence[str],
    tie_break: str,
    keep: KeepPolicy = "lowest",
) -> tuple[list[Record], tuple[int, ...]]:
    """Group by identity, sort by tie-break, retain the first of each group.

    Args:
        records: Full record set.
        identity_columns: Columns defining row identity.
        tie_break: Column ordering duplicates.
        keep: ``lowest`` retains the smallest tie-break value.

    Returns:
        Retained records in input order and sorted removed positions.

    Raises:
        MalformedValueError: If a record lacks a required column.
    """
    groups: dict[tuple[RecordValue, ...], list[int]] = {}
    for index, record in enumerate(records):
        identity = build_identity_key(record, identity_columns, index)
        if tie_break not in record:
            raise _missing_column_error(tie_break, index)
        groups.setdefault(identity, []).append(index)
    retained_positions: set[int] = set()
    for positions in groups.values():
        retained_positions.add(_select_survivor(records, positions, tie_break, keep))
    kept = [record for index, record in enumerate(records) if index in retained_positions]
    removed = tuple(index for index in range(len(records)) if index not in retained_positions)
    return kept, removed


def build_identity_key(
    record: Record,
    identity_columns: Sequence[str],
    record_index: int,
) -> tuple[RecordValue, ...]:
    """Build the grouping key of a record.

    Raises:
        MalformedValueError: If an identity column is missing.
    """
    key: list[RecordValue] = []
    for column in identity_columns:
        if column not in record:
            raise _missing_column_error(column, record_index)
        key.append(record[column])
    return tuple(key)


def _select_survivor(
    records: Sequence[Record],
    positions: list[int],
    tie_break: str,
    keep: KeepPolicy,
) -> int:
    """Return the retained position of one duplicate group.

    Null tie-break values never win while a non-null value exists.
    Equal tie-break values keep the earliest record.
    """
    if len(positions) == 1:
        return positions[0]
    ranked = [index for index in positions if records[index][tie_break] is not None]
    if not ranked:
        return positions[0]
    ordered = sorted(
        ranked,
        key=lambda index: _tie_break_key(records[index][tie_break]),
        reverse=keep == "highest",
    )
    return ordered[0]


def _tie_break_key(value: RecordValue) -> tuple[int, Decimal, str]:
    """Sort key comparing numeric values exactly and other text lexically."""
    number = _parse_number(value)
    if number is None:
        return (1, _ZERO, str(value))
    return (0, number, "")


def _parse_number(value: RecordValue) -> Decimal | None:
    """Return the exact numeric value, or None for non-numeric text.

    Decimal keeps integer ids above 2**53 distinct, which float cannot.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = Decimal(value)
    else:
        try:
            number = Decimal(str(value).strip())
        except InvalidOperation:
            return None
    return number if number.is_finite() else None


def _missing_column_error(column: str, record_index: int) -> MalformedValueError:
    return MalformedValueError(
        column, None, "column is missing from the record", record_index=record_index
    )
