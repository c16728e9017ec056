"""Numeric-suffix correction for identifier columns.

Foreign keys exported through spreadsheets often arrive as ``567335.0``
while the referenced primary key is ``567335``. This rule strips the
spurious fractional zeros so equality joins succeed.

Every integral identifier comes out as text, whatever its input type.
CSV snapshots always yield text while JSONL and Parquet may yield
numbers, and pruning compares keys by exact equality.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import ClassVar

from core.errors import MalformedValueError
from core.types import RecordValue
from transforms.rule_base import RecordRule

_INTEGRAL_TEXT_PATTERN = re.compile(r"^(-?\d+)(?:\.0+)?$")


@dataclass(frozen=True)
class NumericSuffixRule(RecordRule):
    """Normalize integral identifiers stored as text, ints, or floats to text."""

    kind: ClassVar[str] = "numeric_suffix"
    name: str
    columns: tuple[str, ...]

    def normalize_value(self, column: str, value: RecordValue) -> RecordValue:
        if value is None or isinstance(value, bool):
            return value
        if isinstance(value, int):
            return str(value)
        if isinstance(value, float):
            if value.is_integer():
                return str(int(value))
            raise MalformedValueError(column, value, "expected an integral identifier")
        match = _INTEGRAL_TEXT_PATTERN.match(value.strip())
        if match is None:
            raise MalformedValueError(column, value, "expected a numeric identifier")
        return match.group(1)
