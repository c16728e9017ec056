"""Currency amount normalization for cost and price columns.

Strips a leading currency marker, whitespace, and thousands separators,
e.g. ``₹ 1,200`` -> ``1200``. Anything that is not an amount fails the run.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import ClassVar

from core.errors import MalformedValueError
from core.types import RecordValue
from transforms.rule_base import RecordRule

_AMOUNT_PATTERN = re.compile(
    r"^(?:₹|Rs\.?|INR|\$|USD)?\s*(\d{1,3}(?:,\d{2,3})+|\d+)(\.\d+)?$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class CurrencyAmountRule(RecordRule):
    """Reduce formatted amounts to plain numeric text."""

    kind: ClassVar[str] = "currency_amount"
    name: str
    columns: tuple[str, ...]

    def normalize_value(self, column: str, value: RecordValue) -> RecordValue:
        if value is None or isinstance(value, (int, float)):
            return value
        match = _AMOUNT_PATTERN.match(value.strip())
        if match is None:
            raise MalformedValueError(column, value, "expected a currency amount")
        whole_part = match.group(1).replace(",", "")
        return whole_part + (match.group(2) or "")
