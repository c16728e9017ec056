"""Delimiter spacing rule for comma-separated list columns.

Inserts exactly one space after each delimiter that is not already
followed by one, e.g. ``Indian,Rajasthani`` -> ``Indian, Rajasthani``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import ClassVar

from core.constants import DEFAULT_LIST_DELIMITER
from core.types import RecordValue
from transforms.rule_base import RecordRule, require_text


@dataclass(frozen=True)
class DelimiterSpacingRule(RecordRule):
    """Normalize spacing after list delimiters."""

    kind: ClassVar[str] = "delimiter_spacing"
    name: str
    columns: tuple[str, ...]
    delimiter: str = DEFAULT_LIST_DELIMITER

    def normalize_value(self, column: str, value: RecordValue) -> RecordValue:
        if value is None:
            return None
        text = require_text(column, value, self.kind)
        pattern = re.escape(self.delimiter) + "(?! )"
        return re.sub(pattern, lambda _match: self.delimiter + " ", text)
