"""Control-character stripping for short categorical codes.

A trailing carriage return makes ``INR\\r`` and ``INR`` compare unequal,
so this rule must run before anything groups or deduplicates on the
same column.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import ClassVar

from core.types import RecordValue
from transforms.rule_base import RecordRule, require_text

_CONTROL_PATTERN = re.compile(r"[\x00-\x1f\x7f-\x9f]")


@dataclass(frozen=True)
class ControlCharacterRule(RecordRule):
    """Remove C0 and C1 control characters from text values."""

    kind: ClassVar[str] = "strip_control"
    name: str
    columns: tuple[str, ...]

    def normalize_value(self, column: str, value: RecordValue) -> RecordValue:
        if value is None:
            return None
        text = require_text(column, value, self.kind)
        return _CONTROL_PATTERN.sub("", text)
