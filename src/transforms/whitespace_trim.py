"""Whitespace trimming for text columns."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import ClassVar

from core.types import RecordValue
from transforms.rule_base import RecordRule, require_text

_SPACE_RUN_PATTERN = re.compile(r" {2,}")


@dataclass(frozen=True)
class WhitespaceTrimRule(RecordRule):
    """Strip outer whitespace and collapse internal runs of spaces."""

    kind: ClassVar[str] = "trim"
    name: str
    columns: tuple[str, ...]

    def normalize_value(self, column: str, value: RecordValue) -> RecordValue:
        if value is None:
            return None
        text = require_text(column, value, self.kind)
        return _SPACE_RUN_PATTERN.sub(" ", text.strip())
