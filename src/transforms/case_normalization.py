"""Title-case normalization for free-text name and address fields."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import ClassVar

from core.types import RecordValue
from transforms.rule_base import RecordRule, require_text

# Apostrophes stay inside a word so "domino's" becomes "Domino's", not "Domino'S".
# Combining marks count as word characters so lowercasing "İ" cannot split a word.
_WORD_CHARS = r"[\w\u0300-\u036f]+"
_WORD_PATTERN = re.compile(rf"{_WORD_CHARS}(?:'{_WORD_CHARS})*")


@dataclass(frozen=True)
class CaseNormalizationRule(RecordRule):
    """Convert text values to title case; nulls pass through."""

    kind: ClassVar[str] = "title_case"
    name: str
    columns: tuple[str, ...]

    def normalize_value(self, column: str, value: RecordValue) -> RecordValue:
        if value is None:
            return None
        text = require_text(column, value, self.kind)
        return _WORD_PATTERN.sub(_capitalize_word, text)


def _capitalize_word(match: re.Match[str]) -> str:
    word = match.group(0)
    # title() keeps ligatures such as "ﬁ" stable on a second pass, unlike upper().
    return word[:1].title() + word[1:].lower()
