"""Noise stripping rule for escape-character runs.

Removes a literal substring or a regex pattern from text values.
Removal repeats until nothing matches, so a removal that exposes a new
match (``a\\\\b`` style runs) is still fully cleaned in one pass.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import ClassVar

from core.constants import DEFAULT_NOISE_SUBSTRING
from core.errors import PlatterConfigError
from core.types import RecordValue
from transforms.rule_base import RecordRule, require_text


@dataclass(frozen=True)
class NoiseStrippingRule(RecordRule):
    """Remove noise substrings from text columns.

    Attributes:
        substring: Literal text to remove when ``pattern`` is not set.
        pattern: Optional regular expression to remove instead.
    """

    kind: ClassVar[str] = "strip_noise"
    name: str
    columns: tuple[str, ...]
    substring: str = DEFAULT_NOISE_SUBSTRING
    pattern: str | None = None

    def __post_init__(self) -> None:
        if self.pattern is None and not self.substring:
            raise PlatterConfigError(
                f"Rule '{self.name}' needs a non-empty substring or a pattern to strip."
            )
        if self.pattern is not None:
            try:
                re.compile(self.pattern)
            except re.error as error:
                raise PlatterConfigError(
                    f"Rule '{self.name}' has an invalid pattern {self.pattern!r}: {error}."
                ) from error

    def normalize_value(self, column: str, value: RecordValue) -> RecordValue:
        if value is None:
            return None
        text = require_text(column, value, self.kind)
        regex = re.compile(self.pattern if self.pattern is not None else re.escape(self.substring))
        stripped = regex.sub("", text)
        while stripped != text:
            text = stripped
            stripped = regex.sub("", text)
        return stripped
