"""Categorical remapping of legacy labels onto canonical labels.

Values absent from the lookup pass through unchanged; an unmapped
category is expected data, not an error.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Mapping

from core.errors import PlatterConfigError
from core.types import RecordValue
from transforms.rule_base import RecordRule

INCOME_BUCKETS: Mapping[str, str] = {
    "No Income": "₹0",
    "Below Rs.10000": "<₹10,000",
    "10001 to 25000": "₹10,001-₹25,000",
    "25001 to 50000": "₹25,001-₹50,000",
    "More than 50000": "₹50,000+",
}

VEG_LABELS: Mapping[str, str] = {
    "Veg": "Veg",
    "veg": "Veg",
    "Non-veg": "Non-Veg",
    "non-veg": "Non-Veg",
    "Non Veg": "Non-Veg",
    "nonveg": "Non-Veg",
}

BUILTIN_LOOKUPS: Mapping[str, Mapping[str, str]] = {
    "income_buckets": INCOME_BUCKETS,
    "veg_labels": VEG_LABELS,
}


@dataclass(frozen=True)
class CategoricalRemapRule(RecordRule):
    """Map labels through an explicit lookup table.

    Attributes:
        mapping: Legacy label to canonical label lookup.
    """

    kind: ClassVar[str] = "remap"
    name: str
    columns: tuple[str, ...]
    mapping: Mapping[str, str]

    def __post_init__(self) -> None:
        for source_label, target_label in self.mapping.items():
            chained_label = self.mapping.get(target_label, target_label)
            if chained_label != target_label:
                raise PlatterConfigError(
                    f"Rule '{self.name}' maps '{source_label}' to '{target_label}', "
                    f"which is itself remapped to '{chained_label}'. "
                    "Map every legacy label directly to its final canonical label."
                )

    def normalize_value(self, column: str, value: RecordValue) -> RecordValue:
        if not isinstance(value, str):
            return value
        return self.mapping.get(value, value)


def resolve_builtin_lookup(lookup_name: str) -> Mapping[str, str]:
    """Return a named built-in lookup table.

    Raises:
        PlatterConfigError: If no built-in lookup has that name.
    """
    if lookup_name in BUILTIN_LOOKUPS:
        return BUILTIN_LOOKUPS[lookup_name]
    supported_rows = ", ".join(sorted(BUILTIN_LOOKUPS))
    raise PlatterConfigError(
        f"Unknown built-in lookup '{lookup_name}'. Use one of: {supported_rows}."
    )
