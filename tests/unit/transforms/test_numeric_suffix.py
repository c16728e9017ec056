"""Unit tests for numeric-suffix correction rule."""

from __future__ import annotations

import pytest

from core.errors import MalformedValueError
from transforms.numeric_suffix import NumericSuffixRule


def _rule() -> NumericSuffixRule:
    return NumericSuffixRule(name="r_id_suffix", columns=("r_id",))


def test_numeric_suffix_strips_trailing_zero_fraction() -> None:
    """Text identifiers ending in .0 should lose the fraction."""
    record, changed = _rule().apply({"r_id": "567335.0"})

    assert record["r_id"] == "567335" and changed


def test_numeric_suffix_leaves_clean_identifier_unchanged() -> None:
    """Clean identifiers should not be reported as changed."""
    record, changed = _rule().apply({"r_id": "567335"})

    assert record["r_id"] == "567335" and not changed


def test_numeric_suffix_converts_integral_float_to_text() -> None:
    """Integral floats should become the same text a CSV parent holds."""
    record, changed = _rule().apply({"r_id": 567335.0})

    assert record["r_id"] == "567335" and changed


def test_numeric_suffix_converts_int_to_text() -> None:
    """Ints should be rewritten as text so joins against CSV keys match."""
    record, changed = _rule().apply({"r_id": 567335})

    assert record["r_id"] == "567335" and changed


@pytest.mark.parametrize("value", ["567335.0", 567335, 567335.0])
def test_numeric_suffix_is_idempotent_for_every_input_type(value: object) -> None:
    """A second pass should leave the canonical text untouched."""
    once, _ = _rule().apply({"r_id": value})

    twice, changed = _rule().apply(once)

    assert twice == once and not changed


@pytest.mark.parametrize("value", ["abc", "567335.5", 12.5])
def test_numeric_suffix_rejects_non_identifier(value: object) -> None:
    """Non-numeric and fractional values should fail fast."""
    with pytest.raises(MalformedValueError):
        _rule().apply({"r_id": value})
