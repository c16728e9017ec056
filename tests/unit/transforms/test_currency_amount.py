"""Unit tests for currency amount rule."""

from __future__ import annotations

import pytest

from core.errors import MalformedValueError
from transforms.currency_amount import CurrencyAmountRule


def _rule() -> CurrencyAmountRule:
    return CurrencyAmountRule(name="cost_amount", columns=("cost",))


@pytest.mark.parametrize(
    ("raw_value", "expected"),
    [("₹ 200", "200"), ("₹ 1,200", "1200"), ("Rs. 350.50", "350.50"), ("200", "200")],
)
def test_currency_amount_strips_formatting(raw_value: str, expected: str) -> None:
    """Currency markers and separators should be removed."""
    record, _ = _rule().apply({"cost": raw_value})

    assert record["cost"] == expected


def test_currency_amount_passes_numbers_and_nulls() -> None:
    """Numeric and null values should pass through unchanged."""
    rule = _rule()

    assert rule.apply({"cost": 200}) == ({"cost": 200}, False)
    assert rule.apply({"cost": None}) == ({"cost": None}, False)


def test_currency_amount_rejects_non_numeric_cost() -> None:
    """Cost text without an amount should fail fast."""
    with pytest.raises(MalformedValueError):
        _rule().apply({"cost": "free delivery"})
