"""Unit tests for control-character stripping rule."""

from __future__ import annotations

from transforms.control_characters import ControlCharacterRule


def _rule() -> ControlCharacterRule:
    return ControlCharacterRule(name="currency_control", columns=("currency",))


def test_strip_control_removes_carriage_return() -> None:
    """Trailing carriage return should be removed."""
    dirty = "INR\r"

    record, changed = _rule().apply({"currency": dirty})

    assert len(dirty) == 4
    assert record["currency"] == "INR" and changed


def test_strip_control_collapses_distinct_currency_count() -> None:
    """Visually identical codes should compare equal after stripping."""
    rule = _rule()
    rows = [{"currency": value} for value in ("INR", "INR\r", "USD")]

    cleaned = [rule.apply(row)[0] for row in rows]

    assert len({row["currency"] for row in rows}) == 3
    assert len({row["currency"] for row in cleaned}) == 2


def test_strip_control_is_idempotent() -> None:
    """Clean codes should report no change."""
    record, changed = _rule().apply({"currency": "INR"})

    assert record == {"currency": "INR"} and not changed
