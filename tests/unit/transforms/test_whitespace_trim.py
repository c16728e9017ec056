"""Unit tests for whitespace trim rule."""

from __future__ import annotations

from transforms.whitespace_trim import WhitespaceTrimRule


def test_trim_strips_and_collapses_spaces() -> None:
    """Outer whitespace should go and inner runs should collapse."""
    rule = WhitespaceTrimRule(name="name_trim", columns=("name",))

    once, changed = rule.apply({"name": "  PRIYA   SHARMA "})
    twice, changed_again = rule.apply(once)

    assert once["name"] == "PRIYA SHARMA" and changed
    assert twice == once and not changed_again
