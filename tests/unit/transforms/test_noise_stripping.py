"""Unit tests for noise stripping rule."""

from __future__ import annotations

import pytest

from core.errors import PlatterConfigError
from transforms.noise_stripping import NoiseStrippingRule


def test_strip_noise_removes_backslash_runs() -> None:
    """Default rule should remove every literal backslash."""
    rule = NoiseStrippingRule(name="address_noise", columns=("address",))

    record, changed = rule.apply({"address": "near bus stand\\\\\\ abohar"})

    assert record["address"] == "near bus stand abohar" and changed


def test_strip_noise_repeats_until_no_match_remains() -> None:
    """Removal that exposes a new match should still be idempotent."""
    rule = NoiseStrippingRule(name="pair_noise", columns=("name",), substring="ab")
    once, _ = rule.apply({"name": "xaabby"})
    twice, changed_again = rule.apply(once)

    assert once["name"] == "xy"
    assert twice == once and not changed_again


def test_strip_noise_supports_regex_pattern() -> None:
    """Regex pattern should be removed when configured."""
    rule = NoiseStrippingRule(name="escapes", columns=("name",), pattern=r"\\[nt]")

    record, _ = rule.apply({"name": "Janta\\n Sweet\\t House"})

    assert record["name"] == "Janta Sweet House"


def test_strip_noise_rejects_invalid_pattern() -> None:
    """Invalid regex should fail at construction."""
    with pytest.raises(PlatterConfigError):
        NoiseStrippingRule(name="broken", columns=("name",), pattern="(")
