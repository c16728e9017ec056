"""Unit tests for the normalization pipeline."""

from __future__ import annotations

import copy

import pytest

from core.errors import PlatterConfigError, RuleExecutionError
from transforms.control_characters import ControlCharacterRule
from transforms.currency_amount import CurrencyAmountRule
from transforms.delimiter_spacing import DelimiterSpacingRule
from transforms.exact_deduplication import DuplicateEliminationRule
from transforms.normalization_pipeline import run
from transforms.numeric_suffix import NumericSuffixRule


def _menu_rules() -> list[object]:
    return [
        NumericSuffixRule(name="r_id_suffix", columns=("r_id",)),
        ControlCharacterRule(name="cuisine_control", columns=("cuisine",)),
        DelimiterSpacingRule(name="cuisine_spacing", columns=("cuisine",)),
        DuplicateEliminationRule(
            name="menu_dedup",
            columns=("r_id", "f_id", "cuisine", "price"),
            tie_break="menu_id",
        ),
    ]


def _menu_rows() -> list[dict[str, object]]:
    return [
        {"menu_id": 2, "r_id": "1.0", "f_id": "f1", "cuisine": "Indian,Thai", "price": "100"},
        {"menu_id": 1, "r_id": "1", "f_id": "f1", "cuisine": "Indian, Thai\r", "price": "100"},
        {"menu_id": 3, "r_id": "1", "f_id": "f2", "cuisine": "Chinese", "price": "80"},
    ]


def test_run_applies_rules_in_order_and_reports_counts() -> None:
    """Earlier normalization should let duplicates match exactly."""
    cleaned, report = run(_menu_rows(), _menu_rules(), table_name="menu")

    assert [row["menu_id"] for row in cleaned] == [1, 3]
    assert report.rule_outcomes["r_id_suffix"].records_changed == 1
    assert report.rule_outcomes["cuisine_control"].records_changed == 1
    assert report.rule_outcomes["cuisine_spacing"].records_changed == 1
    assert report.rule_outcomes["menu_dedup"].records_removed == 1
    assert (report.input_count, report.output_count) == (3, 2)


def test_run_does_not_mutate_input_records() -> None:
    """Pipeline should be a pure transform."""
    rows = _menu_rows()
    rows_before = copy.deepcopy(rows)

    run(rows, _menu_rules())

    assert rows == rows_before


def test_run_is_idempotent_over_cleaned_output() -> None:
    """Second run over cleaned output should change nothing."""
    cleaned, _ = run(_menu_rows(), _menu_rules())
    cleaned_again, report = run(cleaned, _menu_rules())

    assert cleaned_again == cleaned
    assert report.total_changed == 0


def test_run_records_sample_diffs_with_input_positions() -> None:
    """Samples should carry the record position in the pipeline input."""
    _, report = run(_menu_rows(), _menu_rules(), sample_limit=1)

    samples = report.rule_outcomes["cuisine_spacing"].sample_diffs
    assert len(samples) == 1
    assert (samples[0].record_index, samples[0].before, samples[0].after) == (
        0,
        "Indian,Thai",
        "Indian, Thai",
    )


def test_run_samples_records_removed_by_deduplication() -> None:
    """Removed duplicates should be sampled by their tie-break value."""
    _, report = run(_menu_rows(), _menu_rules())

    samples = report.rule_outcomes["menu_dedup"].sample_diffs
    assert [(s.record_index, s.column, s.before, s.after) for s in samples] == [
        (0, "menu_id", 2, None)
    ]


def test_run_fails_fast_with_rule_and_record_index() -> None:
    """Malformed value should abort the run and name its location."""
    rows = [{"cost": "₹ 200"}, {"cost": "free"}, {"cost": "oops"}]
    rules = [CurrencyAmountRule(name="cost_amount", columns=("cost",))]

    with pytest.raises(RuleExecutionError) as error_info:
        run(rows, rules)

    error = error_info.value
    assert (error.rule_name, error.record_index) == ("cost_amount", 1)
    assert error.report.failure is not None
    assert error.report.failure.record_index == 1


def test_run_reports_original_index_after_deduplication() -> None:
    """Failure index should point into the original input after removals."""
    rows = [
        {"id": 1, "key": "a", "cost": "10"},
        {"id": 2, "key": "a", "cost": "10"},
        {"id": 3, "key": "b", "cost": "free"},
    ]
    rules = [
        DuplicateEliminationRule(name="dedup", columns=("key",), tie_break="id"),
        CurrencyAmountRule(name="cost_amount", columns=("cost",)),
    ]

    with pytest.raises(RuleExecutionError) as error_info:
        run(rows, rules)

    assert error_info.value.record_index == 2


def test_run_with_workers_matches_sequential_run() -> None:
    """Parallel per-record rules should produce identical output and report."""
    rows = [{"r_id": f"{index}.0", "cuisine": "A,B"} for index in range(50)]
    rules = [
        NumericSuffixRule(name="r_id_suffix", columns=("r_id",)),
        DelimiterSpacingRule(name="cuisine_spacing", columns=("cuisine",)),
    ]

    sequential, sequential_report = run(rows, rules, workers=1)
    parallel, parallel_report = run(rows, rules, workers=4)

    assert parallel == sequential
    assert parallel_report.to_dict() == sequential_report.to_dict()


def test_run_parallel_failure_reports_lowest_index() -> None:
    """The first failing record should be reported regardless of workers."""
    rows = [{"r_id": "1"}] * 10 + [{"r_id": "bad"}] + [{"r_id": "worse"}] * 5

    with pytest.raises(RuleExecutionError) as error_info:
        run(rows, [NumericSuffixRule(name="r_id_suffix", columns=("r_id",))], workers=4)

    assert error_info.value.record_index == 10


def test_run_rejects_control_stripping_after_grouping() -> None:
    """Control stripping must precede rules grouping on the same column."""
    rules = [
        DuplicateEliminationRule(name="dedup", columns=("currency",), tie_break="id"),
        ControlCharacterRule(name="currency_control", columns=("currency",)),
    ]

    with pytest.raises(PlatterConfigError):
        run([], rules)


def test_run_rejects_duplicate_rule_names() -> None:
    """Rule names must be unique within a run."""
    rules = [
        ControlCharacterRule(name="same", columns=("a",)),
        ControlCharacterRule(name="same", columns=("b",)),
    ]

    with pytest.raises(PlatterConfigError):
        run([], rules)
