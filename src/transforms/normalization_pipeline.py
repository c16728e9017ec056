"""Ordered, fail-fast normalization pipeline.

This module applies a fixed rule sequence to a record set and returns
the cleaned records with an audit report. Input records are never
mutated. Any rule failure aborts the run with the offending rule and
record index; there is no partial-success mode.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterator, Sequence

from core.constants import DEFAULT_SAMPLE_LIMIT, DEFAULT_WORKERS
from core.errors import MalformedValueError, PlatterConfigError, RuleExecutionError
from core.logging_config import get_logger
from core.types import CleaningReport, Record, RuleFailure, RuleOutcome, SampleDiff
from transforms.control_characters import ControlCharacterRule
from transforms.rule_base import RecordRule, Rule, SetRule, build_sample_diffs

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class _RecordResult:
    record: Record
    changed: bool


class _RecordFailure(Exception):
    """Carries the failing record position out of a worker."""

    def __init__(self, position: int, error: Exception) -> None:
        super().__init__(str(error))
        self.position = position
        self.error = error


def run(
    records: Sequence[Record],
    rules: Sequence[Rule],
    workers: int = DEFAULT_WORKERS,
    sample_limit: int = DEFAULT_SAMPLE_LIMIT,
    table_name: str = "",
) -> tuple[list[Record], CleaningReport]:
    """Run the rule sequence over a record set.

    Args:
        records: Input records; left untouched.
        rules: Ordered rules to apply.
        workers: Worker threads for per-record rules.
        sample_limit: Maximum before/after samples kept per rule.
        table_name: Table name recorded in the report and logs.

    Returns:
        Cleaned records and the cleaning report.

    Raises:
        PlatterConfigError: If the rule sequence is invalid.
        RuleExecutionError: If any rule fails on any record.
    """
    validate_rule_sequence(rules)
    if workers < 1:
        raise PlatterConfigError(f"Pipeline workers must be >= 1, got {workers}.")
    report = CleaningReport(table_name=table_name, input_count=len(records))
    current: list[Record] = list(records)
    # Position in the original input for every current record.
    origins: list[int] = list(range(len(records)))
    for rule in rules:
        if isinstance(rule, SetRule):
            current, origins = _apply_set_rule(rule, current, origins, report, sample_limit)
        else:
            current = _apply_record_rule(rule, current, origins, report, workers, sample_limit)
    report.output_count = len(current)
    return current, report


def validate_rule_sequence(rules: Sequence[Rule]) -> None:
    """Reject duplicate rule names and mis-ordered control stripping.

    A set rule that groups on a column must come after every
    control-character rule touching that column.

    Raises:
        PlatterConfigError: If the sequence is invalid.
    """
    seen_names: set[str] = set()
    for position, rule in enumerate(rules):
        if rule.name in seen_names:
            raise PlatterConfigError(
                f"Duplicate rule name '{rule.name}'. Give every rule a unique name."
            )
        seen_names.add(rule.name)
        if not isinstance(rule, ControlCharacterRule):
            continue
        for earlier_rule in rules[:position]:
            if not isinstance(earlier_rule, SetRule):
                continue
            overlap = sorted(set(earlier_rule.columns) & set(rule.columns))
            if overlap:
                raise PlatterConfigError(
                    f"Rule '{rule.name}' strips control characters from "
                    f"{', '.join(overlap)} after '{earlier_rule.name}' already grouped "
                    "on those columns. Move control-character stripping earlier."
                )


def _apply_record_rule(
    rule: RecordRule,
    records: list[Record],
    origins: list[int],
    report: CleaningReport,
    workers: int,
    sample_limit: int,
) -> list[Record]:
    """Apply a per-record rule, optionally across worker threads."""
    cleaned: list[Record] = []
    changed_count = 0
    samples: list[SampleDiff] = []
    try:
        for position, result in enumerate(_iter_record_results(rule, records, workers)):
            cleaned.append(result.record)
            if not result.changed:
                continue
            changed_count += 1
            if len(samples) < sample_limit:
                diffs = build_sample_diffs(
                    origins[position], records[position], result.record, rule.columns
                )
                samples.extend(diffs[: sample_limit - len(samples)])
    except _RecordFailure as failure:
        raise _fail(rule, origins[failure.position], failure.error, report) from failure.error
    report.rule_outcomes[rule.name] = RuleOutcome(
        rule_name=rule.name,
        kind=rule.kind,
        records_changed=changed_count,
        sample_diffs=tuple(samples),
    )
    _LOGGER.info(
        "rule_applied",
        table_name=report.table_name,
        rule_name=rule.name,
        kind=rule.kind,
        records_changed=changed_count,
    )
    return cleaned


def _iter_record_results(
    rule: RecordRule,
    records: list[Record],
    workers: int,
) -> Iterator[_RecordResult]:
    """Yield rule results in input order.

    Results are consumed in input order even when computed in parallel,
    so the first failure raised is always the lowest failing position.
    """
    if workers == 1 or len(records) < 2:
        for position, record in enumerate(records):
            yield _apply_at(rule, position, record)
        return
    with ThreadPoolExecutor(max_workers=workers) as executor:
        yield from executor.map(
            lambda item: _apply_at(rule, item[0], item[1]),
            enumerate(records),
        )


def _apply_at(rule: RecordRule, position: int, record: Record) -> _RecordResult:
    try:
        new_record, changed = rule.apply(record)
    except Exception as error:
        raise _RecordFailure(position, error) from error
    return _RecordResult(record=new_record, changed=changed)


def _apply_set_rule(
    rule: SetRule,
    records: list[Record],
    origins: list[int],
    report: CleaningReport,
    sample_limit: int,
) -> tuple[list[Record], list[int]]:
    """Apply a set rule over the full record set, single-threaded.

    Removed records are sampled by their audit column value, with
    ``after`` left as None.
    """
    try:
        kept, removed_positions = rule.apply_all(records)
    except MalformedValueError as error:
        origin = None if error.record_index is None else origins[error.record_index]
        raise _fail(rule, origin, error, report) from error
    except Exception as error:
        raise _fail(rule, None, error, report) from error
    removed = set(removed_positions)
    kept_origins = [origin for position, origin in enumerate(origins) if position not in removed]
    samples = tuple(
        SampleDiff(
            record_index=origins[position],
            column=rule.audit_column,
            before=records[position].get(rule.audit_column),
            after=None,
        )
        for position in sorted(removed)[:sample_limit]
    )
    report.rule_outcomes[rule.name] = RuleOutcome(
        rule_name=rule.name,
        kind=rule.kind,
        records_removed=len(removed),
        sample_diffs=samples,
    )
    _LOGGER.info(
        "rule_applied",
        table_name=report.table_name,
        rule_name=rule.name,
        kind=rule.kind,
        records_removed=len(removed),
    )
    return kept, kept_origins


def _fail(
    rule: Rule,
    record_index: int | None,
    error: Exception,
    report: CleaningReport,
) -> RuleExecutionError:
    """Record the failure on the report and build the abort error."""
    message = str(error) or type(error).__name__
    report.failure = RuleFailure(rule_name=rule.name, record_index=record_index, message=message)
    _LOGGER.error(
        "rule_failed",
        table_name=report.table_name,
        rule_name=rule.name,
        record_index=record_index,
        error=message,
    )
    return RuleExecutionError(rule.name, record_index, message, report)
