"""Unit tests for dataset cleaning orchestration."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import pytest

from core.config import PlatterConfig
from core.errors import PlatterIngestError, RuleExecutionError
from core.recipe import load_recipe
from core.types import CleanOptions
from ingest.input_reader import read_table_snapshots
from ingest.pipeline import CleaningRunner, clean_dataset, verify_dataset
from tests.fixture_paths import fixture_path
from transforms.food_delivery import build_food_delivery_recipe


def _config(tmp_path: Path) -> PlatterConfig:
    return replace(PlatterConfig.from_env(), output_root=tmp_path, workers=1)


def test_runner_cleans_and_prunes_food_delivery_fixture(tmp_path: Path) -> None:
    """Default recipe should clean values and prune orphans."""
    snapshots = read_table_snapshots(str(fixture_path("food_delivery")))

    cleaned = CleaningRunner(build_food_delivery_recipe(), _config(tmp_path)).clean(snapshots)

    orders = cleaned.tables["orders"]
    assert [row["r_id"] for row in orders] == ["567335", "158203"]
    assert {row["currency"] for row in orders} == {"INR"}
    assert [row["menu_id"] for row in cleaned.tables["menu"]] == ["mn1", "mn3"]
    assert cleaned.tables["users"][0]["Monthly Income"] == "₹50,000+"
    assert cleaned.tables["restaurant"][1]["cost"] == "1200"
    assert cleaned.tables["restaurant"][0]["address"] == "Near Bus Stand Abohar"
    assert cleaned.tables["food"][0]["item"] == "Paneer Tikka Pizza"


def test_runner_reports_pruned_counts_and_backups(tmp_path: Path) -> None:
    """Pruning outcomes should be counted on the child report."""
    snapshots = read_table_snapshots(str(fixture_path("food_delivery")))

    cleaned = CleaningRunner(build_food_delivery_recipe(), _config(tmp_path)).clean(snapshots)

    orders_report = cleaned.reports["orders"]
    assert orders_report.prune_outcomes["orders.r_id->restaurant.id"].pruned_count == 1
    assert orders_report.prune_outcomes["orders.user_id->users.user_id"].backup_count == 3
    assert (orders_report.input_count, orders_report.output_count) == (4, 2)
    backup_sizes = {relation.name: len(rows) for relation, rows in cleaned.backups.items()}
    assert backup_sizes["menu.r_id->restaurant.id"] == 4
    assert len(cleaned.tables["restaurant"]) == 3


def test_runner_raises_for_missing_recipe_table(tmp_path: Path) -> None:
    """Recipe tables absent from the snapshot directory should fail."""
    (tmp_path / "orders.csv").write_text("r_id,currency\n1,INR\n", encoding="utf-8")
    snapshots = read_table_snapshots(str(tmp_path))

    with pytest.raises(PlatterIngestError):
        CleaningRunner(build_food_delivery_recipe(), _config(tmp_path)).clean(snapshots)


def test_clean_dataset_fails_fast_without_persisting(tmp_path: Path) -> None:
    """A malformed value should abort before any run directory exists."""
    source_dir = tmp_path / "source"
    source_dir.mkdir()
    (source_dir / "orders.csv").write_text("r_id,currency\n1,INR\nabc,USD\n", encoding="utf-8")
    (source_dir / "restaurant.csv").write_text("id\n1\n", encoding="utf-8")
    output_root = tmp_path / "out"
    config = replace(_config(tmp_path), output_root=output_root)
    options = CleanOptions(
        source_dir=str(source_dir),
        recipe_path=str(fixture_path("recipes/orders_only.yaml")),
    )

    with pytest.raises(RuleExecutionError) as error_info:
        clean_dataset(options, config)

    assert (error_info.value.rule_name, error_info.value.record_index) == ("fix_order_keys", 1)
    assert not output_root.exists()


def test_verify_dataset_reports_no_changes_on_cleaned_output(tmp_path: Path) -> None:
    """Cleaned output should verify with zero changes and zero pruning."""
    config = _config(tmp_path)
    result = clean_dataset(CleanOptions(source_dir=str(fixture_path("food_delivery"))), config)

    reports = verify_dataset(str(result.output_dir / "tables"), None, config)

    assert all(report.total_changed == 0 for report in reports.values())
    assert all(report.total_pruned == 0 for report in reports.values())


def test_runner_joins_numeric_jsonl_keys_against_csv_parent(tmp_path: Path) -> None:
    """Numeric JSONL foreign keys should match text keys read from CSV."""
    (tmp_path / "restaurant.csv").write_text("id,name\n567335,AB Foods\n", encoding="utf-8")
    (tmp_path / "orders.jsonl").write_text(
        '{"currency": "INR", "r_id": 567335.0, "user_id": 1.0}\n'
        '{"currency": "INR", "r_id": 567335, "user_id": 2}\n'
        '{"currency": "USD", "r_id": 999999, "user_id": 3}\n',
        encoding="utf-8",
    )
    recipe = load_recipe(str(fixture_path("recipes/orders_only.yaml")))

    cleaned = CleaningRunner(recipe, _config(tmp_path)).clean(read_table_snapshots(str(tmp_path)))

    orders = cleaned.tables["orders"]
    assert [(row["r_id"], row["user_id"]) for row in orders] == [("567335", "1"), ("567335", "2")]
    assert cleaned.reports["orders"].prune_outcomes["orders.r_id->restaurant.id"].pruned_count == 1
