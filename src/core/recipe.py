"""Typed cleaning-recipe parsing.

This module loads and validates YAML recipes that name, per table, the
ordered cleaning rules and the foreign-key relations used for pruning.
Rule options are validated here only structurally; rule construction
and kind-specific checks live in ``transforms.rule_registry``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Mapping, Sequence, cast

import yaml

from core.constants import RECIPE_VERSION
from core.errors import PlatterRecipeError
from core.types import PruneRelation

RuleKind = Literal[
    "delimiter_spacing",
    "title_case",
    "strip_noise",
    "remap",
    "strip_control",
    "numeric_suffix",
    "deduplicate",
    "currency_amount",
    "trim",
]
SUPPORTED_RULE_KINDS: tuple[RuleKind, ...] = (
    "delimiter_spacing",
    "title_case",
    "strip_noise",
    "remap",
    "strip_control",
    "numeric_suffix",
    "deduplicate",
    "currency_amount",
    "trim",
)


@dataclass(frozen=True)
class RecipeRuleSpec:
    """One rule entry of a recipe table."""

    kind: RuleKind
    name: str
    columns: tuple[str, ...]
    options: Mapping[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class CleaningRecipe:
    """Validated recipe root object.

    Attributes:
        version: Recipe schema version.
        tables: Ordered rule specs per table name.
        relations: Prune relations applied in order after cleaning.
    """

    version: int
    tables: Mapping[str, tuple[RecipeRuleSpec, ...]]
    relations: tuple[PruneRelation, ...] = ()

    @property
    def table_names(self) -> tuple[str, ...]:
        """Return every table referenced by rules or relations."""
        names = list(self.tables)
        for relation in self.relations:
            for table_name in (relation.child, relation.parent):
                if table_name not in names:
                    names.append(table_name)
        return tuple(names)


def load_recipe(recipe_path: str) -> CleaningRecipe:
    """Load and validate a YAML recipe from disk.

    Args:
        recipe_path: File path to YAML recipe.

    Returns:
        Fully validated recipe object.

    Raises:
        PlatterRecipeError: If file is invalid or schema checks fail.
    """
    payload = _load_yaml_payload(recipe_path)
    return parse_recipe(payload)


def parse_recipe(payload: object) -> CleaningRecipe:
    """Validate an already-decoded recipe payload.

    Raises:
        PlatterRecipeError: If schema checks fail.
    """
    root_mapping = _expect_mapping(payload, "recipe root")
    _validate_keys(root_mapping, {"version", "tables", "relations"}, "recipe root")
    version = _parse_version(root_mapping)
    tables = _parse_tables(root_mapping)
    relations = _parse_relations(root_mapping)
    return CleaningRecipe(version=version, tables=tables, relations=relations)


def default_rule_name(kind: str, columns: Sequence[str]) -> str:
    """Build the rule name used when a recipe entry omits ``name``."""
    return f"{kind}:{','.join(columns)}"


def _load_yaml_payload(recipe_path: str) -> object:
    recipe_file = Path(recipe_path).expanduser().resolve()
    if not recipe_file.exists():
        raise PlatterRecipeError(
            f"Recipe file does not exist at {recipe_file}. Provide a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(recipe_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise PlatterRecipeError(
            f"Failed to read recipe at {recipe_file}: {error}. Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise PlatterRecipeError(
            f"Failed to parse YAML recipe at {recipe_file}: {error}. Fix YAML syntax and retry."
        ) from error
    if payload is None:
        raise PlatterRecipeError(f"Recipe at {recipe_file} is empty. Define 'version' and 'tables'.")
    return payload


def _expect_mapping(value: object, context: str) -> Mapping[str, object]:
    if isinstance(value, Mapping):
        normalized_mapping = {}
        for key, payload in value.items():
            if not isinstance(key, str):
                raise PlatterRecipeError(
                    f"Invalid {context}: expected string keys, got {type(key).__name__}."
                )
            normalized_mapping[key] = payload
        return normalized_mapping
    raise PlatterRecipeError(
        f"Invalid {context}: expected object mapping, got {type(value).__name__}."
    )


def _expect_sequence(value: object, context: str) -> Sequence[object]:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return value
    raise PlatterRecipeError(f"Invalid {context}: expected list, got {type(value).__name__}.")


def _expect_string(value: object, context: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    raise PlatterRecipeError(f"Invalid {context}: expected non-empty string.")


def _parse_version(root_mapping: Mapping[str, object]) -> int:
    raw_version = root_mapping.get("version")
    if not isinstance(raw_version, int) or isinstance(raw_version, bool):
        raise PlatterRecipeError(
            f"Recipe field 'version' must be an integer. Set version: {RECIPE_VERSION}."
        )
    if raw_version != RECIPE_VERSION:
        raise PlatterRecipeError(
            f"Unsupported recipe version {raw_version}. Use version: {RECIPE_VERSION}."
        )
    return raw_version


def _parse_tables(
    root_mapping: Mapping[str, object],
) -> Mapping[str, tuple[RecipeRuleSpec, ...]]:
    raw_tables = root_mapping.get("tables")
    if raw_tables is None:
        raise PlatterRecipeError(
            "Recipe missing required field 'tables'. Map each table name to its rules."
        )
    tables_mapping = _expect_mapping(raw_tables, "recipe tables")
    if not tables_mapping:
        raise PlatterRecipeError("Recipe field 'tables' must include at least one table.")
    parsed_tables: dict[str, tuple[RecipeRuleSpec, ...]] = {}
    for table_name, table_value in tables_mapping.items():
        context = f"recipe table '{table_name}'"
        table_mapping = _expect_mapping(table_value, context)
        _validate_keys(table_mapping, {"rules"}, context)
        rule_rows = _expect_sequence(table_mapping.get("rules", []), f"{context} rules")
        parsed_tables[table_name] = tuple(
            _parse_rule(rule_value, f"{context} rule #{index + 1}")
            for index, rule_value in enumerate(rule_rows)
        )
    return parsed_tables


def _parse_rule(rule_value: object, context: str) -> RecipeRuleSpec:
    rule_mapping = _expect_mapping(rule_value, context)
    raw_kind = rule_mapping.get("kind")
    if not isinstance(raw_kind, str):
        raise PlatterRecipeError(f"Invalid {context}: field 'kind' must be a string.")
    kind = _parse_kind(raw_kind, context)
    columns = _parse_columns(rule_mapping.get("columns"), context)
    raw_name = rule_mapping.get("name")
    name = (
        default_rule_name(kind, columns)
        if raw_name is None
        else _expect_string(raw_name, f"{context} name")
    )
    options = {
        key: value
        for key, value in rule_mapping.items()
        if key not in {"kind", "name", "columns"}
    }
    return RecipeRuleSpec(kind=kind, name=name, columns=columns, options=options)


def _parse_kind(raw_kind: str, context: str) -> RuleKind:
    if raw_kind in SUPPORTED_RULE_KINDS:
        return cast(RuleKind, raw_kind)
    supported_rows = ", ".join(SUPPORTED_RULE_KINDS)
    raise PlatterRecipeError(
        f"Unsupported rule kind '{raw_kind}' in {context}. Use one of: {supported_rows}."
    )


def _parse_columns(raw_columns: object, context: str) -> tuple[str, ...]:
    if raw_columns is None:
        raise PlatterRecipeError(f"Invalid {context}: field 'columns' is required.")
    if isinstance(raw_columns, str):
        return (_expect_string(raw_columns, f"{context} columns"),)
    column_rows = _expect_sequence(raw_columns, f"{context} columns")
    if not column_rows:
        raise PlatterRecipeError(f"Invalid {context}: field 'columns' must not be empty.")
    return tuple(_expect_string(column, f"{context} columns") for column in column_rows)


def _parse_relations(root_mapping: Mapping[str, object]) -> tuple[PruneRelation, ...]:
    raw_relations = root_mapping.get("relations")
    if raw_relations is None:
        return ()
    relation_rows = _expect_sequence(raw_relations, "recipe relations")
    relations = []
    for index, relation_value in enumerate(relation_rows):
        context = f"recipe relation #{index + 1}"
        relation_mapping = _expect_mapping(relation_value, context)
        field_names = {"child", "foreign_key", "parent", "parent_key"}
        _validate_keys(relation_mapping, field_names, context)
        missing_fields = sorted(field_names - set(relation_mapping))
        if missing_fields:
            raise PlatterRecipeError(
                f"Invalid {context}: missing fields {', '.join(missing_fields)}."
            )
        relations.append(
            PruneRelation(
                child=_expect_string(relation_mapping["child"], f"{context} child"),
                foreign_key=_expect_string(
                    relation_mapping["foreign_key"], f"{context} foreign_key"
                ),
                parent=_expect_string(relation_mapping["parent"], f"{context} parent"),
                parent_key=_expect_string(relation_mapping["parent_key"], f"{context} parent_key"),
            )
        )
    return tuple(relations)


def _validate_keys(mapping: Mapping[str, object], allowed_keys: set[str], context: str) -> None:
    unknown_keys = sorted(set(mapping) - allowed_keys)
    if unknown_keys:
        raise PlatterRecipeError(f"Invalid {context}: unknown fields {', '.join(unknown_keys)}.")
