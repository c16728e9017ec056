"""Built-in cleaning recipe for the food-delivery dataset.

Covers the five logical tables (restaurant, users, orders, menu, food)
and the foreign-key relations between them. Used whenever a clean or
verify run is started without an explicit recipe file.
"""

from __future__ import annotations

from core.constants import RECIPE_VERSION
from core.recipe import CleaningRecipe, RecipeRuleSpec, RuleKind, default_rule_name
from core.types import PruneRelation


def build_food_delivery_recipe() -> CleaningRecipe:
    """Return the default food-delivery recipe."""
    return CleaningRecipe(
        version=RECIPE_VERSION,
        tables={
            "restaurant": (
                _rule("numeric_suffix", "id"),
                _rule("strip_noise", "name", "address", substring="\\"),
                _rule("trim", "name", "city", "address"),
                _rule("title_case", "name", "city", "address"),
                _rule("delimiter_spacing", "cuisine", delimiter=","),
                _rule("currency_amount", "cost"),
            ),
            "users": (
                _rule("numeric_suffix", "user_id"),
                _rule("trim", "name"),
                _rule("title_case", "name"),
                _rule("remap", "Monthly Income", mapping="income_buckets"),
            ),
            "orders": (
                _rule("strip_control", "currency"),
                _rule("numeric_suffix", "r_id", "user_id"),
            ),
            "menu": (
                _rule("numeric_suffix", "r_id"),
                _rule("strip_control", "cuisine"),
                _rule("delimiter_spacing", "cuisine", delimiter=","),
                _rule("currency_amount", "price"),
                _rule(
                    "deduplicate",
                    "r_id",
                    "f_id",
                    "cuisine",
                    "price",
                    tie_break="menu_id",
                    keep="lowest",
                ),
            ),
            "food": (
                _rule("trim", "item"),
                _rule("title_case", "item"),
                _rule("remap", "veg_or_non_veg", mapping="veg_labels"),
            ),
        },
        relations=(
            PruneRelation(child="orders", foreign_key="r_id", parent="restaurant", parent_key="id"),
            PruneRelation(
                child="orders", foreign_key="user_id", parent="users", parent_key="user_id"
            ),
            PruneRelation(child="menu", foreign_key="r_id", parent="restaurant", parent_key="id"),
            PruneRelation(child="menu", foreign_key="f_id", parent="food", parent_key="f_id"),
        ),
    )


def _rule(kind: RuleKind, *columns: str, **options: object) -> RecipeRuleSpec:
    return RecipeRuleSpec(
        kind=kind,
        name=default_rule_name(kind, columns),
        columns=columns,
        options=options,
    )
