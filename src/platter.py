"""Public SDK surface for Platter.

This module provides a stable import path for library users.
It re-exports the client, the pipeline entry points, and rule types.
"""

from __future__ import annotations

from core.config import PlatterConfig
from core.recipe import CleaningRecipe, load_recipe
from core.types import CleaningReport, CleanOptions, DatasetCleaningResult, PruneResult
from store.dataset_sdk import PlatterClient
from transforms.case_normalization import CaseNormalizationRule
from transforms.categorical_remap import CategoricalRemapRule
from transforms.control_characters import ControlCharacterRule
from transforms.currency_amount import CurrencyAmountRule
from transforms.delimiter_spacing import DelimiterSpacingRule
from transforms.exact_deduplication import DuplicateEliminationRule
from transforms.food_delivery import build_food_delivery_recipe
from transforms.noise_stripping import NoiseStrippingRule
from transforms.normalization_pipeline import run
from transforms.numeric_suffix import NumericSuffixRule
from transforms.referential_pruning import prune_orphans
from transforms.whitespace_trim import WhitespaceTrimRule

__all__ = [
    "CaseNormalizationRule",
    "CategoricalRemapRule",
    "CleanOptions",
    "CleaningRecipe",
    "CleaningReport",
    "ControlCharacterRule",
    "CurrencyAmountRule",
    "DatasetCleaningResult",
    "DelimiterSpacingRule",
    "DuplicateEliminationRule",
    "NoiseStrippingRule",
    "NumericSuffixRule",
    "PlatterClient",
    "PlatterConfig",
    "PruneResult",
    "WhitespaceTrimRule",
    "build_food_delivery_recipe",
    "load_recipe",
    "prune_orphans",
    "run",
]
