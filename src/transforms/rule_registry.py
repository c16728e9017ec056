"""Rule construction from recipe entries.

This module maps recipe rule kinds onto rule classes and validates
kind-specific options before building immutable rule objects.
"""

from __future__ import annotations

from typing import Callable, Mapping, Sequence, cast

from core.errors import PlatterConfigError, PlatterRecipeError
from core.recipe import RecipeRuleSpec
from transforms.case_normalization import CaseNormalizationRule
from transforms.categorical_remap import CategoricalRemapRule, resolve_builtin_lookup
from transforms.control_characters import ControlCharacterRule
from transforms.currency_amount import CurrencyAmountRule
from transforms.delimiter_spacing import DelimiterSpacingRule
from transforms.exact_deduplication import DuplicateEliminationRule, KeepPolicy
from transforms.noise_stripping import NoiseStrippingRule
from transforms.numeric_suffix import NumericSuffixRule
from transforms.rule_base import Rule
from transforms.whitespace_trim import WhitespaceTrimRule

_RULE_CLASSES: Mapping[str, type] = {
    "delimiter_spacing": DelimiterSpacingRule,
    "title_case": CaseNormalizationRule,
    "strip_noise": NoiseStrippingRule,
    "remap": CategoricalRemapRule,
    "strip_control": ControlCharacterRule,
    "numeric_suffix": NumericSuffixRule,
    "deduplicate": DuplicateEliminationRule,
    "currency_amount": CurrencyAmountRule,
    "trim": WhitespaceTrimRule,
}

_ALLOWED_OPTIONS: Mapping[str, frozenset[str]] = {
    "delimiter_spacing": frozenset({"delimiter"}),
    "strip_noise": frozenset({"substring", "pattern"}),
    "remap": frozenset({"mapping"}),
    "deduplicate": frozenset({"tie_break", "keep"}),
}


def build_rules(specs: Sequence[RecipeRuleSpec]) -> tuple[Rule, ...]:
    """Build rule objects for an ordered list of recipe entries.

    Raises:
        PlatterRecipeError: If any entry has invalid options.
    """
    return tuple(build_rule(spec) for spec in specs)


def build_rule(spec: RecipeRuleSpec) -> Rule:
    """Build one rule object from its recipe entry.

    Args:
        spec: Parsed recipe rule entry.

    Returns:
        Constructed rule.

    Raises:
        PlatterRecipeError: If options are unknown or invalid for the kind.
    """
    allowed_options = _ALLOWED_OPTIONS.get(spec.kind, frozenset())
    unknown_options = sorted(set(spec.options) - allowed_options)
    if unknown_options:
        raise PlatterRecipeError(
            f"Rule '{spec.name}' of kind '{spec.kind}' does not accept options: "
            f"{', '.join(unknown_options)}."
        )
    builder = _BUILDERS.get(spec.kind, _build_plain_rule)
    try:
        return builder(spec)
    except PlatterConfigError as error:
        raise PlatterRecipeError(str(error)) from error


def describe_rule_kinds() -> list[tuple[str, str]]:
    """Return ``(kind, summary)`` rows for every supported rule kind."""
    rows = []
    for kind, rule_class in _RULE_CLASSES.items():
        summary = (rule_class.__doc__ or "").strip().splitlines()[0]
        rows.append((kind, summary))
    return rows


def _build_plain_rule(spec: RecipeRuleSpec) -> Rule:
    rule_class = _RULE_CLASSES[spec.kind]
    return cast(Rule, rule_class(name=spec.name, columns=spec.columns))


def _build_delimiter_rule(spec: RecipeRuleSpec) -> Rule:
    delimiter = _string_option(spec, "delimiter", required=False)
    if delimiter is None:
        return DelimiterSpacingRule(name=spec.name, columns=spec.columns)
    return DelimiterSpacingRule(name=spec.name, columns=spec.columns, delimiter=delimiter)


def _build_noise_rule(spec: RecipeRuleSpec) -> Rule:
    substring = _string_option(spec, "substring", required=False)
    pattern = _string_option(spec, "pattern", required=False)
    if substring is not None and pattern is not None:
        raise PlatterRecipeError(
            f"Rule '{spec.name}' sets both 'substring' and 'pattern'. Choose one."
        )
    if substring is None:
        return NoiseStrippingRule(name=spec.name, columns=spec.columns, pattern=pattern)
    return NoiseStrippingRule(name=spec.name, columns=spec.columns, substring=substring)


def _build_remap_rule(spec: RecipeRuleSpec) -> Rule:
    raw_mapping = spec.options.get("mapping")
    if isinstance(raw_mapping, str):
        mapping = resolve_builtin_lookup(raw_mapping)
    elif isinstance(raw_mapping, Mapping) and raw_mapping:
        mapping = {str(key): str(value) for key, value in raw_mapping.items()}
    else:
        raise PlatterRecipeError(
            f"Rule '{spec.name}' needs 'mapping': a built-in lookup name or a label table."
        )
    return CategoricalRemapRule(name=spec.name, columns=spec.columns, mapping=mapping)


def _build_dedup_rule(spec: RecipeRuleSpec) -> Rule:
    tie_break = cast(str, _string_option(spec, "tie_break", required=True))
    keep = _string_option(spec, "keep", required=False) or "lowest"
    return DuplicateEliminationRule(
        name=spec.name,
        columns=spec.columns,
        tie_break=tie_break,
        keep=cast(KeepPolicy, keep),
    )


def _string_option(spec: RecipeRuleSpec, option_name: str, required: bool) -> str | None:
    raw_value = spec.options.get(option_name)
    if raw_value is None:
        if required:
            raise PlatterRecipeError(
                f"Rule '{spec.name}' of kind '{spec.kind}' requires option '{option_name}'."
            )
        return None
    if isinstance(raw_value, str) and raw_value:
        return raw_value
    raise PlatterRecipeError(
        f"Rule '{spec.name}' option '{option_name}' must be a non-empty string."
    )


_BUILDERS: Mapping[str, Callable[[RecipeRuleSpec], Rule]] = {
    "delimiter_spacing": _build_delimiter_rule,
    "strip_noise": _build_noise_rule,
    "remap": _build_remap_rule,
    "deduplicate": _build_dedup_rule,
}
