# acolyte/engine/systems/authoring.py
"""
Authoring layer: the YAML text form of an item's rules list.

Editor-facing only. Nothing here runs during data preparation, so parse
failures are loud (AuthoringError) instead of logged and skipped.

    text = to_text(item.rules)          # shown in the rules editor
    rules = from_text(edited_text)      # raises AuthoringError on bad YAML
    errors = validate(rules)            # ["Rule #2: ...", ...]
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import yaml
from pydantic import BaseModel

from ..errors import AuthoringError
from ..rules import get_rule_element, registered_keys
from ..rules.base import RuleElementSource

logger = logging.getLogger(__name__)

YAML_TEMPLATE = """\
# Rule Elements (YAML format)
# Each entry is a rule element that modifies the actor/item.
# Supported types:
#   FlatModifier       Add a flat modifier to a domain
#   RollOption         Inject a roll option string
#   DiceOverride       Modify damage dice (Tearing, Proven, etc.)
#   AdjustDegree       Adjust DoS/DoF after a check
#   GrantItem          Auto-grant an item on creation
#   Resistance         Damage reduction by type
#   AdjustToughness    Modify effective TB for damage soak
#   ChoiceSet          Prompt user to pick from options
#   ActorValue         Dynamic value from actor stats (e.g. half WSB)
#   AttributeOverride  Swap characteristic for a test domain
#
# Example:
# - key: FlatModifier
#   domain: characteristic:bs
#   value: 10
#   label: Marksman
#   source: talent
#   predicate:
#     - self:aim:full
"""

# Fields coerced to numbers by clean_rule when given as numeric strings
NUMERIC_FIELDS = ("value", "amount")


# =============================================================================
# Text <-> sources
# =============================================================================


def to_text(rules: list[RuleElementSource] | None) -> str:
    """Dump a rules list as YAML. An empty list gives the template text."""
    if not rules:
        return YAML_TEMPLATE

    return yaml.safe_dump(
        [dict(r) if isinstance(r, Mapping) else r for r in rules],
        indent=2,
        width=120,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )


def from_text(text: str) -> list[Any]:
    """
    Parse editor YAML into a rules list.

    Empty text, the untouched template, and comment-only text all give [].
    A single mapping is accepted as a one-element list.

    Raises:
        AuthoringError: The YAML does not parse, or is a bare scalar.
    """
    trimmed = text.strip()
    if not trimmed or trimmed == YAML_TEMPLATE.strip():
        return []

    try:
        parsed = yaml.safe_load(trimmed)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        problem = getattr(e, "problem", None) or str(e)
        if mark is not None:
            raise AuthoringError(
                f"YAML parse error: {problem}", line=mark.line + 1, column=mark.column + 1
            ) from e
        raise AuthoringError(f"YAML parse error: {problem}") from e

    if parsed is None:
        return []
    if isinstance(parsed, dict):
        return [parsed]
    if not isinstance(parsed, list):
        raise AuthoringError("Rule elements must be a YAML list (array) of objects.")
    return parsed


# =============================================================================
# Validation
# =============================================================================


def validate(rules: list[Any]) -> list[str]:
    """
    Structural checks for a parsed rules list. Never raises.

    Every message names the 1-based position of the offending entry.
    """
    errors: list[str] = []

    for i, rule in enumerate(rules, start=1):
        prefix = f"Rule #{i}"

        if not isinstance(rule, Mapping):
            errors.append(f"{prefix}: must be a mapping with a \"key\" field.")
            continue

        key = rule.get("key")
        if key is None or key == "":
            errors.append(f'{prefix}: Missing required "key" field.')
            continue
        if not isinstance(key, str):
            errors.append(f'{prefix}: "key" must be a string.')
            continue

        element_cls = get_rule_element(key)
        if element_cls is None:
            errors.append(
                f'{prefix}: Unknown RE type "{key}". Valid types: {", ".join(registered_keys())}'
            )
            continue

        errors.extend(f"{prefix}: {message}" for message in element_cls.validate_source(rule))

    return errors


def lint(rules: list[Any]) -> list[str]:
    """Non-blocking style warnings (label and predicate shapes)."""
    warnings: list[str] = []

    for i, rule in enumerate(rules, start=1):
        if not isinstance(rule, Mapping):
            continue
        prefix = f"Rule #{i}"
        if "predicate" in rule and not isinstance(rule["predicate"], list):
            warnings.append(f'{prefix}: "predicate" should be a list of statements.')
        if "label" in rule and not isinstance(rule["label"], str):
            warnings.append(f'{prefix}: "label" should be a string.')

    return warnings


class ValidationReport(BaseModel):
    """Result of checking one rules text."""

    errors: list[str] = []
    warnings: list[str] = []
    rule_count: int = 0

    @property
    def is_valid(self) -> bool:
        return not self.errors


def check_text(text: str, strict: bool = False) -> ValidationReport:
    """
    Parse and validate a rules text in one go.

    Parse failures become a single error instead of raising. With strict,
    warnings count as errors.
    """
    try:
        rules = from_text(text)
    except AuthoringError as e:
        return ValidationReport(errors=[str(e)])

    errors = validate(rules)
    warnings = lint(rules)
    if strict:
        errors, warnings = errors + warnings, []

    return ValidationReport(errors=errors, warnings=warnings, rule_count=len(rules))


# =============================================================================
# Rule builder helpers
# =============================================================================


def clean_rule(form: Mapping[str, Any]) -> dict[str, Any]:
    """
    Tidy a rule built from form fields before it is stored.

    Drops empty strings and None, and turns numeric strings in value/amount
    into numbers. Zero is kept; "rating" and "actor:..." strings are kept.
    """
    clean: dict[str, Any] = {}
    for field, value in form.items():
        if value is None or value == "":
            continue
        if field in NUMERIC_FIELDS and isinstance(value, str):
            value = _to_number(value)
        clean[field] = value
    return clean


def _to_number(text: str) -> int | float | str:
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return text
