"""
Rule-effect engine.

Leaf first:
- predicate:  boolean expressions over the active roll option tags
- modifier:   Modifier and the resolve_modifiers pipeline
- synthetics: per-pass registry rule elements contribute into
- rules:      the rule element variants and their registry
- systems:    preparation pass, item lifecycle hooks, authoring
"""

from .documents import Actor, Item
from .errors import AuthoringError, RuleElementError, RulesError
from .modifier import Modifier, ModifierResolution, apply_exclusion_groups, resolve_modifiers
from .paths import MISSING, resolve_path
from .predicate import Predicate
from .synthetics import Synthetics

__all__ = [
    "Actor",
    "AuthoringError",
    "Item",
    "MISSING",
    "Modifier",
    "ModifierResolution",
    "Predicate",
    "RuleElementError",
    "RulesError",
    "Synthetics",
    "apply_exclusion_groups",
    "resolve_modifiers",
    "resolve_path",
]
