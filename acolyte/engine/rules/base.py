# acolyte/engine/rules/base.py
"""
Base class and decorator for the rule element system.

Rule elements are small, independently authored effect declarations attached
to content items. Each concrete variant is registered under the string `key`
authors write in their data, and knows how to contribute itself into the
actor's Synthetics registry.

Example variant:

    from .base import RuleElement, rule_element

    @rule_element("RollOption", description="Inject a roll option string")
    class RollOption(RuleElement):
        def contribute(self, synthetics: Synthetics) -> None:
            synthetics.add_roll_option(self.require("option", str))

Adding a variant means writing one class and decorating it; nothing in the
preparation pass, resolver, or registry changes.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ..errors import RuleElementError
from ..paths import MISSING
from ..predicate import Predicate

if TYPE_CHECKING:
    from ..documents import Actor, Item
    from ..synthetics import Synthetics

logger = logging.getLogger(__name__)

# Raw authored form: {"key": ..., "label"?: ..., "predicate"?: [...], ...}
RuleElementSource = Mapping[str, Any]

# Literal that makes a numeric field read the owning item's rating
RATING = "rating"


# =============================================================================
# Rule Element Base Class
# =============================================================================


class RuleElement(ABC):
    """
    Base class for all rule elements.

    Subclasses implement `contribute`, the only place allowed to mutate the
    synthetics registry. Reading a required field that is missing or of the
    wrong type raises RuleElementError; the preparation pass logs it and
    carries on with the next element.
    """

    # Metadata - set by the @rule_element decorator
    keys: tuple[str, ...] = ()
    description: str = ""

    def __init__(self, source: RuleElementSource, item: Item):
        self.source = source
        self.item = item
        self.key: str = source.get("key", "")

    @property
    def actor(self) -> Actor | None:
        return self.item.parent

    @property
    def label(self) -> str:
        label = self.source.get("label")
        return label if isinstance(label, str) and label else self.item.name

    @property
    def predicate(self) -> Predicate:
        return Predicate.from_data(self.source.get("predicate"))

    @abstractmethod
    def contribute(self, synthetics: Synthetics) -> None:
        """Called during actor data preparation to inject into synthetics."""

    # --- Field helpers ---

    def require(self, field: str, kind: type | tuple[type, ...]) -> Any:
        """Read a required field, raising RuleElementError if absent or mistyped."""
        value = self.source.get(field, MISSING)
        if value is MISSING or value is None:
            raise RuleElementError(self.key, f'missing required field "{field}"')
        if not _is_kind(value, kind):
            raise RuleElementError(
                self.key, f'field "{field}" has wrong type {type(value).__name__}'
            )
        return value

    def optional(self, field: str, kind: type | tuple[type, ...], default: Any = None) -> Any:
        """Read an optional field; absent means default, mistyped is an error."""
        value = self.source.get(field)
        if value is None:
            return default
        if not _is_kind(value, kind):
            raise RuleElementError(
                self.key, f'field "{field}" has wrong type {type(value).__name__}'
            )
        return value

    def numeric_or_rating(self, field: str) -> int | float:
        """A number, or the literal "rating" to read the owning item's rating."""
        value = self.require(field, (int, float, str))
        if isinstance(value, str):
            if value != RATING:
                raise RuleElementError(
                    self.key, f'field "{field}" must be a number or "{RATING}"'
                )
            return self.item.rating
        return value

    @classmethod
    def validate_source(cls, source: RuleElementSource) -> list[str]:
        """Authoring-time structural checks. Empty list means valid."""
        return []


def _is_kind(value: Any, kind: type | tuple[type, ...]) -> bool:
    kinds = kind if isinstance(kind, tuple) else (kind,)
    # bool is an int subclass, but True is never a meaningful number here
    if isinstance(value, bool) and bool not in kinds:
        return False
    return isinstance(value, kinds)


# =============================================================================
# Rule Element Decorator - for registering variants
# =============================================================================

# Global registry: discriminator key -> variant class
_RULE_ELEMENT_REGISTRY: dict[str, type[RuleElement]] = {}


def rule_element(*keys: str, description: str = ""):
    """
    Decorator to register a rule element class under one or more keys.

    Usage:
        @rule_element("FlatModifier", description="Flat modifier to a domain")
        class FlatModifier(RuleElement):
            def contribute(self, synthetics: Synthetics) -> None:
                ...

    Registering a key that already exists replaces the earlier class, which
    is how third-party content overrides a built-in variant.
    """
    if not keys:
        raise ValueError("rule_element() needs at least one key")

    def decorator(cls: type[RuleElement]) -> type[RuleElement]:
        cls.keys = keys
        cls.description = description

        for key in keys:
            if key in _RULE_ELEMENT_REGISTRY:
                logger.warning("Overwriting rule element %r", key)
            _RULE_ELEMENT_REGISTRY[key] = cls

        return cls

    return decorator


def get_rule_element(key: str) -> type[RuleElement] | None:
    """Get a registered rule element class by key."""
    return _RULE_ELEMENT_REGISTRY.get(key)


def get_all_rule_elements() -> dict[str, type[RuleElement]]:
    """Get all registered rule element classes."""
    return _RULE_ELEMENT_REGISTRY.copy()


def registered_keys() -> list[str]:
    """Registered discriminators, in registration order."""
    return list(_RULE_ELEMENT_REGISTRY)


def unregister_rule_element(key: str) -> type[RuleElement] | None:
    """Remove a key from the registry (used to undo test-only registrations)."""
    return _RULE_ELEMENT_REGISTRY.pop(key, None)
