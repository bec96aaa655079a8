# acolyte/engine/rules/registry.py
"""
Rule element dispatch: authored source -> rule element instance.

The lookup table lives in base.py and is filled by the @rule_element
decorator when the variant modules are imported (see rules/__init__.py).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .base import RuleElement, get_rule_element

if TYPE_CHECKING:
    from ..documents import Item

logger = logging.getLogger(__name__)


def instantiate(source: Any, item: "Item") -> RuleElement | None:
    """
    Instantiate a rule element from its authored source.

    Never raises. A source that is not a mapping, has no string `key`, or
    names an unregistered key is logged and yields None; the caller treats
    that as "contributed nothing this pass".

    Args:
        source: The raw authored data, e.g. {"key": "FlatModifier", ...}
        item: The item that owns this rule element

    Returns:
        The rule element, or None
    """
    if not isinstance(source, Mapping):
        logger.warning("Rule element on %r is not a mapping: %r", item.name, source)
        return None

    key = source.get("key")
    if not isinstance(key, str):
        logger.warning("Rule element on %r has no string key: %r", item.name, key)
        return None

    element_cls = get_rule_element(key)
    if element_cls is None:
        logger.warning("Unknown rule element key %r on %r", key, item.name)
        return None

    try:
        return element_cls(source, item)
    except Exception:
        logger.warning("Could not build rule element %r on %r", key, item.name, exc_info=True)
        return None
