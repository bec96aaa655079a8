# acolyte/engine/systems/weapon_qualities.py
"""
Weapon quality and craftsmanship synthesis.

Qualities ("Accurate", "Proven(3)"...) and the craftsmanship grade live as
plain fields on the weapon. At attack time they are turned into rule element
sources and contributed into a derived copy of the attacker's synthetics:

    sources = quality_rule_sources(weapon.system["qualities"])
    sources += craftsmanship_rule_sources(weapon.system["craftsmanship"])
    attack = actor.synthetics.derive()
    preparation.contribute_sources(attack, sources, weapon)

None of this is stored on the weapon item itself.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable
from typing import Any

logger = logging.getLogger(__name__)

QUALITY_PATTERN = re.compile(r"^(.+?)\((\d+)\)$")

# Qualities that need their own attack flow (templates, no BS test...)
EXOTIC_QUALITIES = frozenset({"blast", "flame", "haywire", "spray"})

CRAFTSMANSHIP_GRADES = ("poor", "common", "good", "best")

QualityGenerator = Callable[[int], list[dict[str, Any]]]

_QUALITIES: dict[str, QualityGenerator] = {}


def _quality(*slugs: str):
    """Register a generator for one or more quality slugs."""

    def decorator(func: QualityGenerator) -> QualityGenerator:
        for slug in slugs:
            _QUALITIES[slug] = func
        return func

    return decorator


def parse_quality(quality: str) -> tuple[str, int]:
    """
    Split a quality string into (slug, rating).

        parse_quality("Proven(3)")  -> ("proven", 3)
        parse_quality("Tearing")    -> ("tearing", 0)
    """
    match = QUALITY_PATTERN.match(quality)
    if match:
        return match.group(1).lower().strip(), int(match.group(2))
    return quality.lower().strip(), 0


def is_exotic_quality(slug: str) -> bool:
    return slug in EXOTIC_QUALITIES


def known_qualities() -> list[str]:
    return sorted(_QUALITIES)


def quality_rule_sources(qualities: Iterable[str]) -> list[dict[str, Any]]:
    """
    Rule element sources for a weapon's qualities.

    A quality with no generator still becomes the roll option
    "weapon:quality:<slug>" so predicates can refer to it.
    """
    sources: list[dict[str, Any]] = []
    for raw in qualities:
        if not isinstance(raw, str) or not raw.strip():
            logger.debug("Skipping non-string weapon quality %r", raw)
            continue
        slug, rating = parse_quality(raw)
        generator = _QUALITIES.get(slug)
        if generator is None:
            sources.append({"key": "RollOption", "option": f"weapon:quality:{slug}", "label": raw})
            continue
        sources.extend(generator(rating))
    return sources


def _option(option: str, label: str) -> dict[str, Any]:
    return {"key": "RollOption", "option": option, "label": label}


# =============================================================================
# Quality generators
# =============================================================================


@_quality("accurate")
def _accurate(rating: int) -> list[dict[str, Any]]:
    return [
        _option("weapon:accurate", "Accurate"),
        {
            "key": "FlatModifier",
            "domain": "attack:ranged",
            "value": 10,
            "label": "Accurate (Aim)",
            "source": "quality",
            "predicate": ["self:aim"],
        },
        {
            "key": "AdjustDegree",
            "amount": 1,
            "predicate": ["self:aim:full"],
            "label": "Accurate (Full Aim DoS)",
        },
    ]


@_quality("balanced")
def _balanced(rating: int) -> list[dict[str, Any]]:
    return [
        _option("weapon:balanced", "Balanced"),
        {"key": "FlatModifier", "domain": "skill:parry", "value": 10, "label": "Balanced", "source": "quality"},
    ]


@_quality("tearing")
def _tearing(rating: int) -> list[dict[str, Any]]:
    return [
        _option("weapon:tearing", "Tearing"),
        {"key": "DiceOverride", "domain": "damage:*", "mode": "rerollLowest", "label": "Tearing"},
    ]


@_quality("proven")
def _proven(rating: int) -> list[dict[str, Any]]:
    label = f"Proven({rating})"
    return [
        _option("weapon:proven", label),
        {"key": "DiceOverride", "domain": "damage:*", "mode": "minimumDie", "value": rating or 3, "label": label},
    ]


@_quality("primitive")
def _primitive(rating: int) -> list[dict[str, Any]]:
    label = f"Primitive({rating})"
    return [
        _option("weapon:primitive", label),
        {"key": "DiceOverride", "domain": "damage:*", "mode": "maximizeDie", "value": rating or 7, "label": label},
    ]


@_quality("felling")
def _felling(rating: int) -> list[dict[str, Any]]:
    label = f"Felling({rating})"
    return [
        _option("weapon:felling", label),
        {"key": "AdjustToughness", "value": -(rating or 1), "mode": "add", "label": label},
    ]


@_quality("blast")
def _blast(rating: int) -> list[dict[str, Any]]:
    return [_option(f"weapon:blast:{rating}", f"Blast({rating})")]


@_quality("razor sharp")
def _razor_sharp(rating: int) -> list[dict[str, Any]]:
    # Double penetration on 3+ DoS is applied by the damage step
    return [_option("weapon:razor-sharp", "Razor Sharp")]


def _rated_option(slug: str, name: str) -> QualityGenerator:
    def generator(rating: int) -> list[dict[str, Any]]:
        return [_option(f"weapon:{slug}", f"{name}({rating})")]

    return generator


def _plain_option(slug: str, name: str) -> QualityGenerator:
    def generator(rating: int) -> list[dict[str, Any]]:
        return [_option(f"weapon:{slug}", name)]

    return generator


# Tag-only qualities; their effects are read by the damage and attack steps
for _slug, _name in (("crippling", "Crippling"), ("toxic", "Toxic")):
    _quality(_slug)(_rated_option(_slug, _name))

for _slug, _name in (
    ("reliable", "Reliable"),
    ("unreliable", "Unreliable"),
    ("corrosive", "Corrosive"),
    ("flame", "Flame"),
    ("haywire", "Haywire"),
    ("spray", "Spray"),
    ("recharge", "Recharge"),
    ("overheats", "Overheats"),
    ("sanctified", "Sanctified"),
    ("force", "Force"),
):
    _quality(_slug)(_plain_option(_slug, _name))


# =============================================================================
# Craftsmanship
# =============================================================================

# Hit modifier per grade; "common" is the baseline
_CRAFTSMANSHIP_HIT = {"poor": -10, "good": 5, "best": 10}

_ARMOUR_CRAFTSMANSHIP_AP = {"poor": -1, "best": 1}


def craftsmanship_rule_sources(grade: str | None) -> list[dict[str, Any]]:
    """Attack modifiers for a weapon's craftsmanship grade (none for common)."""
    value = _CRAFTSMANSHIP_HIT.get(grade or "common")
    if value is None:
        return []

    label = f"{grade.capitalize()} Craftsmanship"
    return [
        _option(f"weapon:craftsmanship:{grade}", label),
        {"key": "FlatModifier", "domain": "attack:melee", "value": value, "label": label, "source": "equipment"},
        {"key": "FlatModifier", "domain": "attack:ranged", "value": value, "label": label, "source": "equipment"},
    ]


def armour_craftsmanship_bonus(grade: str | None) -> int:
    """AP adjustment per location for an armour's craftsmanship grade."""
    return _ARMOUR_CRAFTSMANSHIP_AP.get(grade or "common", 0)
