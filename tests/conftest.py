"""
Global pytest configuration and shared fixtures.

Provides common test infrastructure for all test suites including:
- Preparation pass and config fixtures
- Actor/item builders
- Cleanup of test-only rule element registrations
"""

import sys
from pathlib import Path

import pytest

# Make tests/builders.py importable as a plain module
sys.path.insert(0, str(Path(__file__).parent))

from acolyte.config import RulesConfig  # noqa: E402
from acolyte.engine.rules.base import _RULE_ELEMENT_REGISTRY, get_all_rule_elements  # noqa: E402
from acolyte.engine.systems.preparation import PreparationPass  # noqa: E402
from builders import ActorBuilder, ItemBuilder  # noqa: E402

# ============================================================================
# Engine Fixtures
# ============================================================================


@pytest.fixture
def config() -> RulesConfig:
    return RulesConfig()


@pytest.fixture
def preparation(config) -> PreparationPass:
    return PreparationPass(config)


@pytest.fixture
def restore_registry():
    """Restore the rule element registry after a test registers variants."""
    saved = get_all_rule_elements()
    yield
    _RULE_ELEMENT_REGISTRY.clear()
    _RULE_ELEMENT_REGISTRY.update(saved)


# ============================================================================
# Builder Fixtures
# ============================================================================


@pytest.fixture
def item_builder() -> ItemBuilder:
    return ItemBuilder()


@pytest.fixture
def actor_builder() -> ActorBuilder:
    return ActorBuilder()


@pytest.fixture
def acolyte():
    """An actor with a full characteristic line and no items."""
    return (
        ActorBuilder()
        .with_name("Interrogator Vane")
        .with_characteristic("ws", 35, advances=1)
        .with_characteristic("bs", 40)
        .with_characteristic("s", 30)
        .with_characteristic("t", 35)
        .with_characteristic("ag", 33)
        .with_characteristic("int", 41)
        .with_characteristic("per", 38)
        .with_characteristic("wp", 45, advances=2)
        .with_characteristic("fel", 29)
        .build()
    )

