"""
Unit tests for environment-driven configuration.
"""

import pytest

from acolyte.config import DEFAULT_MODIFIER_CAP, RulesConfig


@pytest.mark.unit
def test_defaults(monkeypatch):
    for name in ("ACOLYTE_MODIFIER_CAP", "ACOLYTE_LOG_LEVEL", "ACOLYTE_STRICT_AUTHORING"):
        monkeypatch.delenv(name, raising=False)

    config = RulesConfig.from_env()

    assert config.modifier_cap == DEFAULT_MODIFIER_CAP == 60
    assert config.log_level == "WARNING"
    assert config.strict_authoring is False


@pytest.mark.unit
def test_env_overrides(monkeypatch):
    monkeypatch.setenv("ACOLYTE_MODIFIER_CAP", "40")
    monkeypatch.setenv("ACOLYTE_LOG_LEVEL", "debug")
    monkeypatch.setenv("ACOLYTE_STRICT_AUTHORING", "yes")

    config = RulesConfig.from_env()

    assert config.modifier_cap == 40
    assert config.log_level == "DEBUG"
    assert config.strict_authoring is True


@pytest.mark.unit
@pytest.mark.parametrize("value", ["sixty", "-5", "1.5"])
def test_bad_cap_rejected(monkeypatch, value):
    monkeypatch.setenv("ACOLYTE_MODIFIER_CAP", value)

    with pytest.raises(ValueError, match="ACOLYTE_MODIFIER_CAP"):
        RulesConfig.from_env()
