"""
Rules engine configuration.

Override any of these with environment variables.
"""

import os
from dataclasses import dataclass

# Modifier cap applied by the resolver (total is clamped to +/- this value)
DEFAULT_MODIFIER_CAP = 60

# Log level used by the acolyte CLI
DEFAULT_LOG_LEVEL = "WARNING"


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class RulesConfig:
    """Tunable engine parameters."""

    modifier_cap: int = DEFAULT_MODIFIER_CAP
    log_level: str = DEFAULT_LOG_LEVEL
    strict_authoring: bool = False  # Authoring warnings count as errors

    @classmethod
    def from_env(cls) -> "RulesConfig":
        """Build a config from ACOLYTE_* environment variables."""
        cap = os.getenv("ACOLYTE_MODIFIER_CAP")
        try:
            modifier_cap = int(cap) if cap is not None else DEFAULT_MODIFIER_CAP
        except ValueError:
            raise ValueError(f"ACOLYTE_MODIFIER_CAP must be an integer, got {cap!r}") from None
        if modifier_cap < 0:
            raise ValueError("ACOLYTE_MODIFIER_CAP must not be negative")

        return cls(
            modifier_cap=modifier_cap,
            log_level=os.getenv("ACOLYTE_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
            strict_authoring=_env_flag("ACOLYTE_STRICT_AUTHORING"),
        )
