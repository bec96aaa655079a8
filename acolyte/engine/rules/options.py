"""Rule elements that feed the roll option tag set."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .base import RuleElement, RuleElementSource, rule_element

if TYPE_CHECKING:
    from ..synthetics import Synthetics

logger = logging.getLogger(__name__)


@rule_element("RollOption", description="Inject a roll option string")
class RollOption(RuleElement):
    """
    Injects a literal roll option into the actor's synthetics.

    A Reliable weapon adds `weapon:reliable` so jam-prevention predicates can
    check for it:

        - key: RollOption
          option: weapon:reliable
    """

    def contribute(self, synthetics: Synthetics) -> None:
        synthetics.add_roll_option(self.require("option", str))

    @classmethod
    def validate_source(cls, source: RuleElementSource) -> list[str]:
        if not isinstance(source.get("option"), str):
            return ['RollOption requires an "option" string.']
        return []


@dataclass
class ChoiceOption:
    """A single option offered by a ChoiceSet."""

    value: str  # Stored as the selection
    label: str  # Shown to the user

    @classmethod
    def from_data(cls, data: Any) -> "ChoiceOption | None":
        if isinstance(data, str):
            return cls(value=data, label=data)
        if isinstance(data, Mapping) and isinstance(data.get("value"), str):
            label = data.get("label")
            return cls(value=data["value"], label=label if isinstance(label, str) else data["value"])
        return None


# (prompt text, options) -> selected value, or None when the user cancels
ChoicePrompt = Callable[[str, list[ChoiceOption]], Awaitable["str | None"]]


@rule_element("ChoiceSet", description="Prompt user to pick from options")
class ChoiceSet(RuleElement):
    """
    Lets the user pick one option when the owning item is created.

    Two separate phases:
    - `elicit` runs once, at item creation, and asks the user. The caller
      stores the answer as an item flag (see systems.lifecycle).
    - `contribute` runs every preparation pass and re-emits the stored
      answer as the tag "choice:<flag>:<value>".

        - key: ChoiceSet
          prompt: Choose a specialization
          flag: specialization
          choices:
            - {value: bolter, label: Bolter}
            - {value: las, label: Las}
    """

    def contribute(self, synthetics: Synthetics) -> None:
        flag = self.require("flag", str)
        chosen = self.item.get_flag(flag)
        if chosen:
            synthetics.add_roll_option(f"choice:{flag}:{chosen}")

    @staticmethod
    def parse_choices(source: RuleElementSource) -> list[ChoiceOption]:
        raw = source.get("choices")
        if not isinstance(raw, list):
            return []
        return [c for c in (ChoiceOption.from_data(r) for r in raw) if c is not None]

    @classmethod
    async def elicit(cls, source: RuleElementSource, prompt: ChoicePrompt) -> str | None:
        """
        Ask the user for a choice. Returns the chosen value, or None if the
        user cancelled (or answered with something that is not an option).
        """
        choices = cls.parse_choices(source)
        text = source.get("prompt") or source.get("label") or "Choose an option"

        selected = await prompt(text, choices)
        if selected is None:
            return None
        if selected not in {c.value for c in choices}:
            logger.warning("ChoiceSet %r: %r is not one of the offered choices", source.get("flag"), selected)
            return None
        return selected

    @classmethod
    def validate_source(cls, source: RuleElementSource) -> list[str]:
        errors = []
        choices = source.get("choices")
        if not isinstance(choices, list):
            errors.append('ChoiceSet requires a "choices" array.')
        elif any(ChoiceOption.from_data(c) is None for c in choices):
            errors.append('ChoiceSet choices must be strings or have a "value" string.')
        if not isinstance(source.get("flag"), str):
            errors.append('ChoiceSet requires a "flag" string.')
        return errors
