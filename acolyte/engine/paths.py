"""Dot-path lookups into nested actor/item data."""

from collections.abc import Mapping, Sequence
from typing import Any


class _Missing:
    """Sentinel for a path that does not resolve. Falsy, never equal to data."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def resolve_path(data: Any, path: str) -> Any:
    """
    Walk a dot-separated path ("system.characteristics.ws.bonus").

    Mapping keys are looked up by name, sequence items by integer index.
    Returns MISSING (never None) when any segment is absent, so callers have
    to handle the miss explicitly.
    """
    if not isinstance(path, str) or not path:
        return MISSING

    current = data
    for segment in path.split("."):
        if isinstance(current, Mapping):
            if segment not in current:
                return MISSING
            current = current[segment]
        elif isinstance(current, Sequence) and not isinstance(current, str):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError):
                return MISSING
        else:
            return MISSING
    return current


def resolve_number(data: Any, path: str) -> Any:
    """Like resolve_path, but anything that is not an int/float is MISSING."""
    value = resolve_path(data, path)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return MISSING
    return value
