# acolyte/engine/predicate.py
"""
Predicate engine for testing roll options against conditional rules.

A predicate is a list of statements that must ALL hold. Each statement is:
- an atom "self:aim"       -> true if the tag is in the active set
- a negated atom "not:x"   -> true if "x" is NOT in the active set
- {"and": [...]}           -> true if every child holds (empty holds)
- {"or": [...]}            -> true if any child holds (empty never holds)

Anything else fails closed: a statement that cannot be classified never
matches, so broken authored data cannot grant an unconditional effect.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping
from typing import Any, Union

NEGATION_PREFIX = "not:"

PredicateStatement = Union[str, Mapping[str, Any]]


class Predicate:
    """Immutable list of predicate statements. Empty means unconditional."""

    __slots__ = ("_statements",)

    def __init__(self, statements: Iterable[PredicateStatement] = ()):
        # Deep copy so later edits to the authored source cannot leak in
        self._statements: tuple[PredicateStatement, ...] = tuple(
            copy.deepcopy(s) for s in statements
        )

    @classmethod
    def from_data(cls, data: Any) -> "Predicate":
        """Build a predicate from raw authored data, normalizing to a list."""
        if data is None:
            return cls()
        if isinstance(data, Predicate):
            return data
        if isinstance(data, (list, tuple)):
            return cls(data)
        return cls([data])

    @property
    def statements(self) -> tuple[PredicateStatement, ...]:
        return self._statements

    @property
    def is_empty(self) -> bool:
        return not self._statements

    def test(self, roll_options: Iterable[str]) -> bool:
        """True if every statement holds against the active roll options."""
        options = roll_options if isinstance(roll_options, (set, frozenset)) else set(roll_options)
        return all(_test_statement(s, options) for s in self._statements)

    def to_data(self) -> list[PredicateStatement]:
        """Plain-data copy suitable for persisting or dumping to YAML."""
        return [copy.deepcopy(s) for s in self._statements]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Predicate):
            return NotImplemented
        return self._statements == other._statements

    def __hash__(self) -> int:
        return hash(repr(self._statements))

    def __repr__(self) -> str:
        return f"Predicate({list(self._statements)!r})"


def _test_statement(statement: Any, options: set[str] | frozenset[str]) -> bool:
    if isinstance(statement, str):
        return _test_atom(statement, options)

    if isinstance(statement, Mapping) and len(statement) == 1:
        (operator, children), = statement.items()
        if not isinstance(children, (list, tuple)):
            return False
        if operator == "and":
            return all(_test_statement(c, options) for c in children)
        if operator == "or":
            return any(_test_statement(c, options) for c in children)

    return False


def _test_atom(atom: str, options: set[str] | frozenset[str]) -> bool:
    if atom.startswith(NEGATION_PREFIX):
        return atom[len(NEGATION_PREFIX):] not in options
    return atom in options
