"""Exception types raised by the rules engine."""


class RulesError(Exception):
    """Base class for rules engine errors."""


class RuleElementError(RulesError):
    """
    A rule element's authored fields are malformed.

    Raised from ``contribute``; the preparation pass catches it per element,
    logs it, and moves on to the next element.
    """

    def __init__(self, key: str, message: str):
        self.key = key
        super().__init__(f"{key}: {message}")


class AuthoringError(RulesError):
    """Authoring text could not be parsed into a rule element list."""

    def __init__(self, message: str, line: int | None = None, column: int | None = None):
        self.line = line
        self.column = column
        location = f" (line {line}, column {column})" if line is not None else ""
        super().__init__(f"{message}{location}")
