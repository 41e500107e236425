"""Error hierarchy for the DOT codec."""

from __future__ import annotations


class DotError(Exception):
    """Base error for all codec errors."""

    def __init__(self, message: str, *, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class DotSyntaxError(DotError, ValueError):
    """Malformed DOT text. No partial graph is ever returned alongside it."""

    def __init__(
        self,
        message: str,
        *,
        position: int,
        source: str = "",
        expected: str | None = None,
        found: str | None = None,
        cause: Exception | None = None,
    ):
        self.position = position
        self.line, self.column = _line_and_column(source, position)
        self.expected = expected
        self.found = found
        self.message = message

        detail = message
        if expected is not None:
            detail += f" (expected {expected}"
            detail += f", found {found!r})" if found is not None else ")"
        super().__init__(f"{detail} at line {self.line}, column {self.column}", cause=cause)


class ConfigurationError(DotError):
    """Invalid codec settings."""


class LexicalAmbiguity(UserWarning):
    """A token was readable two ways and was resolved by precedence."""


def _line_and_column(source: str, position: int) -> tuple[int, int]:
    prefix = source[:position]
    line = prefix.count("\n") + 1
    column = position - (prefix.rfind("\n") + 1) + 1
    return line, column
