# Tasklane CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines all custom exception classes used in the Tasklane CLI framework.

Parse-time errors carry the `ParseState` that was active when they were
raised, so the run loop can point at the offending token, list candidate
commands, or print a usage line for the command being parsed.

Exception Hierarchy:
- TasklaneError
    ├── SchemaError
    ├── ConfigError
    ├── ParseError
    │   ├── NotFoundError
    │   ├── DemandError
    │   ├── CountError
    │   └── InvalidTypeError
    └── TaskError

`ParseError` raised directly means the token sequence itself was malformed.
Its `render()` output points a caret at the byte offset of the bad token in
the reconstructed command line.
"""
from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any, Sequence

if TYPE_CHECKING:
    from tasklane.parser.parser import ParseState


class TasklaneError(Exception):
    """Base exception for the Tasklane framework."""


class SchemaError(TasklaneError):
    """Exception raised when a command, option, or argument is declared incorrectly."""


class ConfigError(TasklaneError):
    """Exception raised when a configuration file cannot be read or holds an invalid value."""


class TaskError(TasklaneError):
    """Exception raised when a task, or one of its sub-tasks, failed."""


class ParseError(TasklaneError):
    """Exception raised when the argument vector cannot be parsed."""

    def __init__(
        self,
        message: str,
        state: ParseState | None = None,
        tokens: Sequence[str] | None = None,
        position: int | None = None,
    ):
        self.reason = message
        self.state = state
        self.tokens = list(tokens or [])
        self.position = position
        if position is not None:
            message = f"{message} (at position {position})"
        super().__init__(message)

    @property
    def kind(self) -> str:
        return "input"

    def render(self) -> str:
        """Return the error with a caret under the offending token."""
        if self.position is None:
            return str(self)
        padding = " " * self.position
        return (
            "Invalid input:\n"
            f"  {' '.join(self.tokens)}\n"
            f"  {padding}^\n"
            f"  {padding}{self.reason}"
        )


class NotFoundError(ParseError):
    """Exception raised when a command or option name does not resolve."""

    def __init__(self, kind: str, item: str, state: ParseState | None = None):
        self._kind = kind
        self.item = item
        super().__init__(f"No such {kind}: {item}", state)

    @property
    def kind(self) -> str:
        return self._kind


class DemandError(ParseError):
    """Exception raised when a required command, option, or argument was never bound."""

    def __init__(
        self, kind: str, state: ParseState | None = None, item: str | None = None
    ):
        self._kind = kind
        self.item = item or ""
        suffix = f": {item}" if item else ""
        super().__init__(f"{kind.capitalize()} required{suffix}", state)

    @property
    def kind(self) -> str:
        return self._kind


class CountError(ParseError):
    """Exception raised when an item received the wrong number of values."""

    def __init__(
        self,
        kind: str,
        item: str,
        actual: int,
        expected: tuple[int, float],
        state: ParseState | None = None,
    ):
        self._kind = kind
        self.item = item
        self.actual = actual
        self.expected = expected
        minimum, maximum = expected
        if actual < minimum:
            amount = "Not enough"
        else:
            amount = "Too many"
        if minimum == maximum:
            wanted = f"{minimum}"
        elif math.isinf(maximum):
            wanted = f"at least {minimum}"
        else:
            wanted = f"between {minimum} and {int(maximum)}"
        super().__init__(
            f"{amount} values provided for {kind} {item}. "
            f"Got {actual}, wanted {wanted}",
            state,
        )

    @property
    def kind(self) -> str:
        return self._kind


class InvalidTypeError(ParseError):
    """Exception raised when a value fails type validation or is not a valid choice."""

    def __init__(
        self,
        kind: str,
        item: str,
        value: str,
        state: ParseState | None = None,
        choices: Sequence[Any] = (),
        type_name: str = "string",
    ):
        self._kind = kind
        self.item = item
        self.value = value
        self.choices = list(choices)
        if self.choices:
            valid = ", ".join(str(choice) for choice in self.choices)
            message = (
                f"{value} is not a valid input for {kind} {item}. Valid inputs: {valid}"
            )
        else:
            message = f"Failed to parse {value} as {type_name} for {kind} {item}"
        super().__init__(message, state)

    @property
    def kind(self) -> str:
        return self._kind
