# argdict — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines all custom exception classes used by argdict.

Only two families of failure are ever raised at a caller:

- Programmer errors found while building an `OptionTable` (`TableConflictError`)
  or loading a table definition from a file (`ConfigError`).
- `ParseError`, raised on request by `Diagnostics.raise_for_errors()`.

`UnknownOptionError` and `InvalidValueError` are raised by the table and the
value converters respectively, and are caught by the `Matcher`, which turns
them into `Diagnostic` records. Parsing itself never raises for bad input.

Exception Hierarchy:
- ArgDictError
    ├── TableConflictError
    ├── UnknownOptionError
    ├── InvalidValueError
    ├── ParseError
    └── ConfigError
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence

if TYPE_CHECKING:
    from argdict.parser.result import Diagnostics


class ArgDictError(Exception):
    """Base exception for argdict."""


class TableConflictError(ArgDictError):
    """Raised when a set of option descriptors cannot form a consistent table."""

    def __init__(self, message: str, *, option: str | None = None) -> None:
        super().__init__(message)
        self.option = option


class UnknownOptionError(ArgDictError):
    """Raised when an alias does not resolve to any descriptor in the table."""

    def __init__(self, alias: str, candidates: Sequence[str] = ()) -> None:
        self.alias = alias
        self.candidates = tuple(candidates)
        if self.candidates:
            message = (
                f"Unrecognized option '{alias}'. "
                f"Did you mean one of: {', '.join(self.candidates)}?"
            )
        else:
            message = f"Unrecognized option '{alias}'."
        super().__init__(message)


class InvalidValueError(ArgDictError):
    """Raised by a value converter when a raw string cannot be converted."""

    def __init__(
        self, kind: Any, raw: str, message: str = "", choices: Sequence[str] = ()
    ) -> None:
        self.kind = kind
        self.raw = raw
        self.choices = tuple(choices)
        self.message = message or f"'{raw}' is not a valid {kind} value"
        super().__init__(self.message)


class ParseError(ArgDictError):
    """Raised on request when a parse produced diagnostics."""

    def __init__(self, diagnostics: Diagnostics) -> None:
        self.diagnostics = diagnostics
        super().__init__(diagnostics.render())


class ConfigError(ArgDictError):
    """Raised when a table definition cannot be loaded or validated."""
