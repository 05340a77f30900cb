# argdict — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Parse outcomes: the typed `Result` of a successful parse, and the
`Diagnostics` describing why a parse failed.

`Result` maps every option's canonical name to its resolved value (or its
default when absent) and keeps the positional arguments in order.

`Diagnostics` carries one `Diagnostic` (fail-fast) or every `Diagnostic`
found (collect-all), each with its kind, the 0-based token index, and the
offending raw text, plus the partial `Result` built from the valid portions
of the input.

Both outcomes expose `ok`, so callers can branch without `isinstance`:

    outcome = parse(table, ["-c", "abc"])
    if not outcome.ok:
        outcome.print()
"""
from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterator, Mapping

from rich.console import Console
from rich.markup import escape

from argdict.console import ERROR_STYLE, OPTION_STYLE, WARNING_STYLE
from argdict.console import console as error_console
from argdict.console import stdout_console
from argdict.exceptions import ParseError

_MISSING = object()


class DiagnosticKind(Enum):
    """Kinds of failure the table builder and the matcher report."""

    TABLE_CONFLICT = "table_conflict"
    UNKNOWN_OPTION = "unknown_option"
    UNEXPECTED_VALUE = "unexpected_value"
    MISSING_VALUE = "missing_value"
    INVALID_VALUE = "invalid_value"
    DUPLICATE_OPTION = "duplicate_option"
    MUTUALLY_EXCLUSIVE = "mutually_exclusive"
    MISSING_REQUIRED_OPTION = "missing_required_option"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Diagnostic:
    """
    One parse failure.

    Attributes:
        kind (DiagnosticKind): What went wrong.
        index (int): 0-based index of the offending token. End-of-stream
            checks (missing required options) use the number of tokens.
        raw (str): The offending raw text (the option's primary alias for
            end-of-stream checks).
        option (str | None): Canonical name of the option involved.
        message (str): Human-readable detail.
        value_kind (str | None): Value kind, for `INVALID_VALUE`.
        choices (tuple[str, ...]): Valid choices, for choice `INVALID_VALUE`.
        candidates (tuple[str, ...]): Suggested aliases, for `UNKNOWN_OPTION`.
        conflicts_with (str | None): The option already seen, for
            `MUTUALLY_EXCLUSIVE`.
        group (str | None): The exclusivity group involved, if any.
    """

    kind: DiagnosticKind
    index: int
    raw: str
    option: str | None = None
    message: str = ""
    value_kind: str | None = None
    choices: tuple[str, ...] = ()
    candidates: tuple[str, ...] = ()
    conflicts_with: str | None = None
    group: str | None = None

    def render(self) -> str:
        """Render the diagnostic as a stable single line."""
        text = f"{self.kind} at token {self.index}: '{self.raw}'"
        if self.message:
            text = f"{text} {self.message}"
        return text

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "kind": self.kind.value,
            "index": self.index,
            "raw": self.raw,
        }
        if self.option is not None:
            data["option"] = self.option
        if self.message:
            data["message"] = self.message
        if self.value_kind is not None:
            data["value_kind"] = self.value_kind
        if self.choices:
            data["choices"] = list(self.choices)
        if self.candidates:
            data["candidates"] = list(self.candidates)
        if self.conflicts_with is not None:
            data["conflicts_with"] = self.conflicts_with
        if self.group is not None:
            data["group"] = self.group
        return data

    def __str__(self) -> str:
        return self.render()


@dataclass(frozen=True)
class Result:
    """
    The resolved values of a successful parse.

    Attributes:
        values (Mapping[str, Any]): Canonical name → resolved value, with
            defaults filled in for absent options. Multi-value options hold
            tuples, so a `Result` cannot be changed after the parse.
        positionals (tuple[str, ...]): Unbound arguments in input order.
        slots (Mapping[str, str | None]): Declared positional name → the
            positional that filled it, or None.
        seen (frozenset[str]): Names of options that actually appeared.
        counts (Mapping[str, int]): Occurrences per option that appeared.
        warnings (tuple[str, ...]): Non-fatal notes (e.g. passthrough tokens).
        help_requested (bool): True if the reserved help flag was given.
    """

    values: Mapping[str, Any]
    positionals: tuple[str, ...] = ()
    slots: Mapping[str, str | None] = field(default_factory=dict)
    seen: frozenset[str] = frozenset()
    counts: Mapping[str, int] = field(default_factory=dict)
    warnings: tuple[str, ...] = ()
    help_requested: bool = False

    def __post_init__(self) -> None:
        values = {
            name: tuple(value) if isinstance(value, list) else value
            for name, value in self.values.items()
        }
        object.__setattr__(self, "values", MappingProxyType(values))
        object.__setattr__(self, "slots", MappingProxyType(dict(self.slots)))
        object.__setattr__(self, "counts", MappingProxyType(dict(self.counts)))

    @property
    def ok(self) -> bool:
        return True

    def __getitem__(self, name: str) -> Any:
        return self.values[name]

    def get(self, name: str, default: Any = _MISSING) -> Any:
        """
        Return the resolved value of an option.

        Absent options report the default declared on their descriptor. For a
        name the table does not define, `default` is returned if given,
        otherwise `KeyError` is raised.
        """
        if name in self.values:
            return self.values[name]
        if default is _MISSING:
            raise KeyError(name)
        return default

    def is_present(self, name: str) -> bool:
        return name in self.seen

    def occurrences(self, name: str) -> int:
        return self.counts.get(name, 0)

    def has_pos(self, name: str) -> bool:
        """True if the named positional slot was filled."""
        return self.slots.get(name) is not None

    def get_pos(self, name: str, default: Any = None) -> Any:
        """
        Return the positional bound to a declared slot.

        Raises:
            KeyError: If no slot of that name was declared.
        """
        value = self.slots[name]
        return default if value is None else value

    def as_dict(self) -> dict[str, Any]:
        """Return a mutable copy of the values, with multi-value options as lists."""
        return {
            name: list(value) if isinstance(value, tuple) else deepcopy(value)
            for name, value in self.values.items()
        }

    def __contains__(self, name: object) -> bool:
        return name in self.values

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def print(self, console: Console | None = None) -> None:
        """Print the resolved values and positionals."""
        target = console or stdout_console
        for name, value in self.values.items():
            marker = "" if name in self.seen else " [dim](default)[/dim]"
            target.print(
                f"[{OPTION_STYLE}]{escape(name)}[/{OPTION_STYLE}] = "
                f"{escape(repr(value))}{marker}"
            )
        for name, value in self.slots.items():
            target.print(f"<{escape(name)}> = {escape(repr(value))}")
        if self.positionals:
            target.print(f"positionals = {escape(repr(list(self.positionals)))}")
        for warning in self.warnings:
            target.print(f"[{WARNING_STYLE}]warning:[/] {escape(warning)}")


@dataclass(frozen=True)
class Diagnostics:
    """
    The failure outcome of a parse.

    Attributes:
        errors (tuple[Diagnostic, ...]): The diagnostics, in stream order.
        partial (Result | None): Values and positionals from the valid
            portions of the input.
    """

    errors: tuple[Diagnostic, ...]
    partial: Result | None = None

    def __post_init__(self) -> None:
        if not self.errors:
            raise ValueError("Diagnostics requires at least one diagnostic")
        object.__setattr__(self, "errors", tuple(self.errors))

    @property
    def ok(self) -> bool:
        return False

    @property
    def first(self) -> Diagnostic:
        return self.errors[0]

    @property
    def kinds(self) -> tuple[DiagnosticKind, ...]:
        return tuple(error.kind for error in self.errors)

    def render(self) -> str:
        return "\n".join(error.render() for error in self.errors)

    def to_list(self) -> list[dict[str, Any]]:
        return [error.to_dict() for error in self.errors]

    def raise_for_errors(self) -> None:
        raise ParseError(self)

    def print(self, console: Console | None = None) -> None:
        """Print every diagnostic to the error console."""
        target = console or error_console
        for error in self.errors:
            target.print(
                f"[{ERROR_STYLE}]error:[/{ERROR_STYLE}] {escape(error.render())}"
            )
            if error.candidates:
                target.print(f"  did you mean: {escape(', '.join(error.candidates))}")
        if self.partial is not None:
            for warning in self.partial.warnings:
                target.print(f"[{WARNING_STYLE}]warning:[/] {escape(warning)}")

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.errors)

    def __len__(self) -> int:
        return len(self.errors)

    def __str__(self) -> str:
        return self.render()
