# argdict — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Value conversion for argdict option values.

Every value-bearing option declares a `ValueKind`. The set of kinds is closed:
each kind maps to exactly one conversion function, and the `OptionTable`
resolves a `Converter` for each descriptor once, at build time, so the
`Matcher` never looks up conversion logic while walking the token stream.

Kinds:
- STRING: returned unchanged, always succeeds.
- INTEGER: base-10 integer within the signed 64-bit range.
- FLOAT: any string `float()` accepts.
- BOOLEAN: true/false, 1/0, yes/no (case-insensitive).
- CHOICE: one of the descriptor's declared choices.
- PATH: a `pathlib.Path`, purely syntactic (no existence check).
- DATETIME: any date string `dateutil` understands.

All failures raise `InvalidValueError(kind, raw)`.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Callable

from dateutil import parser as date_parser

from argdict.exceptions import InvalidValueError

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

TRUE_STRINGS = frozenset({"true", "1", "yes"})
FALSE_STRINGS = frozenset({"false", "0", "no"})


class ValueKind(Enum):
    """Closed set of value kinds an option may declare."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    CHOICE = "choice"
    PATH = "path"
    DATETIME = "datetime"

    @classmethod
    def _missing_(cls, value: object) -> ValueKind:
        if not isinstance(value, str):
            raise ValueError(f"Invalid {cls.__name__}: {value!r}")
        aliases = {
            "str": "string",
            "int": "integer",
            "bool": "boolean",
            "enum": "choice",
            "date": "datetime",
        }
        normalized = value.strip().lower()
        normalized = aliases.get(normalized, normalized)
        for member in cls:
            if member.value == normalized:
                return member
        valid = ", ".join(member.value for member in cls)
        raise ValueError(f"Invalid {cls.__name__}: '{value}'. Must be one of: {valid}")

    def __str__(self) -> str:
        return self.value


def convert_string(raw: str) -> str:
    return raw


def convert_integer(raw: str) -> int:
    """
    Convert a string to a signed 64-bit integer.

    Raises:
        InvalidValueError: If the string is not a base-10 integer or overflows.
    """
    try:
        value = int(raw, 10)
    except ValueError:
        raise InvalidValueError(
            ValueKind.INTEGER, raw, f"'{raw}' is not a valid integer"
        ) from None
    if not INT64_MIN <= value <= INT64_MAX:
        raise InvalidValueError(
            ValueKind.INTEGER, raw, f"'{raw}' is out of range for an integer"
        )
    return value


def convert_float(raw: str) -> float:
    try:
        return float(raw)
    except ValueError:
        raise InvalidValueError(
            ValueKind.FLOAT, raw, f"'{raw}' is not a valid float"
        ) from None


def convert_boolean(raw: str) -> bool:
    """
    Convert a string to a boolean.

    Accepts 'true'/'false', '1'/'0' and 'yes'/'no' in any case.

    Args:
        raw (str): The input string.

    Returns:
        bool: Parsed boolean result.

    Raises:
        InvalidValueError: For any other spelling.
    """
    value = raw.strip().lower()
    if value in TRUE_STRINGS:
        return True
    elif value in FALSE_STRINGS:
        return False
    raise InvalidValueError(
        ValueKind.BOOLEAN,
        raw,
        f"'{raw}' is not a valid boolean (use true/false, yes/no or 1/0)",
    )


def convert_path(raw: str) -> Path:
    return Path(raw)


def convert_datetime(raw: str) -> datetime:
    try:
        return date_parser.parse(raw)
    except (ValueError, OverflowError) as error:
        raise InvalidValueError(
            ValueKind.DATETIME, raw, f"'{raw}' could not be parsed as a datetime"
        ) from error


def convert_choice(raw: str, choices: tuple[str, ...]) -> str:
    if raw in choices:
        return raw
    raise InvalidValueError(
        ValueKind.CHOICE,
        raw,
        f"'{raw}' should be one of {{{', '.join(choices)}}}",
        choices=choices,
    )


_CONVERTERS: dict[ValueKind, Callable[[str], Any]] = {
    ValueKind.STRING: convert_string,
    ValueKind.INTEGER: convert_integer,
    ValueKind.FLOAT: convert_float,
    ValueKind.BOOLEAN: convert_boolean,
    ValueKind.PATH: convert_path,
    ValueKind.DATETIME: convert_datetime,
}


@dataclass(frozen=True)
class Converter:
    """A conversion function bound to one descriptor's kind and choices."""

    kind: ValueKind
    choices: tuple[str, ...] = ()
    allow_empty: bool = True

    def __call__(self, raw: str) -> Any:
        if raw == "" and not self.allow_empty:
            raise InvalidValueError(self.kind, raw, "an empty value is not allowed")
        if self.kind is ValueKind.CHOICE:
            return convert_choice(raw, self.choices)
        return _CONVERTERS[self.kind](raw)


def convert(
    raw: str,
    kind: ValueKind | str,
    choices: tuple[str, ...] = (),
    allow_empty: bool = True,
) -> Any:
    """
    Convert a raw string to the given kind.

    Args:
        raw (str): The raw token text.
        kind (ValueKind | str): Target kind, or its name.
        choices (tuple[str, ...]): Allowed values for `ValueKind.CHOICE`.
        allow_empty (bool): Whether an empty string is acceptable.

    Returns:
        Any: The converted value.

    Raises:
        InvalidValueError: If the value cannot be converted.
    """
    return Converter(ValueKind(kind), tuple(choices), allow_empty)(raw)
