# argdict — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `Arity`, the enum describing how many values an option consumes.

Arity is declared once per `OptionDescriptor` and drives how the `Matcher`
pulls values out of the token stream:

- `ZERO`: a flag. No value may follow or be attached (`--verbose`).
- `ONE`: exactly one value, attached (`--count=3`) or following (`--count 3`).
- `MANY`: one or more values, consumed until the next option-looking token.

Supports alias coercion for shorthand or config-friendly values.

Example:
    Arity("one")  → Arity.ONE
    Arity("flag") → Arity.ZERO (via alias)
    Arity("+")    → Arity.MANY (via alias)
"""
from __future__ import annotations

from enum import Enum


class Arity(Enum):
    """
    Number of values an option consumes per occurrence.

    Members:
        ZERO: Presence-only flag.
        ONE: A single value.
        MANY: A list of one or more values.

    Aliases:
        - "flag", "0" → "zero"
        - "1", "single" → "one"
        - "+", "list", "multiple" → "many"
    """

    ZERO = "zero"
    ONE = "one"
    MANY = "many"

    @classmethod
    def choices(cls) -> list[Arity]:
        """Return a list of all arities."""
        return list(cls)

    @classmethod
    def _get_alias(cls, value: str) -> str:
        aliases = {
            "flag": "zero",
            "0": "zero",
            "1": "one",
            "single": "one",
            "+": "many",
            "list": "many",
            "multiple": "many",
        }
        return aliases.get(value, value)

    @classmethod
    def _missing_(cls, value: object) -> Arity:
        if isinstance(value, int) and not isinstance(value, bool):
            value = str(value)
        if not isinstance(value, str):
            raise ValueError(f"Invalid {cls.__name__}: {value!r}")
        normalized = value.strip().lower()
        alias = cls._get_alias(normalized)
        for member in cls:
            if member.value == alias:
                return member
        valid = ", ".join(member.value for member in cls)
        raise ValueError(f"Invalid {cls.__name__}: '{value}'. Must be one of: {valid}")

    @property
    def takes_value(self) -> bool:
        return self is not Arity.ZERO

    def __str__(self) -> str:
        """Return the string representation of the arity."""
        return self.value
