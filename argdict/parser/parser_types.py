# argdict — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Settings and per-call state models for the argdict `Matcher`.

Contents:
- `UnknownOptionPolicy`: what to do with an option-looking token that no
  alias matches.
- `ParseSettings`: validated, immutable knobs for one `Matcher`.
- `OptionState`: tracks whether an option has been consumed, how often, where
  it first appeared, and whether any of its values were stored.
- `ParseState`: everything a single parse call accumulates. A fresh state is
  created for every call and discarded once it is turned into a `Result` or
  `Diagnostics`.
"""
from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

from argdict.parser.result import Diagnostic, Result
from argdict.parser.table import OptionTable


class UnknownOptionPolicy(Enum):
    """
    Handling of option-looking tokens that match no alias.

    Members:
        ERROR: Always report `UNKNOWN_OPTION`.
        PASSTHROUGH: Report `UNKNOWN_OPTION` only when some alias textually
            resembles the token; otherwise keep it as a positional and
            record a warning.
    """

    ERROR = "error"
    PASSTHROUGH = "passthrough"

    def __str__(self) -> str:
        return self.value


class ParseSettings(BaseModel):
    """Options controlling how a `Matcher` walks the token stream."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    collect_all: bool = False
    unknown_options: UnknownOptionPolicy = UnknownOptionPolicy.ERROR
    allow_abbrev: bool = False


@dataclass
class OptionState:
    """Tracks one option across a parse call."""

    name: str
    consumed: bool = False
    consumed_position: int | None = None
    count: int = 0
    stored: bool = False

    def set_consumed(self, position: int | None = None) -> None:
        """Record an occurrence, remembering the position of the first one."""
        if not self.consumed:
            self.consumed_position = position
        self.consumed = True
        self.count += 1


@dataclass
class ParseState:
    """Mutable accumulator for a single parse call."""

    values: dict[str, Any]
    options: dict[str, OptionState]
    group_owner: dict[str, str] = field(default_factory=dict)
    positionals: list[str] = field(default_factory=list)
    slots: dict[str, str | None] = field(default_factory=dict)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    help_requested: bool = False

    @classmethod
    def start(cls, table: OptionTable) -> ParseState:
        return cls(
            values={desc.name: deepcopy(table.default_for(desc.name)) for desc in table},
            options={desc.name: OptionState(desc.name) for desc in table},
            slots={slot.name: None for slot in table.positionals},
        )

    def seen(self, name: str) -> bool:
        return self.options[name].consumed

    def to_result(self) -> Result:
        return Result(
            values=self.values,
            positionals=tuple(self.positionals),
            slots=self.slots,
            seen=frozenset(name for name, opt in self.options.items() if opt.consumed),
            counts={name: opt.count for name, opt in self.options.items() if opt.count},
            warnings=tuple(self.warnings),
            help_requested=self.help_requested,
        )
