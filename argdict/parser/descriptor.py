# argdict — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines the `OptionDescriptor` dataclass, the static definition of one option
accepted by an `OptionTable`.

A descriptor is plain, frozen data: it names the option, lists every alias it
can be invoked by, and declares how many values it consumes (`Arity`), how
those values are converted (`ValueKind`), and which cross-option rules apply
(required, repeatable, mutual-exclusion group).

Descriptors are normalized on construction (string arities and kinds are
coerced to their enums, sequences to tuples) but are only checked for
consistency as a whole by `OptionTable.build()`.

Key Attributes:
- `name`: Canonical name, used as the key in the parse `Result`
- `aliases`: Short (`-v`) and long (`--verbose`) forms
- `arity`: `Arity.ZERO`, `Arity.ONE` or `Arity.MANY`
- `kind`: `ValueKind` for value-bearing options, `None` for flags
- `choices`: Allowed raw values for `ValueKind.CHOICE`
- `default`: Value reported when the option is absent
- `required`: Whether the option must appear
- `group`: Mutual-exclusion group identifier
- `repeatable`: Whether the option may appear more than once
- `allow_empty`: Whether an empty string is an acceptable value
- `help`: Free-form description for callers building help output

`PositionalSlot` names one positional argument by its place in the input.

Example:
    OptionDescriptor("count", ("-c", "--count"), arity=Arity.ONE, kind="integer")
    option("-v", "--verbose")  # name derived as "verbose"
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from argdict.exceptions import TableConflictError
from argdict.parser.arity import Arity
from argdict.parser.converters import ValueKind


@dataclass(frozen=True)
class OptionDescriptor:
    """
    Represents one accepted command-line option.

    Attributes:
        name (str): Canonical name of the option.
        aliases (tuple[str, ...]): Every `-x` / `--long` form of the option.
        arity (Arity): How many values one occurrence consumes.
        kind (ValueKind | None): Value kind; `None` for flags.
        choices (tuple[str, ...]): Allowed values when `kind` is `CHOICE`.
        default (Any): Value reported when the option is absent.
        required (bool): True if the option must be given.
        group (str | None): Mutual-exclusion group identifier.
        repeatable (bool): True if the option may occur more than once.
        allow_empty (bool): False to reject empty string values.
        help (str): Help text for the option.
    """

    name: str
    aliases: tuple[str, ...]
    arity: Arity = Arity.ZERO
    kind: ValueKind | None = None
    choices: tuple[str, ...] = ()
    default: Any = None
    required: bool = False
    group: str | None = None
    repeatable: bool = False
    allow_empty: bool = True
    help: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        try:
            arity = Arity(self.arity)
            kind = ValueKind(self.kind) if self.kind is not None else None
        except ValueError as error:
            raise TableConflictError(
                f"Option '{self.name}': {error}", option=self.name
            ) from error
        if kind is None and arity.takes_value:
            kind = ValueKind.STRING
        if isinstance(self.aliases, str):
            aliases: tuple[str, ...] = (self.aliases,)
        else:
            aliases = tuple(self.aliases)
        object.__setattr__(self, "arity", arity)
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "aliases", aliases)
        object.__setattr__(self, "choices", tuple(self.choices or ()))

    @property
    def is_flag(self) -> bool:
        return self.arity is Arity.ZERO

    @property
    def takes_value(self) -> bool:
        return self.arity.takes_value

    @property
    def short_aliases(self) -> tuple[str, ...]:
        return tuple(alias for alias in self.aliases if not alias.startswith("--"))

    @property
    def long_aliases(self) -> tuple[str, ...]:
        return tuple(alias for alias in self.aliases if alias.startswith("--"))

    @property
    def primary_alias(self) -> str:
        """The alias used when reporting on this option (first long form if any)."""
        longs = self.long_aliases
        if longs:
            return longs[0]
        return self.aliases[0] if self.aliases else self.name

    @property
    def collects_list(self) -> bool:
        """True if the resolved value is a list."""
        return self.arity is Arity.MANY or (self.arity is Arity.ONE and self.repeatable)

    def get_choice_text(self) -> str:
        """Get a short placeholder for the option's value (e.g. `{fast,slow}`)."""
        if self.is_flag:
            return ""
        if self.choices:
            text = f"{{{','.join(self.choices)}}}"
        else:
            text = self.name.upper()
        if self.arity is Arity.MANY:
            text = f"{text} [{text} ...]"
        return text

    def __hash__(self) -> int:
        return hash(
            (
                self.name,
                self.aliases,
                self.arity,
                self.kind,
                self.choices,
                self.required,
                self.group,
                self.repeatable,
                self.allow_empty,
            )
        )


def name_from_aliases(aliases: tuple[str, ...]) -> str:
    """Derive a canonical name from aliases, preferring the first long form."""
    name = None
    for alias in aliases:
        if alias.startswith("--"):
            name = alias.lstrip("-").replace("-", "_").lower()
            break
        elif name is None:
            name = alias.lstrip("-").replace("-", "_").lower()
    if not name:
        raise TableConflictError(f"Cannot derive an option name from {aliases!r}")
    return name


def option(*aliases: str, name: str | None = None, **kwargs: Any) -> OptionDescriptor:
    """
    Create an `OptionDescriptor`, deriving its name from the aliases.

    Args:
        *aliases (str): The option's aliases (e.g. "-v", "--verbose").
        name (str | None): Explicit canonical name.
        **kwargs: Remaining `OptionDescriptor` fields.

    Returns:
        OptionDescriptor: The new descriptor.
    """
    return OptionDescriptor(
        name=name or name_from_aliases(aliases), aliases=aliases, **kwargs
    )


@dataclass(frozen=True)
class PositionalSlot:
    """
    A named positional argument.

    Positionals fill the declared slots in order and are never converted.
    Positionals beyond the last slot are still collected, with a warning.

    Attributes:
        name (str): Key used with `Result.get_pos()`.
        help (str): Help text for the positional.
    """

    name: str
    help: str = field(default="", compare=False)


def positional(name: str, help: str = "") -> PositionalSlot:
    """Create a `PositionalSlot`."""
    return PositionalSlot(name=name, help=help)
