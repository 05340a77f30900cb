# argdict — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `OptionTable`, the immutable, indexed collection of `OptionDescriptor`s
that the `Matcher` resolves option tokens against.

A table is built once with `OptionTable.build()`, which validates the whole
descriptor set and raises `TableConflictError` on the first inconsistency:

- duplicate aliases or canonical names, malformed aliases or names
- flags declaring a value kind, choices, or a non-boolean default
- `CHOICE` options without choices (or choices on any other kind)
- defaults the option's converter rejects, or typed defaults of the wrong type
- malformed or duplicate positional slot names
- exclusivity groups with fewer than two members, declared groups without
  members, groups declared twice, and required options inside a group

After construction every lookup structure is a read-only mapping, so a single
table may be shared by any number of concurrent parse calls.

Example:
    table = OptionTable.build(
        [
            option("-v", "--verbose"),
            option("-c", "--count", arity="one", kind="integer", default=1),
            option("--json", group="format"),
            option("--yaml", group="format"),
        ],
        add_help=True,
    )
    table.resolve("-c").name  # "count"
"""
from __future__ import annotations

import difflib
import re
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping

from argdict.exceptions import InvalidValueError, TableConflictError, UnknownOptionError
from argdict.logger import logger
from argdict.parser.arity import Arity
from argdict.parser.converters import INT64_MAX, INT64_MIN, Converter, ValueKind
from argdict.parser.descriptor import OptionDescriptor, PositionalSlot

HELP_NAME = "help"
HELP_ALIASES = ("-h", "--help")
HELP_DESCRIPTION = "Show this list of options, then quit."

_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# Python types accepted as already-typed defaults, per kind.
_DEFAULT_TYPES: dict[ValueKind, tuple[type, ...]] = {
    ValueKind.STRING: (str,),
    ValueKind.INTEGER: (int,),
    ValueKind.FLOAT: (int, float),
    ValueKind.BOOLEAN: (bool,),
    ValueKind.PATH: (Path,),
    ValueKind.DATETIME: (datetime,),
}


@dataclass(frozen=True)
class ExclusiveGroup:
    """A declared mutual-exclusion group. A required group needs exactly one member."""

    name: str
    required: bool = False
    help: str = ""


class OptionTable:
    """
    Read-only index of option descriptors.

    Use `OptionTable.build()` to construct one; the initializer expects data
    that has already been validated.
    """

    def __init__(
        self,
        descriptors: tuple[OptionDescriptor, ...],
        aliases: Mapping[str, OptionDescriptor],
        groups: Mapping[str, tuple[OptionDescriptor, ...]],
        group_specs: Mapping[str, ExclusiveGroup],
        converters: Mapping[str, Converter],
        defaults: Mapping[str, Any],
        help_option: OptionDescriptor | None = None,
        positionals: tuple[PositionalSlot, ...] = (),
    ) -> None:
        self._descriptors = descriptors
        self._by_name = MappingProxyType({desc.name: desc for desc in descriptors})
        self._aliases = MappingProxyType(dict(aliases))
        self._groups = MappingProxyType(dict(groups))
        self._group_specs = MappingProxyType(dict(group_specs))
        self._converters = MappingProxyType(dict(converters))
        self._defaults = MappingProxyType(dict(defaults))
        self.help_option = help_option
        self.positionals = positionals
        self.accepts_negative_numbers = not any(
            alias[1:].isdigit() for alias in aliases if not alias.startswith("--")
        )

    @classmethod
    def build(
        cls,
        descriptors: Iterable[OptionDescriptor],
        groups: Iterable[ExclusiveGroup] = (),
        add_help: bool = False,
        positionals: Iterable[PositionalSlot] = (),
    ) -> OptionTable:
        """
        Validate a descriptor set and build a table from it.

        Args:
            descriptors (Iterable[OptionDescriptor]): The accepted options.
            groups (Iterable[ExclusiveGroup]): Optional group declarations,
                used to mark a group as required.
            add_help (bool): Reserve `-h`/`--help` as a help flag.
            positionals (Iterable[PositionalSlot]): Named positional slots, in
                the order positionals fill them.

        Returns:
            OptionTable: The validated table.

        Raises:
            TableConflictError: If the descriptors are inconsistent.
        """
        descriptors = list(descriptors)
        help_option = None
        if add_help:
            help_option = OptionDescriptor(
                HELP_NAME, HELP_ALIASES, arity=Arity.ZERO, help=HELP_DESCRIPTION
            )
            descriptors.insert(0, help_option)

        names: set[str] = set()
        aliases: dict[str, OptionDescriptor] = {}
        converters: dict[str, Converter] = {}
        defaults: dict[str, Any] = {}
        members: dict[str, list[OptionDescriptor]] = defaultdict(list)

        for desc in descriptors:
            if not isinstance(desc, OptionDescriptor):
                raise TableConflictError(
                    f"Expected an OptionDescriptor, got {type(desc).__name__}"
                )
            cls._validate_name(desc)
            if desc.name in names:
                raise TableConflictError(
                    f"Option name '{desc.name}' is defined more than once",
                    option=desc.name,
                )
            names.add(desc.name)
            cls._validate_aliases(desc)
            for alias in desc.aliases:
                if alias in aliases:
                    existing = aliases[alias]
                    raise TableConflictError(
                        f"Alias '{alias}' is already used by option '{existing.name}'",
                        option=desc.name,
                    )
                aliases[alias] = desc
            converter = cls._resolve_converter(desc)
            if converter is not None:
                converters[desc.name] = converter
            defaults[desc.name] = cls._resolve_default(desc, converter)
            if desc.group is not None:
                members[desc.group].append(desc)

        group_specs = cls._validate_groups(members, groups)
        slots = cls._validate_positionals(positionals)
        table = cls(
            descriptors=tuple(descriptors),
            aliases=aliases,
            groups={name: tuple(group) for name, group in members.items()},
            group_specs=group_specs,
            converters=converters,
            defaults=defaults,
            help_option=help_option,
            positionals=slots,
        )
        logger.debug(
            "Built option table with %d options, %d aliases, %d groups, %d positionals.",
            len(descriptors),
            len(aliases),
            len(members),
            len(slots),
        )
        return table

    @staticmethod
    def _validate_name(desc: OptionDescriptor) -> None:
        if not isinstance(desc.name, str) or not _NAME_PATTERN.match(desc.name):
            raise TableConflictError(
                f"Option name {desc.name!r} must be a valid identifier "
                "(letters, digits, and underscores only, not starting with a digit)",
                option=str(desc.name),
            )

    @staticmethod
    def _validate_aliases(desc: OptionDescriptor) -> None:
        if not desc.aliases:
            raise TableConflictError(
                f"Option '{desc.name}' has no aliases", option=desc.name
            )
        for alias in desc.aliases:
            if not isinstance(alias, str):
                raise TableConflictError(
                    f"Alias {alias!r} of '{desc.name}' must be a string",
                    option=desc.name,
                )
            if "=" in alias or any(char.isspace() for char in alias):
                raise TableConflictError(
                    f"Alias '{alias}' must not contain '=' or whitespace",
                    option=desc.name,
                )
            if alias.startswith("--"):
                if len(alias) < 3 or alias[2] == "-":
                    raise TableConflictError(
                        f"Alias '{alias}' must have a name after '--'",
                        option=desc.name,
                    )
            elif alias.startswith("-"):
                if len(alias) != 2:
                    raise TableConflictError(
                        f"Alias '{alias}' must be a single character or start with '--'",
                        option=desc.name,
                    )
            else:
                raise TableConflictError(
                    f"Alias '{alias}' must start with '-' or '--'", option=desc.name
                )

    @staticmethod
    def _resolve_converter(desc: OptionDescriptor) -> Converter | None:
        if desc.is_flag:
            if desc.kind is not None:
                raise TableConflictError(
                    f"Flag '{desc.name}' cannot declare a value kind", option=desc.name
                )
            if desc.choices:
                raise TableConflictError(
                    f"Flag '{desc.name}' cannot declare choices", option=desc.name
                )
            return None
        assert desc.kind is not None, "value-bearing options always have a kind"
        if desc.kind is ValueKind.CHOICE:
            if not desc.choices:
                raise TableConflictError(
                    f"Option '{desc.name}' is a choice but declares no choices",
                    option=desc.name,
                )
            if len(set(desc.choices)) != len(desc.choices):
                raise TableConflictError(
                    f"Option '{desc.name}' declares duplicate choices",
                    option=desc.name,
                )
            if not all(isinstance(choice, str) for choice in desc.choices):
                raise TableConflictError(
                    f"Choices of '{desc.name}' must be strings", option=desc.name
                )
        elif desc.choices:
            raise TableConflictError(
                f"Option '{desc.name}' declares choices but is of kind {desc.kind}",
                option=desc.name,
            )
        return Converter(desc.kind, desc.choices, desc.allow_empty)

    @staticmethod
    def _resolve_default(desc: OptionDescriptor, converter: Converter | None) -> Any:
        """Get the typed value reported for an option that is absent."""
        default = desc.default
        if desc.is_flag:
            if desc.repeatable:
                if default is not None:
                    raise TableConflictError(
                        f"Repeatable flag '{desc.name}' counts occurrences "
                        "and cannot have a default",
                        option=desc.name,
                    )
                return 0
            if default is None:
                return False
            if not isinstance(default, bool):
                raise TableConflictError(
                    f"Default value {default!r} for flag '{desc.name}' must be a bool",
                    option=desc.name,
                )
            return default

        assert converter is not None, "value-bearing options always have a converter"
        if default is None:
            return [] if desc.collects_list else None
        if desc.collects_list:
            if not isinstance(default, (list, tuple)):
                raise TableConflictError(
                    f"Default value {default!r} for '{desc.name}' must be a list",
                    option=desc.name,
                )
            return [_convert_default(desc, converter, item) for item in default]
        return _convert_default(desc, converter, default)

    @staticmethod
    def _validate_groups(
        members: Mapping[str, list[OptionDescriptor]],
        declared: Iterable[ExclusiveGroup],
    ) -> dict[str, ExclusiveGroup]:
        specs: dict[str, ExclusiveGroup] = {}
        for group in declared:
            if group.name in specs:
                raise TableConflictError(f"Group '{group.name}' is declared twice")
            if group.name not in members:
                raise TableConflictError(f"Group '{group.name}' has no members")
            specs[group.name] = group
        for name, group_members in members.items():
            if len(group_members) < 2:
                raise TableConflictError(
                    f"Group '{name}' needs at least two members, "
                    f"only '{group_members[0].name}' references it",
                    option=group_members[0].name,
                )
            for desc in group_members:
                if desc.required:
                    raise TableConflictError(
                        f"Option '{desc.name}' cannot be required and belong to "
                        f"exclusive group '{name}'; declare the group as required instead",
                        option=desc.name,
                    )
            specs.setdefault(name, ExclusiveGroup(name))
        return specs

    @staticmethod
    def _validate_positionals(
        positionals: Iterable[PositionalSlot],
    ) -> tuple[PositionalSlot, ...]:
        slots: list[PositionalSlot] = []
        for slot in positionals:
            if not isinstance(slot, PositionalSlot):
                raise TableConflictError(
                    f"Expected a PositionalSlot, got {type(slot).__name__}"
                )
            if not isinstance(slot.name, str) or not _NAME_PATTERN.match(slot.name):
                raise TableConflictError(
                    f"Positional name {slot.name!r} must be a valid identifier"
                )
            if any(existing.name == slot.name for existing in slots):
                raise TableConflictError(
                    f"Positional '{slot.name}' is declared more than once"
                )
            slots.append(slot)
        return tuple(slots)

    def resolve(self, alias: str, allow_abbrev: bool = False) -> OptionDescriptor:
        """
        Return the descriptor an alias refers to.

        Args:
            alias (str): The alias, including its leading dash(es).
            allow_abbrev (bool): Accept a unique prefix of a long alias.

        Raises:
            UnknownOptionError: If no descriptor (or more than one, for an
                abbreviation) matches.
        """
        desc = self._aliases.get(alias)
        if desc is not None:
            return desc
        if allow_abbrev and alias.startswith("--") and len(alias) > 2:
            matches = sorted(
                candidate for candidate in self._aliases if candidate.startswith(alias)
            )
            owners = {self._aliases[match].name for match in matches}
            if len(owners) == 1:
                return self._aliases[matches[0]]
            if matches:
                raise UnknownOptionError(alias, matches)
        raise UnknownOptionError(alias, self.suggest(alias))

    def suggest(self, alias: str) -> list[str]:
        """Return aliases that start with, or closely resemble, `alias`."""
        if not alias.strip("-"):
            return []
        prefixed = sorted(
            candidate for candidate in self._aliases if candidate.startswith(alias)
        )
        close = difflib.get_close_matches(alias, list(self._aliases), n=3, cutoff=0.6)
        suggestions = prefixed + [match for match in close if match not in prefixed]
        return suggestions

    def members_of(self, group: str) -> tuple[OptionDescriptor, ...]:
        """Return the descriptors sharing an exclusivity group."""
        return self._groups.get(group, ())

    def converter(self, desc: OptionDescriptor) -> Converter:
        return self._converters[desc.name]

    def default_for(self, name: str) -> Any:
        """Return the typed default of an option by canonical name."""
        return self._defaults[name]

    def get(self, name: str) -> OptionDescriptor | None:
        return self._by_name.get(name)

    def __getitem__(self, name: str) -> OptionDescriptor:
        return self._by_name[name]

    @property
    def descriptors(self) -> tuple[OptionDescriptor, ...]:
        return self._descriptors

    @property
    def aliases(self) -> Mapping[str, OptionDescriptor]:
        return self._aliases

    @property
    def groups(self) -> Mapping[str, tuple[OptionDescriptor, ...]]:
        return self._groups

    @property
    def required(self) -> tuple[OptionDescriptor, ...]:
        return tuple(desc for desc in self._descriptors if desc.required)

    @property
    def required_groups(self) -> tuple[ExclusiveGroup, ...]:
        return tuple(spec for spec in self._group_specs.values() if spec.required)

    def __contains__(self, alias: object) -> bool:
        return alias in self._aliases

    def __iter__(self) -> Iterator[OptionDescriptor]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    def __str__(self) -> str:
        required = sum(desc.required for desc in self._descriptors)
        return (
            f"OptionTable(options={len(self._descriptors)}, "
            f"aliases={len(self._aliases)}, groups={len(self._groups)}, "
            f"required={required})"
        )

    def __repr__(self) -> str:
        return str(self)


def _convert_default(desc: OptionDescriptor, converter: Converter, value: Any) -> Any:
    if not isinstance(value, str):
        if desc.kind is ValueKind.CHOICE:
            raise TableConflictError(
                f"Default value {value!r} for '{desc.name}' not in allowed choices: "
                f"{list(desc.choices)}",
                option=desc.name,
            )
        expected = _DEFAULT_TYPES[desc.kind]
        if not isinstance(value, expected) or (
            isinstance(value, bool) and desc.kind is not ValueKind.BOOLEAN
        ):
            names = " or ".join(expected_type.__name__ for expected_type in expected)
            raise TableConflictError(
                f"Default value {value!r} for '{desc.name}' must be a string or "
                f"{names} for kind {desc.kind}",
                option=desc.name,
            )
        if desc.kind is ValueKind.INTEGER and not INT64_MIN <= value <= INT64_MAX:
            raise TableConflictError(
                f"Default value {value!r} for '{desc.name}' is out of range",
                option=desc.name,
            )
        if desc.kind is ValueKind.FLOAT:
            return float(value)
        return value
    try:
        return converter(value)
    except InvalidValueError as error:
        raise TableConflictError(
            f"Default value {value!r} for '{desc.name}' cannot be converted to "
            f"{desc.kind}: {error}",
            option=desc.name,
        ) from error
