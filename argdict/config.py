# argdict — (c) 2025 rtj.dev LLC — MIT Licensed
"""config.py
Declarative option tables for argdict, loaded from mappings or YAML/TOML files.

A table file describes the options a program accepts, not the values a user
supplies; values always come from the argument list handed to `parse()`.

Example (YAML):
    add_help: true
    settings:
      collect_all: false
      unknown_options: passthrough
    groups:
      - name: format
        required: true
    positionals:
      - source
      - name: dest
        help: Where to write.
    options:
      - aliases: ["-v", "--verbose"]
        repeatable: true
      - aliases: ["-c", "--count"]
        arity: one
        valueKind: integer
        default: 1
      - aliases: ["--mode"]
        arity: one
        valueKind: {choice: [fast, slow]}
        required: true
      - aliases: ["--json"]
        group: format
      - aliases: ["--yaml"]
        group: format
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import toml
import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from argdict.exceptions import ConfigError
from argdict.logger import logger
from argdict.parser.arity import Arity
from argdict.parser.converters import ValueKind
from argdict.parser.descriptor import (
    OptionDescriptor,
    PositionalSlot,
    name_from_aliases,
)
from argdict.parser.parser_types import ParseSettings
from argdict.parser.table import ExclusiveGroup, OptionTable


class RawOption(BaseModel):
    """Raw option model for argdict table definitions."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    name: str | None = None
    aliases: list[str]
    arity: Arity = Arity.ZERO
    kind: ValueKind | None = Field(default=None, alias="valueKind")
    choices: list[str] = Field(default_factory=list)
    default: Any = None
    required: bool = False
    group: str | None = None
    repeatable: bool = False
    allow_empty: bool = Field(default=True, alias="allowEmpty")
    help: str = ""

    @model_validator(mode="before")
    @classmethod
    def expand_choice_kind(cls, data: Any) -> Any:
        """Accept `valueKind: {choice: [...]}` as kind CHOICE with choices."""
        if not isinstance(data, dict):
            return data
        key = "valueKind" if "valueKind" in data else "kind"
        kind = data.get(key)
        if isinstance(kind, dict):
            if set(kind) != {"choice"}:
                raise ValueError(f"Unsupported value kind mapping: {kind!r}")
            data = dict(data)
            data[key] = ValueKind.CHOICE
            data["choices"] = list(kind["choice"])
        return data

    @field_validator("aliases", mode="before")
    @classmethod
    def validate_aliases(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("arity", mode="before")
    @classmethod
    def validate_arity(cls, value: Any) -> Arity:
        return Arity(value)

    @field_validator("kind", mode="before")
    @classmethod
    def validate_kind(cls, value: Any) -> ValueKind | None:
        if value is None:
            return None
        return ValueKind(value)

    def to_descriptor(self) -> OptionDescriptor:
        aliases = tuple(self.aliases)
        return OptionDescriptor(
            name=self.name or name_from_aliases(aliases),
            aliases=aliases,
            arity=self.arity,
            kind=self.kind,
            choices=tuple(self.choices),
            default=self.default,
            required=self.required,
            group=self.group,
            repeatable=self.repeatable,
            allow_empty=self.allow_empty,
            help=self.help,
        )


class RawGroup(BaseModel):
    """Raw exclusivity group declaration."""

    model_config = ConfigDict(extra="forbid")

    name: str
    required: bool = False
    help: str = ""

    def to_group(self) -> ExclusiveGroup:
        return ExclusiveGroup(name=self.name, required=self.required, help=self.help)


class RawPositional(BaseModel):
    """Raw named positional slot. A bare string is taken as the name."""

    model_config = ConfigDict(extra="forbid")

    name: str
    help: str = ""

    @model_validator(mode="before")
    @classmethod
    def expand_name(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"name": data}
        return data

    def to_slot(self) -> PositionalSlot:
        return PositionalSlot(name=self.name, help=self.help)


class TableConfig(BaseModel):
    """argdict table definition model."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    options: list[RawOption] = Field(default_factory=list)
    groups: list[RawGroup] = Field(default_factory=list)
    positionals: list[RawPositional] = Field(default_factory=list)
    add_help: bool = Field(default=False, alias="addHelp")
    settings: ParseSettings = Field(default_factory=ParseSettings)

    def to_table(self) -> OptionTable:
        return OptionTable.build(
            convert_options(self.options),
            groups=[group.to_group() for group in self.groups],
            add_help=self.add_help,
            positionals=[slot.to_slot() for slot in self.positionals],
        )


def convert_options(
    raw_options: list[RawOption] | list[dict[str, Any]],
) -> list[OptionDescriptor]:
    """Convert raw option definitions into descriptors."""
    descriptors = []
    for entry in raw_options:
        raw_option = entry if isinstance(entry, RawOption) else RawOption(**entry)
        descriptors.append(raw_option.to_descriptor())
    return descriptors


def config_from_mapping(data: Mapping[str, Any]) -> TableConfig:
    """
    Validate a table definition mapping.

    Raises:
        ConfigError: If the mapping does not describe a valid definition.
    """
    if not isinstance(data, Mapping):
        raise ConfigError(
            "Table definition must be a mapping with a list of options.\n"
            "Example:\n"
            "options:\n"
            "  - aliases: ['-v', '--verbose']\n"
            "  - aliases: ['-c', '--count']\n"
            "    arity: one\n"
            "    valueKind: integer"
        )
    try:
        return TableConfig.model_validate(dict(data))
    except ValidationError as error:
        raise ConfigError(f"Invalid table definition:\n{error}") from error


def table_from_mapping(data: Mapping[str, Any]) -> OptionTable:
    """
    Build an `OptionTable` from a definition mapping.

    Raises:
        ConfigError: If the mapping is malformed.
        TableConflictError: If the options are inconsistent.
    """
    return config_from_mapping(data).to_table()


def load_config(file_path: Path | str) -> TableConfig:
    """
    Load a table definition from a YAML or TOML file.

    Args:
        file_path (Path | str): Path to the definition file.

    Returns:
        TableConfig: The validated definition.

    Raises:
        ConfigError: If the file is missing, has an unsupported format, or
            cannot be parsed.
    """
    if not isinstance(file_path, (str, Path)):
        raise TypeError("file_path must be a string or Path object.")
    path = Path(file_path)
    if not path.is_file():
        raise ConfigError(f"No such table file: {file_path}")

    suffix = path.suffix
    try:
        with path.open("r", encoding="UTF-8") as table_file:
            if suffix in (".yaml", ".yml"):
                raw_config = yaml.safe_load(table_file)
            elif suffix == ".toml":
                raw_config = toml.load(table_file)
            else:
                raise ConfigError(f"Unsupported table format: {suffix}")
    except (yaml.YAMLError, toml.TomlDecodeError) as error:
        raise ConfigError(f"Could not parse {path}: {error}") from error

    logger.debug("Loaded table definition from '%s'.", path)
    return config_from_mapping(raw_config)


def load_table(file_path: Path | str) -> OptionTable:
    """Load a table definition file and build its `OptionTable`."""
    return load_config(file_path).to_table()
