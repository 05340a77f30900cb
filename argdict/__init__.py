"""
argdict command-line parsing engine

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

from .exceptions import (
    ArgDictError,
    ConfigError,
    InvalidValueError,
    ParseError,
    TableConflictError,
    UnknownOptionError,
)
from .logger import logger
from .parser import (
    Arity,
    Diagnostic,
    DiagnosticKind,
    Diagnostics,
    ExclusiveGroup,
    Matcher,
    OptionDescriptor,
    OptionTable,
    ParseSettings,
    PositionalSlot,
    Result,
    UnknownOptionPolicy,
    ValueKind,
    option,
    parse,
    parse_or_raise,
    positional,
)

__all__ = [
    "ArgDictError",
    "Arity",
    "ConfigError",
    "Diagnostic",
    "DiagnosticKind",
    "Diagnostics",
    "ExclusiveGroup",
    "InvalidValueError",
    "Matcher",
    "OptionDescriptor",
    "OptionTable",
    "ParseError",
    "ParseSettings",
    "PositionalSlot",
    "Result",
    "TableConflictError",
    "UnknownOptionError",
    "UnknownOptionPolicy",
    "ValueKind",
    "logger",
    "option",
    "parse",
    "parse_or_raise",
    "positional",
]
