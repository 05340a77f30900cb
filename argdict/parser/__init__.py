"""
argdict command-line parsing engine

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

from .arity import Arity
from .converters import Converter, ValueKind, convert
from .descriptor import OptionDescriptor, PositionalSlot, option, positional
from .engine import Matcher, parse, parse_or_raise
from .parser_types import ParseSettings, UnknownOptionPolicy
from .result import Diagnostic, DiagnosticKind, Diagnostics, Result
from .table import ExclusiveGroup, OptionTable
from .tokenizer import (
    LongOption,
    Positional,
    ShortCluster,
    Terminator,
    Tokenizer,
    TokenStream,
    Value,
)

__all__ = [
    "Arity",
    "Converter",
    "Diagnostic",
    "DiagnosticKind",
    "Diagnostics",
    "ExclusiveGroup",
    "LongOption",
    "Matcher",
    "OptionDescriptor",
    "OptionTable",
    "ParseSettings",
    "Positional",
    "PositionalSlot",
    "Result",
    "ShortCluster",
    "Terminator",
    "TokenStream",
    "Tokenizer",
    "UnknownOptionPolicy",
    "Value",
    "ValueKind",
    "convert",
    "option",
    "parse",
    "parse_or_raise",
    "positional",
]
