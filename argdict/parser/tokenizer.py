# argdict — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Lexical classification of raw command-line arguments.

The `Tokenizer` turns the raw argument list into a lazy sequence of classified
tokens without consulting the option table:

- `LongOption`: `--name` or `--name=value`
- `ShortCluster`: `-abc`, `-o`, or `-o=value` (chars before `=`, value after)
- `Terminator`: exactly `--`; everything after it is `Positional`
- `Positional`: anything else, including `-`, the empty string, and (when
  negative numbers are enabled) tokens such as `-5` or `-3.14`
- `Value`: never produced by the tokenizer itself; a `Positional` (or an
  unrecognized option-looking token) becomes a `Value` when the `Matcher`
  asks the `TokenStream` for the value an option is waiting on

Classification is total: every string maps to exactly one token kind, so the
tokenizer never fails. Iterating a `Tokenizer` again starts over from the
first argument and yields an identical sequence.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence, Union

NEGATIVE_NUMBER = re.compile(r"^-(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
TERMINATOR = "--"


@dataclass(frozen=True)
class Token:
    """Base of all classified tokens: where the token was and what it said."""

    index: int
    raw: str


@dataclass(frozen=True)
class LongOption(Token):
    """`--name` with an optional `=value` suffix."""

    name: str = ""
    inline: str | None = None

    @property
    def alias(self) -> str:
        return f"--{self.name}"


@dataclass(frozen=True)
class ShortCluster(Token):
    """`-abc`: one or more single-character aliases, with an optional `=value`."""

    chars: str = ""
    inline: str | None = None

    @property
    def aliases(self) -> tuple[str, ...]:
        return tuple(f"-{char}" for char in self.chars)


@dataclass(frozen=True)
class Positional(Token):
    """A token not bound to any option."""


@dataclass(frozen=True)
class Terminator(Token):
    """The `--` marker."""


@dataclass(frozen=True)
class Value(Token):
    """A token consumed as the value of the preceding option."""


ClassifiedToken = Union[LongOption, ShortCluster, Positional, Terminator, Value]


def is_negative_number(raw: str) -> bool:
    return bool(NEGATIVE_NUMBER.match(raw))


def classify(
    raw: str, index: int, negative_numbers: bool = True
) -> LongOption | ShortCluster | Positional | Terminator:
    """
    Classify a single raw argument outside of a terminated section.

    Args:
        raw (str): The raw argument.
        index (int): Its 0-based position in the argument list.
        negative_numbers (bool): Treat `-5`-style tokens as positionals.

    Returns:
        The classified token.
    """
    if raw == TERMINATOR:
        return Terminator(index, raw)
    if raw.startswith("--"):
        name, sep, inline = raw[2:].partition("=")
        return LongOption(index, raw, name=name, inline=inline if sep else None)
    if raw.startswith("-") and len(raw) > 1:
        if negative_numbers and is_negative_number(raw):
            return Positional(index, raw)
        chars, sep, inline = raw[1:].partition("=")
        return ShortCluster(index, raw, chars=chars, inline=inline if sep else None)
    return Positional(index, raw)


class Tokenizer:
    """
    Restartable, lazy classifier over a raw argument list.

    Args:
        args (Sequence[str]): Raw arguments, excluding the program name.
        negative_numbers (bool): Whether `-5`, `-3.14`, `-1e3` are values
            rather than short option clusters. The `Matcher` disables this
            when the table has a digit alias such as `-1`.
    """

    def __init__(self, args: Sequence[str], negative_numbers: bool = True) -> None:
        self.args: tuple[str, ...] = tuple(args)
        self.negative_numbers = negative_numbers

    def __iter__(self) -> Iterator[ClassifiedToken]:
        terminated = False
        for index, raw in enumerate(self.args):
            if terminated:
                yield Positional(index, raw)
                continue
            token = classify(raw, index, self.negative_numbers)
            if isinstance(token, Terminator):
                terminated = True
            yield token


class TokenStream:
    """
    Single-pass cursor over classified tokens with one token of lookahead.

    The `Matcher` drives value consumption through `take_value()`, which
    reclassifies the next token as a `Value` at the moment an option needs one.
    """

    def __init__(self, tokens: Iterable[ClassifiedToken]) -> None:
        self._tokens = iter(tokens)
        self._peeked: ClassifiedToken | None = None
        self._exhausted = False
        self.consumed = 0

    def peek(self) -> ClassifiedToken | None:
        if self._peeked is None and not self._exhausted:
            try:
                self._peeked = next(self._tokens)
            except StopIteration:
                self._exhausted = True
        return self._peeked

    def advance(self) -> ClassifiedToken | None:
        token = self.peek()
        self._peeked = None
        if token is not None:
            self.consumed += 1
        return token

    def take_value(self) -> Value | None:
        """Consume the next token as a value, or return None at end of stream."""
        token = self.advance()
        if token is None:
            return None
        return Value(token.index, token.raw)

    def __iter__(self) -> Iterator[ClassifiedToken]:
        while True:
            token = self.advance()
            if token is None:
                return
            yield token
