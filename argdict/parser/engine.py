# argdict — (c) 2025 rtj.dev LLC — MIT Licensed
"""
This module implements the `Matcher`, the state machine that walks a stream of
classified tokens, resolves option tokens against an `OptionTable`, pulls
attached or following values according to each option's `Arity`, converts
them, and enforces the cross-option rules of the table.

For every option token:
1. Resolve the alias (every character of a short cluster) through the table.
2. Flags (`Arity.ZERO`) reject attached values.
3. `Arity.ONE` takes the attached value or exactly one following token;
   `Arity.MANY` takes the attached value or every following positional up to
   the next option-looking token, the terminator, or the end of input.
4. Convert each raw value with the converter the table resolved for the option.
5. Reject repeated non-repeatable options and a second member of an
   exclusivity group.

Positionals, including everything after `--`, are collected unconverted.
Once the stream is exhausted, missing required options and required groups
are reported.

Parsing never raises for bad input. It returns a `Result` or, in fail-fast
mode, `Diagnostics` with the first problem found; with `collect_all=True` it
keeps going and reports every problem along with the partial `Result`.

Example Usage:
    table = OptionTable.build([option("-c", "--count", arity="one", kind="integer")])
    outcome = parse(table, ["-c", "abc"])
    outcome.first.kind   # DiagnosticKind.INVALID_VALUE
    outcome.first.index  # 1
"""
from __future__ import annotations

from typing import Any, Iterable, Sequence

from argdict.exceptions import InvalidValueError, UnknownOptionError
from argdict.logger import logger
from argdict.parser.arity import Arity
from argdict.parser.descriptor import OptionDescriptor
from argdict.parser.parser_types import ParseSettings, ParseState, UnknownOptionPolicy
from argdict.parser.result import Diagnostic, DiagnosticKind, Diagnostics, Result
from argdict.parser.table import OptionTable
from argdict.parser.tokenizer import (
    ClassifiedToken,
    LongOption,
    Positional,
    ShortCluster,
    Terminator,
    Token,
    Tokenizer,
    TokenStream,
    is_negative_number,
)


class _StopParsing(Exception):
    """Unwinds the token loop after the first diagnostic in fail-fast mode."""


class Matcher:
    """
    Matches classified tokens against an `OptionTable`.

    A `Matcher` holds no per-call state, so one instance (and its table) may
    serve any number of parse calls, from any number of threads.

    Args:
        table (OptionTable): The validated option table.
        settings (ParseSettings | None): Parsing knobs; defaults to fail-fast,
            strict unknown-option handling, no abbreviations.
    """

    def __init__(self, table: OptionTable, settings: ParseSettings | None = None) -> None:
        self.table = table
        self.settings = settings or ParseSettings()

    def tokenize(self, args: Sequence[str]) -> Tokenizer:
        """Return a tokenizer whose negative-number handling suits the table."""
        return Tokenizer(args, negative_numbers=self.table.accepts_negative_numbers)

    def parse(self, args: Sequence[str]) -> Result | Diagnostics:
        """
        Parse raw arguments (excluding the program name).

        Returns:
            Result | Diagnostics: The typed result, or what went wrong.
        """
        return self.parse_tokens(self.tokenize(args))

    def parse_tokens(self, tokens: Iterable[ClassifiedToken]) -> Result | Diagnostics:
        """
        Consume a classified token stream exactly once, left to right.

        Args:
            tokens (Iterable[ClassifiedToken]): Typically a `Tokenizer`.

        Returns:
            Result | Diagnostics: The typed result, or what went wrong.
        """
        stream = TokenStream(tokens)
        state = ParseState.start(self.table)
        try:
            while True:
                token = stream.advance()
                if token is None:
                    break
                self._handle_token(token, stream, state)
            self._check_required(state, stream.consumed)
        except _StopParsing:
            if self.table.help_option is not None and self._help_in_remaining(stream):
                state.help_requested = True

        if state.help_requested:
            logger.debug("Help requested; discarding %d diagnostics.", len(state.diagnostics))
            return state.to_result()
        if state.diagnostics:
            return Diagnostics(tuple(state.diagnostics), partial=state.to_result())
        return state.to_result()

    def _report(self, state: ParseState, diagnostic: Diagnostic) -> None:
        logger.debug("Diagnostic: %s", diagnostic.render())
        state.diagnostics.append(diagnostic)
        if not self.settings.collect_all:
            raise _StopParsing()

    def _handle_token(
        self, token: ClassifiedToken, stream: TokenStream, state: ParseState
    ) -> None:
        if isinstance(token, Terminator):
            logger.debug("Terminator at token %d; remaining tokens are positional.", token.index)
        elif isinstance(token, LongOption):
            self._handle_long(token, stream, state)
        elif isinstance(token, ShortCluster):
            self._handle_cluster(token, stream, state)
        else:
            self._add_positional(token, state)

    def _add_positional(self, token: Token, state: ParseState) -> None:
        """Record a positional, binding it to the next declared slot if any."""
        position = len(state.positionals)
        state.positionals.append(token.raw)
        slots = self.table.positionals
        if position < len(slots):
            state.slots[slots[position].name] = token.raw
        elif slots:
            state.warnings.append(
                f"Skipping positional '{token.raw}' (token {token.index}); "
                f"only {len(slots)} positional(s) are declared."
            )

    def _handle_long(self, token: LongOption, stream: TokenStream, state: ParseState) -> None:
        try:
            desc = self.table.resolve(token.alias, self.settings.allow_abbrev)
        except UnknownOptionError as error:
            self._handle_unknown(token, error, state)
            return
        logger.debug("Resolved '%s' to option '%s'.", token.raw, desc.name)
        self._apply(desc, token, token.inline, stream, state)

    def _handle_cluster(
        self, token: ShortCluster, stream: TokenStream, state: ParseState
    ) -> None:
        if not token.chars:
            self._handle_unknown(token, UnknownOptionError(token.raw), state)
            return
        descs: list[OptionDescriptor] = []
        for alias in token.aliases:
            try:
                descs.append(self.table.resolve(alias))
            except UnknownOptionError as error:
                self._handle_unknown(token, error, state)
                return

        # Only the last option of a cluster may take a value.
        for position, desc in enumerate(descs[:-1]):
            if desc.takes_value:
                self._report(
                    state,
                    Diagnostic(
                        DiagnosticKind.MISSING_VALUE,
                        token.index,
                        token.raw,
                        option=desc.name,
                        message=(
                            f"option '-{token.chars[position]}' needs a value "
                            "but is not the last option in the cluster"
                        ),
                    ),
                )
                state.options[desc.name].set_consumed(token.index)
                continue
            self._apply(desc, token, None, stream, state)
        self._apply(descs[-1], token, token.inline, stream, state)

    def _handle_unknown(
        self, token: Token, error: UnknownOptionError, state: ParseState
    ) -> None:
        if (
            self.settings.unknown_options is UnknownOptionPolicy.PASSTHROUGH
            and not error.candidates
        ):
            logger.debug("Passing unrecognized option '%s' through.", token.raw)
            state.warnings.append(
                f"Treating unrecognized option '{token.raw}' "
                f"(token {token.index}) as a positional."
            )
            self._add_positional(token, state)
            return
        self._report(
            state,
            Diagnostic(
                DiagnosticKind.UNKNOWN_OPTION,
                token.index,
                token.raw,
                message=str(error),
                candidates=error.candidates,
            ),
        )

    def _is_recognized_option(self, token: ClassifiedToken) -> bool:
        """True if the token names an option of the table."""
        try:
            if isinstance(token, LongOption):
                self.table.resolve(token.alias, self.settings.allow_abbrev)
                return True
            if isinstance(token, ShortCluster) and token.chars:
                for alias in token.aliases:
                    self.table.resolve(alias)
                return True
        except UnknownOptionError:
            return False
        return False

    def _is_pending_value(self, token: ClassifiedToken | None) -> bool:
        """True if a MANY option may take `token` as one more value."""
        if isinstance(token, Positional):
            return True
        return (
            isinstance(token, ShortCluster)
            and is_negative_number(token.raw)
            and not self._is_recognized_option(token)
        )

    def _consume_values(
        self,
        desc: OptionDescriptor,
        token: Token,
        inline: str | None,
        stream: TokenStream,
    ) -> list[tuple[int, str]] | None:
        """Collect `(index, raw)` pairs for one occurrence; None if none available."""
        if inline is not None:
            return [(token.index, inline)]
        values: list[tuple[int, str]] = []
        if desc.arity is Arity.ONE:
            upcoming = stream.peek()
            if (
                upcoming is None
                or isinstance(upcoming, Terminator)
                or self._is_recognized_option(upcoming)
            ):
                return None
            value = stream.take_value()
            assert value is not None, "peeked token disappeared"
            values.append((value.index, value.raw))
        else:
            while self._is_pending_value(stream.peek()):
                value = stream.take_value()
                assert value is not None, "peeked token disappeared"
                values.append((value.index, value.raw))
        logger.debug("Option '%s' consumed %d value(s).", desc.name, len(values))
        return values or None

    def _apply(
        self,
        desc: OptionDescriptor,
        token: Token,
        inline: str | None,
        stream: TokenStream,
        state: ParseState,
    ) -> None:
        if desc.is_flag and inline is not None:
            self._report(
                state,
                Diagnostic(
                    DiagnosticKind.UNEXPECTED_VALUE,
                    token.index,
                    token.raw,
                    option=desc.name,
                    message=f"option '{desc.primary_alias}' does not take a value",
                ),
            )
            state.options[desc.name].set_consumed(token.index)
            return

        if desc is self.table.help_option:
            state.help_requested = True
            state.options[desc.name].set_consumed(token.index)
            state.values[desc.name] = True
            return

        typed: list[Any] = []
        if not desc.is_flag:
            raw_values = self._consume_values(desc, token, inline, stream)
            if raw_values is None:
                self._report(
                    state,
                    Diagnostic(
                        DiagnosticKind.MISSING_VALUE,
                        token.index,
                        token.raw,
                        option=desc.name,
                        message=f"option '{desc.primary_alias}' expects a value",
                    ),
                )
                state.options[desc.name].set_consumed(token.index)
                return
            converter = self.table.converter(desc)
            failed = False
            for index, raw in raw_values:
                try:
                    typed.append(converter(raw))
                except InvalidValueError as error:
                    failed = True
                    self._report(
                        state,
                        Diagnostic(
                            DiagnosticKind.INVALID_VALUE,
                            index,
                            raw,
                            option=desc.name,
                            message=f"invalid value for '{desc.primary_alias}': {error}",
                            value_kind=str(error.kind),
                            choices=error.choices,
                        ),
                    )
            if failed:
                state.options[desc.name].set_consumed(token.index)
                return

        if not self._check_occurrence(desc, token, state):
            return
        self._store(desc, typed, state)
        state.options[desc.name].set_consumed(token.index)
        if desc.group is not None:
            state.group_owner.setdefault(desc.group, desc.name)

    def _check_occurrence(
        self, desc: OptionDescriptor, token: Token, state: ParseState
    ) -> bool:
        option_state = state.options[desc.name]
        if option_state.consumed and not desc.repeatable:
            self._report(
                state,
                Diagnostic(
                    DiagnosticKind.DUPLICATE_OPTION,
                    token.index,
                    token.raw,
                    option=desc.name,
                    message=(
                        f"option '{desc.primary_alias}' was already given "
                        f"at token {option_state.consumed_position}"
                    ),
                ),
            )
            return False
        if desc.group is not None:
            owner = state.group_owner.get(desc.group)
            if owner is not None and owner != desc.name:
                other = self.table[owner]
                self._report(
                    state,
                    Diagnostic(
                        DiagnosticKind.MUTUALLY_EXCLUSIVE,
                        token.index,
                        token.raw,
                        option=desc.name,
                        message=(
                            f"option '{desc.primary_alias}' cannot be used "
                            f"together with '{other.primary_alias}'"
                        ),
                        conflicts_with=owner,
                        group=desc.group,
                    ),
                )
                return False
        return True

    def _store(self, desc: OptionDescriptor, typed: list[Any], state: ParseState) -> None:
        option_state = state.options[desc.name]
        if desc.is_flag:
            if desc.repeatable:
                state.values[desc.name] += 1
            else:
                state.values[desc.name] = True
        elif desc.collects_list:
            if not option_state.stored:
                state.values[desc.name] = []
            state.values[desc.name].extend(typed)
        else:
            state.values[desc.name] = typed[0]
        option_state.stored = True

    def _check_required(self, state: ParseState, end: int) -> None:
        for desc in self.table.required:
            if not state.seen(desc.name):
                self._report(
                    state,
                    Diagnostic(
                        DiagnosticKind.MISSING_REQUIRED_OPTION,
                        end,
                        desc.primary_alias,
                        option=desc.name,
                        message=f"required option '{desc.primary_alias}' was not given",
                    ),
                )
        for group in self.table.required_groups:
            members = self.table.members_of(group.name)
            if not any(state.seen(member.name) for member in members):
                aliases = ", ".join(member.primary_alias for member in members)
                self._report(
                    state,
                    Diagnostic(
                        DiagnosticKind.MISSING_REQUIRED_OPTION,
                        end,
                        aliases,
                        message=f"one of {aliases} is required",
                        group=group.name,
                    ),
                )

    def _help_in_remaining(self, stream: TokenStream) -> bool:
        help_option = self.table.help_option
        for token in stream:
            if isinstance(token, Terminator):
                return False
            if isinstance(token, LongOption):
                aliases: tuple[str, ...] = () if token.inline is not None else (token.alias,)
            elif isinstance(token, ShortCluster):
                # A trailing `=value` belongs to the last alias of the cluster.
                aliases = token.aliases[:-1] if token.inline is not None else token.aliases
            else:
                continue
            if any(self.table.aliases.get(alias) is help_option for alias in aliases):
                return True
        return False


def parse(
    table: OptionTable,
    args: Sequence[str],
    *,
    collect_all: bool = False,
    unknown_options: UnknownOptionPolicy | str = UnknownOptionPolicy.ERROR,
    allow_abbrev: bool = False,
    settings: ParseSettings | None = None,
) -> Result | Diagnostics:
    """
    Parse raw arguments against a table.

    Args:
        table (OptionTable): The validated option table.
        args (Sequence[str]): Raw arguments, excluding the program name.
        collect_all (bool): Report every problem instead of only the first.
        unknown_options (UnknownOptionPolicy | str): Unknown option handling.
        allow_abbrev (bool): Accept unique prefixes of long aliases.
        settings (ParseSettings | None): Overrides the keyword settings.

    Returns:
        Result | Diagnostics: The typed result, or what went wrong.
    """
    if settings is None:
        settings = ParseSettings(
            collect_all=collect_all,
            unknown_options=UnknownOptionPolicy(unknown_options),
            allow_abbrev=allow_abbrev,
        )
    return Matcher(table, settings).parse(args)


def parse_or_raise(table: OptionTable, args: Sequence[str], **kwargs: Any) -> Result:
    """
    Parse raw arguments, raising `ParseError` instead of returning diagnostics.

    Raises:
        ParseError: If the arguments could not be interpreted.
    """
    outcome = parse(table, args, **kwargs)
    if isinstance(outcome, Diagnostics):
        outcome.raise_for_errors()
    assert isinstance(outcome, Result)
    return outcome
