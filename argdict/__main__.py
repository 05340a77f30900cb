"""
argdict command-line parsing engine

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.

Checks an argument list against a table definition file:

    python -m argdict [options] TABLE -- ARGS...
"""

import json
import logging
import sys
from typing import Any, Sequence

from rich.markup import escape

from argdict.config import load_config
from argdict.console import ERROR_STYLE, console, stdout_console
from argdict.exceptions import ConfigError, TableConflictError
from argdict.parser import (
    Diagnostics,
    OptionTable,
    ParseSettings,
    Result,
    option,
    parse,
    positional,
)
from argdict.utils import get_program_invocation, setup_logging

CLI_TABLE = OptionTable.build(
    [
        option("--collect-all", help="Report every problem, not just the first."),
        option(
            "--passthrough",
            help="Keep unrecognized options as positionals when nothing resembles them.",
        ),
        option("--abbrev", help="Accept unique prefixes of long options."),
        option("--json", help="Print the outcome as JSON."),
        option("-v", "--verbose", repeatable=True, help="Enable debug logging."),
    ],
    add_help=True,
    positionals=[positional("table", help="Table definition file (YAML or TOML).")],
)


def usage() -> str:
    program = get_program_invocation()
    lines = [f"usage: {program} [options] TABLE -- ARGS...", "", "options:"]
    for desc in CLI_TABLE:
        lines.append(f"  {', '.join(desc.aliases):<20} {desc.help}")
    return "\n".join(lines)


def split_args(argv: Sequence[str]) -> tuple[list[str], list[str]]:
    """Split our own arguments from the ones being checked at the first `--`."""
    argv = list(argv)
    if "--" in argv:
        index = argv.index("--")
        return argv[:index], argv[index + 1 :]
    return argv, []


def outcome_to_json(outcome: Result | Diagnostics) -> dict[str, Any]:
    if isinstance(outcome, Diagnostics):
        return {"ok": False, "errors": outcome.to_list()}
    return {
        "ok": True,
        "values": outcome.as_dict(),
        "positionals": list(outcome.positionals),
        "slots": dict(outcome.slots),
        "warnings": list(outcome.warnings),
        "help_requested": outcome.help_requested,
    }


def main(argv: Sequence[str] | None = None) -> int:
    own_args, checked_args = split_args(sys.argv[1:] if argv is None else argv)
    cli = parse(CLI_TABLE, own_args)
    if isinstance(cli, Diagnostics):
        cli.print()
        console.print(usage(), markup=False)
        return 2
    if cli.help_requested:
        stdout_console.print(usage(), markup=False)
        return 0
    if not cli.has_pos("table") or len(cli.positionals) != 1:
        console.print(f"[{ERROR_STYLE}]error:[/] expected exactly one TABLE file")
        console.print(usage(), markup=False)
        return 2

    setup_logging(
        mode="cli",
        console_log_level=logging.DEBUG if cli["verbose"] else logging.WARNING,
    )

    try:
        config = load_config(cli.get_pos("table"))
        table = config.to_table()
    except (ConfigError, TableConflictError) as error:
        console.print(f"[{ERROR_STYLE}]error:[/] {escape(str(error))}")
        return 2

    updates: dict[str, Any] = {}
    if cli["collect_all"]:
        updates["collect_all"] = True
    if cli["passthrough"]:
        updates["unknown_options"] = "passthrough"
    if cli["abbrev"]:
        updates["allow_abbrev"] = True
    settings = ParseSettings.model_validate({**config.settings.model_dump(), **updates})

    outcome = parse(table, checked_args, settings=settings)
    if cli["json"]:
        stdout_console.print_json(json.dumps(outcome_to_json(outcome), default=str))
    else:
        outcome.print()
    return 0 if outcome.ok else 1


if __name__ == "__main__":
    sys.exit(main())
