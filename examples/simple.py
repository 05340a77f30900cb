import sys

from argdict import OptionTable, option, parse, positional
from argdict.utils import setup_logging

setup_logging()

# Options for a small deploy tool
table = OptionTable.build(
    [
        option("-v", "--verbose", repeatable=True, help="Say more."),
        option("-r", "--region", arity="one", default="us-east-1"),
        option("-n", "--replicas", arity="one", kind="integer", default=1),
        option("-t", "--tag", arity="many", repeatable=True),
        option("--env", arity="one", kind="choice", choices=("dev", "prod"), required=True),
        option("--dry-run", group="mode"),
        option("--force", group="mode"),
    ],
    add_help=True,
    positionals=[positional("service", help="Service to deploy.")],
)

# Entry point
if __name__ == "__main__":
    outcome = parse(table, sys.argv[1:], collect_all=True)
    if outcome.ok and outcome.help_requested:
        for desc in table:
            print(f"  {', '.join(desc.aliases):<20} {desc.get_choice_text():<16} {desc.help}")
        sys.exit(0)
    outcome.print()
    sys.exit(0 if outcome.ok else 1)
