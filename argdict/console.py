# argdict — (c) 2025 rtj.dev LLC — MIT Licensed
"""Shared console instances for argdict output."""
from rich.console import Console

console = Console(stderr=True, highlight=False)
stdout_console = Console(highlight=False)

ERROR_STYLE = "bold red"
WARNING_STYLE = "yellow"
OPTION_STYLE = "cyan"
