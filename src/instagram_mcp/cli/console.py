"""Rich console for CLI output.

Bound to stderr: stdout is reserved for the MCP stdio transport.
"""

import sys

from rich.console import Console

# Box drawing characters break on Windows cp1252 terminals
console = Console(stderr=True, safe_box=sys.platform == "win32")


def print_error(message: str) -> None:
    console.print(f"[red]Error: {message}[/red]", soft_wrap=True)


def print_success(message: str) -> None:
    console.print(f"[green]{message}[/green]")


def print_info(message: str) -> None:
    """Print a progress or status line."""
    console.print(f"[cyan]{message}[/cyan]", soft_wrap=True)
