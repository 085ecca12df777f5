"""Console output formatting for sftpmirror."""

import json
from typing import Any, Optional

from rich.console import Console
from rich.table import Table


class OutputFormatter:
    """Writes user-facing messages to standard output.

    Informational output is suppressed in quiet mode; warnings and errors
    are always shown. In JSON mode they go to standard error so that
    standard output carries only the JSON document.
    """

    def __init__(
        self,
        json_output: bool = False,
        quiet: bool = False,
        console: Optional[Console] = None,
        error_console: Optional[Console] = None,
    ):
        """Initialize output formatter.

        Args:
            json_output: Emit machine-readable JSON instead of summaries
            quiet: Suppress non-essential output
            console: Rich console to write to (defaults to stdout)
            error_console: Console for warnings and errors (defaults to
                stderr in JSON mode, otherwise ``console``)
        """
        self.json_output = json_output
        self.quiet = quiet
        self.console = console or Console(highlight=False, soft_wrap=True)
        if error_console is None:
            error_console = (
                Console(stderr=True, highlight=False, soft_wrap=True)
                if json_output
                else self.console
            )
        self.error_console = error_console

    def print(self, message: str = "") -> None:
        if not self.quiet:
            self.console.print(message, markup=False)

    def info(self, message: str) -> None:
        if not self.quiet:
            self.console.print(message, markup=False)

    def success(self, message: str) -> None:
        if not self.quiet:
            self.console.print(message, style="green", markup=False)

    def warning(self, message: str) -> None:
        self.error_console.print(message, style="yellow", markup=False)

    def error(self, message: str) -> None:
        self.error_console.print(message, style="bold red", markup=False)

    def output_json(self, data: Any) -> None:
        """Print ``data`` as a JSON document."""
        self.console.print_json(json.dumps(data))

    def print_summary(self, title: str, items: list[tuple[str, str]]) -> None:
        """Print a two-column summary table.

        Args:
            title: Table title
            items: (label, value) rows
        """
        if self.quiet:
            return

        table = Table(title=title, show_header=False, title_justify="left")
        table.add_column("Item", style="bold")
        table.add_column("Value")
        for label, value in items:
            table.add_row(label, value)
        self.console.print(table)
