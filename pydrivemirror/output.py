"""User-facing output formatting."""

import json
from typing import Any, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table


class OutputFormatter:
    """Prints status messages, tables and JSON to the terminal."""

    def __init__(
        self,
        json_output: bool = False,
        quiet: bool = False,
        console: Optional[Console] = None,
        err_console: Optional[Console] = None,
    ):
        """Initialize output formatter.

        Args:
            json_output: Emit machine-readable JSON instead of text
            quiet: Suppress informational messages (errors are still shown)
            console: Console for regular output
            err_console: Console for warnings and errors
        """
        self.json_output = json_output
        self.quiet = quiet
        self.console = console or Console(highlight=False)
        self.err_console = err_console or Console(stderr=True, highlight=False)

    def print(self, message: str = "") -> None:
        if not self.quiet and not self.json_output:
            self.console.print(message, markup=False)

    def info(self, message: str) -> None:
        if not self.quiet and not self.json_output:
            self.console.print(message, markup=False)

    def success(self, message: str) -> None:
        if not self.quiet and not self.json_output:
            self.console.print(f"[green]{escape(message)}[/green]")

    def warning(self, message: str) -> None:
        if not self.quiet:
            self.err_console.print(f"[yellow]{escape(message)}[/yellow]")

    def error(self, message: str) -> None:
        self.err_console.print(f"[red]{escape(message)}[/red]")

    def output_json(self, data: Any) -> None:
        """Print data as indented JSON."""
        self.console.print_json(json.dumps(data, default=str))

    def output_table(
        self, columns: list[str], rows: list[list[str]], title: Optional[str] = None
    ) -> None:
        """Print rows as a table (or JSON objects when JSON output is on)."""
        if self.json_output:
            self.output_json([dict(zip(columns, row)) for row in rows])
            return

        table = Table(title=title)
        for column in columns:
            table.add_column(column)
        for row in rows:
            table.add_row(*row)
        self.console.print(table)
