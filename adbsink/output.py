"""Output formatting for the adbsink CLI."""

import json
import sys
from typing import Any, Optional

import click
from rich.console import Console
from rich.table import Table


class OutputFormatter:
    """Formats user-facing output as plain text, colored text or JSON.

    Informational messages are suppressed in quiet mode and in JSON mode so
    that JSON output stays machine readable. Errors always go to stderr.
    """

    def __init__(self, json_output: bool = False, quiet: bool = False):
        """Initialize output formatter.

        Args:
            json_output: Whether to emit JSON instead of human-readable text
            quiet: Whether to suppress non-essential output
        """
        self.json_output = json_output
        self.quiet = quiet

    def _silent(self) -> bool:
        return self.quiet or self.json_output

    def print(self, message: str = "") -> None:
        """Print a plain line."""
        if not self._silent():
            click.echo(message)

    def info(self, message: str) -> None:
        """Print an informational message."""
        if not self._silent():
            click.echo(message)

    def success(self, message: str) -> None:
        """Print a success message in green."""
        if not self._silent():
            click.secho(message, fg="green")

    def warning(self, message: str) -> None:
        """Print a warning in yellow (stderr)."""
        if not self.quiet:
            click.secho(message, fg="yellow", err=True)

    def error(self, message: str) -> None:
        """Print an error in red (stderr), even in quiet mode."""
        click.secho(f"Error: {message}", fg="red", err=True)

    def output_json(self, data: Any) -> None:
        """Print data as indented JSON."""
        click.echo(json.dumps(data, indent=2, default=str))

    def output_table(
        self,
        rows: list[dict[str, Any]],
        columns: list[str],
        title: Optional[str] = None,
    ) -> None:
        """Print rows as a table, or as JSON in JSON mode.

        Args:
            rows: Row dictionaries keyed by column name
            columns: Column names in display order
            title: Optional table title
        """
        if self.json_output:
            self.output_json(rows)
            return

        table = Table(title=title)
        for column in columns:
            table.add_column(column)
        for row in rows:
            table.add_row(*(str(row.get(column, "")) for column in columns))

        # Resolve stdout at call time so redirected streams are honored
        Console(file=sys.stdout).print(table)
