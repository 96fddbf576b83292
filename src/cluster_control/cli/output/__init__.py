"""Shared CLI output helpers.

Usage:
    from cluster_control.cli.output import Table

    table = Table(title="Services")
    table.add_column("Name", style="cyan")
    table.add_row("web")
    console.print(table)
"""

from cluster_control.cli.output.formatters import OutputFormat, get_formatter
from cluster_control.cli.output.table import Table

__all__ = ["OutputFormat", "Table", "get_formatter"]
