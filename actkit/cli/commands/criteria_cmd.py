"""Print the WCAG success criteria table."""

from typing import Annotated

import typer
from rich.table import Table

from actkit.cli.utils import OutputFormat, console, print_data
from actkit.kernel.wcag import WCAG_CRITERIA, WCAG_VERSION


def criteria(
    level: Annotated[
        str | None,
        typer.Option("--level", "-l", help="Only show criteria at this level (A, AA, AAA)"),
    ] = None,
    format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format"),
    ] = OutputFormat.TABLE,
) -> None:
    """Show the WCAG success criteria known to actkit."""
    wanted = level.upper() if level else None
    rows = [c for c in WCAG_CRITERIA.values() if wanted is None or c.level == wanted]

    if format != OutputFormat.TABLE:
        print_data([{"id": c.id, "name": c.name, "level": c.level} for c in rows], format)
        return

    table = Table(title=f"WCAG {WCAG_VERSION} Success Criteria")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Level", style="green")
    for c in rows:
        table.add_row(c.id, c.name, c.level)
    console.print(table)
