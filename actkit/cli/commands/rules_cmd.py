"""List registered rules."""

from typing import Annotated

import typer
from rich.table import Table

from actkit.cli.commands.audit_cmd import select_rule_ids
from actkit.cli.utils import OutputFormat, build_registry, console, get_config, print_data
from actkit.kernel.domain.models import RuleCategory
from actkit.kernel.domain.rule import rule_summary
from actkit.kernel.wcag import strip_criterion_key


def rules(
    ctx: typer.Context,
    category: Annotated[
        list[RuleCategory] | None,
        typer.Option("--category", "-c", help="Filter by category (repeatable)"),
    ] = None,
    wcag: Annotated[
        str | None,
        typer.Option("--wcag", "-w", help="Filter by WCAG criterion"),
    ] = None,
    suites: Annotated[
        bool,
        typer.Option("--suites", help="Include the bundled legacy test suites"),
    ] = False,
    format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format"),
    ] = OutputFormat.TABLE,
) -> None:
    """List registered rules."""
    registry = build_registry(get_config(ctx), include_suites=suites)
    selected = [
        registry.require_rule(rule_id) for rule_id in select_rule_ids(registry, category, wcag)
    ]
    rows = [rule_summary(rule) for rule in selected]

    if format != OutputFormat.TABLE:
        print_data(rows, format)
        return

    if not rows:
        console.print("[yellow]No rules found[/yellow]")
        return

    table = Table(title="ACT Rules")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Categories", style="magenta")
    table.add_column("WCAG", style="green")
    for row in rows:
        criteria = ", ".join(strip_criterion_key(key) for key in row["wcag"])
        table.add_row(row["id"], row["name"], ", ".join(row["categories"]), criteria)
    console.print(table)
    console.print(f"\n[dim]{len(rows)} rules[/dim]")
