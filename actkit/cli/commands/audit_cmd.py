"""Audit command: run rules against an HTML file or a live URL."""

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from actkit.builtin.adapters.browser import load_live_document
from actkit.builtin.adapters.html import HtmlDocument
from actkit.cli.utils import OutputFormat, build_registry, console, get_config, print_data
from actkit.kernel.domain.models import Report, RuleCategory
from actkit.kernel.exceptions import ActKitError, RuleExecutionError
from actkit.kernel.logging import get_logger
from actkit.kernel.orchestration.runner import RuleRunner
from actkit.kernel.ports.document import DocumentPort
from actkit.kernel.registry import RuleRegistry
from actkit.kernel.reporting import log_results

logger = get_logger(__name__)

_URL_SCHEMES = ("http://", "https://")


def select_rule_ids(
    registry: RuleRegistry,
    categories: list[RuleCategory] | None = None,
    wcag: str | None = None,
    rule_ids: list[str] | None = None,
) -> list[str]:
    """Ids of the rules matching every given filter, in registration order.

    Raises
    ------
    ResourceNotFoundError
        If an explicit rule id is not registered
    """
    selected = [rule.id for rule in registry.get_all_rules()]
    if rule_ids:
        wanted = {registry.require_rule(rule_id).id for rule_id in rule_ids}
        selected = [rule_id for rule_id in selected if rule_id in wanted]
    if categories:
        in_categories = {
            rule.id for category in categories for rule in registry.get_rules_by_category(category)
        }
        selected = [rule_id for rule_id in selected if rule_id in in_categories]
    if wcag:
        for_criterion = {rule.id for rule in registry.get_rules_by_wcag_criteria(wcag)}
        selected = [rule_id for rule_id in selected if rule_id in for_criterion]
    return selected


async def load_document(target: str) -> DocumentPort:
    if target.startswith(_URL_SCHEMES):
        return await load_live_document(target)
    return HtmlDocument.from_path(Path(target))


async def run_audit(
    registry: RuleRegistry,
    target: str,
    rule_ids: list[str],
    rule_timeout: float,
    tool_name: str = "actkit",
    tool_version: str | None = None,
) -> tuple[Report, dict[str, RuleExecutionError]]:
    """Load ``target``, run ``rule_ids`` concurrently and return the report plus rule errors."""
    document = await load_document(target)
    runner = RuleRunner(
        registry,
        document,
        rule_timeout=rule_timeout,
        tool_name=tool_name,
        tool_version=tool_version,
    )
    await runner.run_rules(rule_ids)
    return runner.get_report(), runner.get_errors()


def audit(
    ctx: typer.Context,
    target: Annotated[str, typer.Argument(help="HTML file path or http(s) URL")],
    category: Annotated[
        list[RuleCategory] | None,
        typer.Option("--category", "-c", help="Only run rules in this category (repeatable)"),
    ] = None,
    wcag: Annotated[
        str | None,
        typer.Option("--wcag", "-w", help="Only run rules mapped to this WCAG criterion"),
    ] = None,
    rule: Annotated[
        list[str] | None,
        typer.Option("--rule", "-r", help="Only run this rule id (repeatable)"),
    ] = None,
    format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format"),
    ] = OutputFormat.TABLE,
    timeout: Annotated[
        float | None,
        typer.Option("--timeout", "-t", min=0.001, help="Per-rule timeout in seconds"),
    ] = None,
    suites: Annotated[
        bool,
        typer.Option("--suites", help="Also run the bundled legacy test suites"),
    ] = False,
    show_passes: Annotated[
        bool,
        typer.Option("--show-passes", help="List passing results in table output"),
    ] = False,
) -> None:
    """Audit a page and exit with status 1 when any rule failed."""
    config = get_config(ctx)
    rule_timeout = timeout or config.runner.rule_timeout

    try:
        registry = build_registry(config, include_suites=suites)
        rule_ids = select_rule_ids(registry, category, wcag, rule)
        if not rule_ids:
            console.print("[yellow]No rules match the given filters[/yellow]")
            raise typer.Exit(0)
        report, errors = asyncio.run(
            run_audit(
                registry,
                target,
                rule_ids,
                rule_timeout,
                tool_name=config.report.tool_name,
                tool_version=config.report.tool_version,
            )
        )
    except ActKitError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(2) from e

    if format == OutputFormat.TABLE:
        log_results(report, console=console, show_passes=show_passes)
        for error in errors.values():
            console.print(f"[yellow]Warning:[/yellow] {escape(str(error))}")
    else:
        data = report.model_dump(mode="json", by_alias=True)
        data["errors"] = {rule_id: str(error) for rule_id, error in errors.items()}
        print_data(data, format)

    if report.summary.rules.failed:
        logger.debug("{count} rules failed", count=report.summary.rules.failed)
        raise typer.Exit(1)
