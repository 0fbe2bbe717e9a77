"""Build RuleResult records and render them for humans."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from html import escape

from rich.console import Console
from rich.markup import escape as escape_markup
from rich.table import Table

from actkit.kernel.domain.models import (
    ElementInfo,
    LegacySeverity,
    Outcome,
    Report,
    RuleRef,
    RuleResult,
    Severity,
    map_severity,
)
from actkit.kernel.ports.document import ElementPort
from actkit.kernel.wcag import criterion_key

GENERIC_REMEDIATION = "Review the issue and implement appropriate fixes."

_SUGGESTION_PATTERN = re.compile(r"should have|should be|missing|requires|needs", re.IGNORECASE)

_RULE_REMEDIATIONS: dict[str, str] = {
    "button-has-accessible-name": (
        "Add text content, aria-label, or aria-labelledby to the {tag} element."
    ),
    "image-accessible-name": "Add an alt attribute with descriptive text to the {tag} element.",
    "image-alt-quality": (
        "Replace the alt text with a short description of what the image conveys, "
        "or use alt=\"\" with role=\"presentation\" for decorative images."
    ),
    "link-accessible-name": (
        "Add descriptive text content to the link or use aria-label/aria-labelledby."
    ),
    "link-descriptive-text": "Rewrite the link text so it describes the link destination.",
    "heading-has-accessible-name": "Give the heading visible text content or an aria-label.",
    "form-label-association": (
        "Associate a label with this form field using a <label> element, "
        "aria-label, or aria-labelledby."
    ),
    "language-of-page": "Add a valid lang attribute (for example lang=\"en\") to the html element.",
}


def create_element_representation(element: ElementPort, selector: str) -> ElementInfo:
    """Describe ``element`` by its opening tag, attributes and id-based XPath."""
    attributes = dict(element.attributes)
    parts = [element.tag_name]
    for name, value in attributes.items():
        parts.append(f'{name}="{escape(value, quote=True)}"')
    opening_tag = f"<{' '.join(parts)}>"

    element_id = attributes.get("id")
    xpath = f'//*[@id="{element_id}"]' if element_id else None

    return ElementInfo(
        selector=selector,
        html_snippet=opening_tag,
        xpath=xpath,
        attributes=attributes,
    )


def generate_remediation(rule_id: str, element: ElementPort | None, message: str) -> str:
    """Suggest a fix for a failed result.

    Rule-specific advice wins. Otherwise a message that already reads like an
    instruction ("... should have ...", "missing ...") is echoed back.
    """
    if element is None:
        return GENERIC_REMEDIATION

    template = _RULE_REMEDIATIONS.get(rule_id)
    if template is not None:
        return template.format(tag=element.tag_name)

    if _SUGGESTION_PATTERN.search(message):
        return f"Fix the issue: {message}"
    return GENERIC_REMEDIATION


def format_act_result(
    rule_id: str,
    rule_name: str,
    element: ElementPort | None,
    selector: str | None,
    outcome: Outcome | bool,
    message: str,
    severity: Severity | LegacySeverity | str = Severity.MODERATE,
    wcag_criteria: Sequence[str] | None = None,
    help_url: str | None = None,
) -> RuleResult:
    """Create a RuleResult for one target.

    Parameters
    ----------
    rule_id, rule_name : str
        Identity of the emitting rule
    element : ElementPort | None
        Target element, ``None`` for page-level results
    selector : str | None
        Re-queryable selector of ``element``
    outcome : Outcome | bool
        Verdict; ``True``/``False`` are shorthand for passed/failed
    message : str
        Explanation shown to the user
    severity : Severity | LegacySeverity | str
        Impact recorded when the outcome is failed
    wcag_criteria : Sequence[str] | None
        Criterion ids or ``WCAG2.1:`` keys
    help_url : str | None
        Link to further guidance

    Returns
    -------
    RuleResult
        Impact and remediation are only set on failures
    """
    if isinstance(outcome, bool):
        outcome = Outcome.PASSED if outcome else Outcome.FAILED
    failed = outcome == Outcome.FAILED

    element_info = None
    if element is not None:
        element_info = create_element_representation(element, selector or "")

    return RuleResult(
        rule=RuleRef(id=rule_id, name=rule_name),
        outcome=outcome,
        element=element_info,
        message=message,
        impact=map_severity(severity) if failed else None,
        remediation=generate_remediation(rule_id, element, message) if failed else None,
        wcag_criteria=tuple(criterion_key(c) for c in wcag_criteria or ()),
        help_url=help_url,
    )


def _tick(value: bool) -> str:
    return "[green]✓[/green]" if value else "[red]✗[/red]"


def log_results(
    report: Report, console: Console | None = None, show_passes: bool = False
) -> None:
    """Print a report summary followed by grouped failures (and optionally passes)."""
    console = console or Console()
    summary = report.summary
    url = report.metadata.get("url") or "N/A"

    console.print("[bold]ACT Test Results Summary[/bold]")
    console.print(f"[bold]Tested URL:[/bold] {escape_markup(str(url))}")
    if timestamp := report.metadata.get("timestamp"):
        console.print(f"[bold]Timestamp:[/bold] {timestamp}")
    rules = summary.rules
    console.print(
        f"[bold]Rules:[/bold] {rules.total} total, [green]{rules.passed} passed[/green], "
        f"[red]{rules.failed} failed[/red], {rules.inapplicable} inapplicable, "
        f"{rules.cant_tell} can't tell"
    )
    elements = summary.elements
    console.print(
        f"[bold]Elements:[/bold] {elements.total} total, "
        f"[green]{elements.passed} passed[/green], [red]{elements.failed} failed[/red]"
    )
    compliance = summary.wcag_compliance
    console.print(
        f"[bold]WCAG Compliance:[/bold] Level A: {_tick(compliance.level_a)}, "
        f"Level AA: {_tick(compliance.level_aa)}, Level AAA: {_tick(compliance.level_aaa)}"
    )

    _print_group(console, "Failures", "red", _by_outcome(report.results, Outcome.FAILED))
    _print_group(console, "Can't tell", "yellow", _by_outcome(report.results, Outcome.CANT_TELL))
    if show_passes:
        _print_group(console, "Passes", "green", _by_outcome(report.results, Outcome.PASSED))


def _by_outcome(results: Iterable[RuleResult], outcome: Outcome) -> list[RuleResult]:
    return [r for r in results if r.outcome == outcome]


def _print_group(console: Console, title: str, style: str, results: list[RuleResult]) -> None:
    if not results:
        return
    table = Table(title=f"[bold {style}]{title}[/bold {style}]", show_lines=True)
    table.add_column("Rule", style="bold")
    table.add_column("Element")
    table.add_column("Impact")
    table.add_column("Message")
    table.add_column("WCAG")
    for result in results:
        message = escape_markup(result.message)
        if result.remediation:
            message += f"\n[dim]{escape_markup(result.remediation)}[/dim]"
        table.add_row(
            escape_markup(result.rule.name),
            escape_markup(result.selector or "N/A"),
            result.impact.value if result.impact else "",
            message,
            ", ".join(result.wcag_criteria),
        )
    console.print(table)
