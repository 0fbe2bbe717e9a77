"""Audit entry points that run rule groups and publish the outcome.

These mirror how a host UI triggers audits: pick a test type (or WCAG
criterion, or everything), run the matching rules on a fresh session, log the
report and announce it on the event bus.
"""

from __future__ import annotations

from collections.abc import Iterable

from actkit.kernel.domain.models import Outcome, Report, RuleCategory, RuleResult, Severity
from actkit.kernel.domain.rule import CancellationToken
from actkit.kernel.exceptions import ResourceNotFoundError
from actkit.kernel.logging import get_logger
from actkit.kernel.orchestration.events import AnalysisCompleted, HighlightRequested
from actkit.kernel.orchestration.runner import RuleRunner
from actkit.kernel.ports.event_bus import EventBus

logger = get_logger(__name__)

ALL_RULES_TEST_TYPE = "all-act-rules"

TEST_TYPE_CATEGORIES: dict[str, tuple[RuleCategory, ...]] = {
    "headings": (RuleCategory.HEADINGS,),
    "landmarks": (RuleCategory.LANDMARKS,),
    "links": (RuleCategory.LINKS,),
    "images": (RuleCategory.IMAGES,),
    "alt": (RuleCategory.IMAGES,),
    "forms": (RuleCategory.FORMS,),
    "buttons": (RuleCategory.FORMS, RuleCategory.ARIA),
    "interactive": (RuleCategory.FORMS, RuleCategory.ARIA),
    "keyboard": (RuleCategory.KEYBOARD, RuleCategory.FOCUS),
    "aria": (RuleCategory.ARIA,),
    "color": (RuleCategory.COLOR, RuleCategory.CONTRAST),
    "tables": (RuleCategory.TABLES,),
    "language": (RuleCategory.LANGUAGE,),
    "structure": (RuleCategory.STRUCTURE,),
}

_HIGHLIGHT_COLORS: dict[Severity | None, str] = {
    Severity.CRITICAL: "#d32f2f",
    Severity.SERIOUS: "#f57c00",
    Severity.MODERATE: "#fbc02d",
    Severity.MINOR: "#1976d2",
    None: "#2e7d32",
}


def categories_for_test_type(test_type: str) -> tuple[RuleCategory, ...]:
    """Return the rule categories audited by ``test_type``.

    Raises
    ------
    ResourceNotFoundError
        If the test type is unknown
    """
    try:
        return TEST_TYPE_CATEGORIES[test_type]
    except KeyError:
        raise ResourceNotFoundError("test type", test_type, list(TEST_TYPE_CATEGORIES)) from None


def highlight_style(result: RuleResult) -> dict[str, str]:
    """Outline style for a result, colored by impact."""
    color = _HIGHLIGHT_COLORS.get(result.impact if result.failed else None, "#2e7d32")
    return {"outline": f"2px solid {color}", "outline-offset": "2px"}


def build_highlights(
    results: Iterable[RuleResult], include_passes: bool = False
) -> list[HighlightRequested]:
    """Highlight directives for element results (failures, optionally passes)."""
    highlights = []
    for result in results:
        if result.element is None:
            continue
        if result.outcome != Outcome.FAILED and not (include_passes and result.passed):
            continue
        highlights.append(
            HighlightRequested(
                selector=result.element.selector,
                message=f"{result.rule.name}: {result.message}",
                is_valid=result.passed,
                severity=result.impact.value if result.impact else None,
                style=highlight_style(result),
            )
        )
    return highlights


async def publish_highlights(
    results: Iterable[RuleResult], bus: EventBus, label: str = "ACT audit"
) -> int:
    """Clear previous highlights, then publish one per failed element.

    Returns
    -------
    int
        Number of element highlights published
    """
    await bus.publish(HighlightRequested(selector="*", message=label, is_valid=True, clear=True))
    highlights = build_highlights(results)
    for highlight in highlights:
        await bus.publish(highlight)
    return len(highlights)


async def _finish(
    runner: RuleRunner,
    test_type: str,
    bus: EventBus | None,
    url: str | None,
    highlight: bool,
    log: bool,
) -> Report:
    report = runner.get_report(url=url)
    if log:
        runner.log_results()
    if bus is not None:
        if highlight:
            await publish_highlights(report.results, bus, label=test_type)
        await bus.publish(
            AnalysisCompleted(
                test_type=test_type,
                summary=report.summary.model_dump(by_alias=True),
                details=[r.model_dump(mode="json") for r in report.results],
                url=report.metadata.get("url"),
            )
        )
    logger.info(
        "Finished {test_type}: {failed} of {total} rules failed",
        test_type=test_type,
        failed=report.summary.rules.failed,
        total=report.summary.rules.total,
    )
    return report


async def run_act_tests_for_type(
    runner: RuleRunner,
    test_type: str,
    bus: EventBus | None = None,
    url: str | None = None,
    token: CancellationToken | None = None,
    highlight: bool = True,
    log: bool = False,
) -> Report:
    """Run every rule in the categories mapped to ``test_type``."""
    categories = categories_for_test_type(test_type)
    runner.clear_results()
    await runner.run_rules_by_categories(categories, token)
    return await _finish(runner, test_type, bus, url, highlight, log)


async def run_act_tests_for_wcag_criteria(
    runner: RuleRunner,
    criterion: str,
    bus: EventBus | None = None,
    url: str | None = None,
    token: CancellationToken | None = None,
    highlight: bool = True,
    log: bool = False,
) -> Report:
    """Run every rule whose WCAG requirements mention ``criterion``."""
    runner.clear_results()
    await runner.run_rules_by_wcag_criteria(criterion, token)
    return await _finish(runner, f"wcag-{criterion}", bus, url, highlight, log)


async def run_all_act_tests(
    runner: RuleRunner,
    bus: EventBus | None = None,
    url: str | None = None,
    token: CancellationToken | None = None,
    highlight: bool = True,
    log: bool = False,
) -> Report:
    """Run every applicable rule."""
    runner.clear_results()
    await runner.run_all_applicable_rules(token)
    return await _finish(runner, ALL_RULES_TEST_TYPE, bus, url, highlight, log)
