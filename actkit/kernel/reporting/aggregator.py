"""Fold a flat result list into a page-level conformance summary."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import UTC, datetime

from actkit.kernel.domain.models import (
    ElementCounts,
    Outcome,
    Report,
    ReportSummary,
    RuleCounts,
    RuleResult,
    WcagCompliance,
)
from actkit.kernel.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TOOL_NAME = "actkit"

# Level buckets are a substring heuristic over "WCAG2.1:x.y.z" keys, not an
# authoritative level table. Downstream consumers rely on these exact flags.
_LEVEL_A_MARKERS = (":1.", ":2.", ":3.", ":4.")
_LEVEL_AA_MARKERS = (".1.", ".2.", ".3.", ".4.")


def aggregate_rule_outcomes(results: Iterable[RuleResult]) -> dict[str, Outcome]:
    """Return the aggregate outcome per rule id, in first-seen order.

    A rule is ``failed`` as soon as one of its results failed and never
    recovers. Without failures it is ``cantTell`` if any result was
    undetermined, ``inapplicable`` if every result was inapplicable, and
    ``passed`` otherwise.
    """
    seen: dict[str, set[Outcome]] = {}
    for result in results:
        seen.setdefault(result.rule.id, set()).add(result.outcome)

    outcomes: dict[str, Outcome] = {}
    for rule_id, observed in seen.items():
        if Outcome.FAILED in observed:
            outcomes[rule_id] = Outcome.FAILED
        elif observed == {Outcome.INAPPLICABLE}:
            outcomes[rule_id] = Outcome.INAPPLICABLE
        elif Outcome.CANT_TELL in observed:
            outcomes[rule_id] = Outcome.CANT_TELL
        else:
            outcomes[rule_id] = Outcome.PASSED
    return outcomes


def aggregate_element_outcomes(results: Iterable[RuleResult]) -> dict[str, bool]:
    """Return ``selector -> passed`` where passed means every result passed."""
    outcomes: dict[str, bool] = {}
    for result in results:
        if result.element is None:
            continue
        selector = result.element.selector
        outcomes[selector] = result.outcome == Outcome.PASSED and outcomes.get(selector, True)
    return outcomes


def collect_wcag_violations(results: Iterable[RuleResult]) -> list[str]:
    """Criterion keys referenced by failed results, deduplicated in order."""
    violations: dict[str, None] = {}
    for result in results:
        if result.outcome == Outcome.FAILED:
            for criterion in result.wcag_criteria:
                violations.setdefault(criterion, None)
    return list(violations)


def wcag_compliance(violations: Sequence[str]) -> WcagCompliance:
    """Derive A/AA/AAA flags from violated criterion keys."""
    has_a = any(marker in c for c in violations for marker in _LEVEL_A_MARKERS)
    has_aa = any(marker in c for c in violations for marker in _LEVEL_AA_MARKERS)
    # AAA reuses the AA markers; there is no separate AAA bucket.
    has_aaa = has_aa
    return WcagCompliance(
        level_a=not has_a,
        level_aa=not has_a and not has_aa,
        level_aaa=not has_a and not has_aa and not has_aaa,
    )


def summarize(results: Sequence[RuleResult]) -> ReportSummary:
    """Build the :class:`ReportSummary` for an ordered result list."""
    rule_outcomes = aggregate_rule_outcomes(results)
    element_outcomes = aggregate_element_outcomes(results)
    violations = collect_wcag_violations(results)

    rule_values = list(rule_outcomes.values())
    rules = RuleCounts(
        total=len(rule_values),
        passed=rule_values.count(Outcome.PASSED),
        failed=rule_values.count(Outcome.FAILED),
        inapplicable=rule_values.count(Outcome.INAPPLICABLE),
        cant_tell=rule_values.count(Outcome.CANT_TELL),
    )
    passed_elements = sum(1 for ok in element_outcomes.values() if ok)
    elements = ElementCounts(
        total=len(element_outcomes),
        passed=passed_elements,
        failed=len(element_outcomes) - passed_elements,
    )

    logger.debug(
        "Summarized {count} results: {passed} rules passed, {failed} failed",
        count=len(results),
        passed=rules.passed,
        failed=rules.failed,
    )
    return ReportSummary(
        rules=rules,
        elements=elements,
        wcag_compliance=wcag_compliance(violations),
        wcag_violations=tuple(violations),
    )


def create_report(
    results: Sequence[RuleResult],
    url: str | None = None,
    tool_name: str = DEFAULT_TOOL_NAME,
    tool_version: str | None = None,
) -> Report:
    """Wrap results and their summary into a :class:`Report`.

    An empty result list still yields a report with zero counts.
    """
    if tool_version is None:
        from actkit import __version__

        tool_version = __version__
    return Report(
        summary=summarize(results),
        results=tuple(results),
        metadata={
            "tool_name": tool_name,
            "tool_version": tool_version,
            "url": url,
            "timestamp": datetime.now(UTC).isoformat(),
        },
    )
