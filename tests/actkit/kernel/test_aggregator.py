"""Tests for result aggregation and report creation."""

from __future__ import annotations

from datetime import datetime

from actkit.kernel.domain.models import ElementInfo, Outcome, RuleRef, RuleResult, Severity
from actkit.kernel.reporting.aggregator import (
    aggregate_element_outcomes,
    aggregate_rule_outcomes,
    collect_wcag_violations,
    create_report,
    summarize,
    wcag_compliance,
)


def result(
    rule_id: str,
    outcome: Outcome,
    selector: str | None = None,
    criteria: tuple[str, ...] = (),
) -> RuleResult:
    element = ElementInfo(selector=selector, html_snippet="<p>") if selector else None
    return RuleResult(
        rule=RuleRef(id=rule_id, name=rule_id.title()),
        outcome=outcome,
        element=element,
        message=f"{rule_id} {outcome}",
        impact=Severity.SERIOUS if outcome == Outcome.FAILED else None,
        wcag_criteria=criteria,
    )


class TestRuleOutcomes:
    """Tests for aggregate_rule_outcomes."""

    def test_failure_wins_regardless_of_order(self) -> None:
        outcomes = aggregate_rule_outcomes(
            [
                result("alt", Outcome.PASSED),
                result("alt", Outcome.FAILED),
                result("alt", Outcome.PASSED),
            ]
        )
        assert outcomes == {"alt": Outcome.FAILED}

    def test_all_inapplicable(self) -> None:
        outcomes = aggregate_rule_outcomes(
            [result("tables", Outcome.INAPPLICABLE), result("tables", Outcome.INAPPLICABLE)]
        )
        assert outcomes == {"tables": Outcome.INAPPLICABLE}

    def test_cant_tell_beats_passed(self) -> None:
        outcomes = aggregate_rule_outcomes(
            [result("alt", Outcome.PASSED), result("alt", Outcome.CANT_TELL)]
        )
        assert outcomes == {"alt": Outcome.CANT_TELL}

    def test_passed_with_inapplicable(self) -> None:
        outcomes = aggregate_rule_outcomes(
            [result("lang", Outcome.INAPPLICABLE), result("lang", Outcome.PASSED)]
        )
        assert outcomes == {"lang": Outcome.PASSED}

    def test_first_seen_order(self) -> None:
        outcomes = aggregate_rule_outcomes(
            [result("b", Outcome.PASSED), result("a", Outcome.PASSED), result("b", Outcome.PASSED)]
        )
        assert list(outcomes) == ["b", "a"]


class TestElementOutcomes:
    def test_element_fails_if_any_result_failed(self) -> None:
        outcomes = aggregate_element_outcomes(
            [
                result("alt", Outcome.PASSED, "#logo"),
                result("alt-quality", Outcome.FAILED, "#logo"),
                result("alt", Outcome.PASSED, "#hero"),
            ]
        )
        assert outcomes == {"#logo": False, "#hero": True}

    def test_page_level_results_are_ignored(self) -> None:
        assert aggregate_element_outcomes([result("title", Outcome.FAILED)]) == {}

    def test_cant_tell_is_not_a_pass(self) -> None:
        outcomes = aggregate_element_outcomes([result("alt", Outcome.CANT_TELL, "img")])
        assert outcomes == {"img": False}


class TestWcag:
    def test_violations_deduplicated_in_order(self) -> None:
        violations = collect_wcag_violations(
            [
                result("a", Outcome.FAILED, criteria=("WCAG2.1:2.4.6", "WCAG2.1:1.3.1")),
                result("b", Outcome.PASSED, criteria=("WCAG2.1:1.1.1",)),
                result("c", Outcome.FAILED, criteria=("WCAG2.1:1.3.1",)),
            ]
        )
        assert violations == ["WCAG2.1:2.4.6", "WCAG2.1:1.3.1"]

    def test_no_violations_is_fully_compliant(self) -> None:
        compliance = wcag_compliance([])
        assert compliance.level_a and compliance.level_aa and compliance.level_aaa

    def test_any_violation_clears_every_level(self) -> None:
        compliance = wcag_compliance(["WCAG2.1:1.4.3"])
        assert not compliance.level_a
        assert not compliance.level_aa
        assert not compliance.level_aaa

    def test_compliance_serializes_with_level_names(self) -> None:
        dumped = wcag_compliance([]).model_dump(by_alias=True)
        assert dumped == {"A": True, "AA": True, "AAA": True}


class TestSummary:
    def test_counts(self) -> None:
        summary = summarize(
            [
                result("alt", Outcome.PASSED, "#a"),
                result("alt", Outcome.FAILED, "#b", ("WCAG2.1:1.1.1",)),
                result("lang", Outcome.PASSED),
                result("tables", Outcome.INAPPLICABLE),
                result("focus", Outcome.CANT_TELL, "#c"),
            ]
        )
        assert summary.rules.total == 4
        assert summary.rules.passed == 1
        assert summary.rules.failed == 1
        assert summary.rules.inapplicable == 1
        assert summary.rules.cant_tell == 1
        assert summary.elements.total == 3
        assert summary.elements.passed == 1
        assert summary.elements.failed == 2
        assert summary.wcag_violations == ("WCAG2.1:1.1.1",)

    def test_adding_a_failure_never_improves_outcome(self) -> None:
        results = [result("alt", Outcome.PASSED, "#a")]
        before = summarize(results)
        after = summarize([*results, result("alt", Outcome.FAILED, "#a")])
        assert after.rules.failed >= before.rules.failed
        assert after.elements.passed <= before.elements.passed


class TestCreateReport:
    def test_empty_report(self) -> None:
        report = create_report([], url="https://example.com")
        assert report.summary.rules.total == 0
        assert report.results == ()
        assert report.metadata["url"] == "https://example.com"
        assert report.metadata["tool_name"] == "actkit"
        datetime.fromisoformat(report.metadata["timestamp"])

    def test_default_version_comes_from_package(self) -> None:
        from actkit import __version__

        assert create_report([]).metadata["tool_version"] == __version__

    def test_results_are_kept_in_order(self) -> None:
        results = [result("b", Outcome.PASSED), result("a", Outcome.FAILED)]
        report = create_report(results, tool_name="auditor", tool_version="1.2")
        assert [r.rule.id for r in report.results] == ["b", "a"]
        assert report.metadata["tool_version"] == "1.2"

    def test_to_json_uses_aliases(self) -> None:
        payload = create_report([]).to_json()
        assert '"AA": true' in payload
