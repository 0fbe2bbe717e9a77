"""Tests for rule definitions, contexts and cancellation tokens."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from actkit.kernel.domain.models import Outcome, RuleCategory, RuleResult, Severity
from actkit.kernel.domain.rule import (
    CancellationToken,
    RuleContext,
    create_act_rule,
    rule_summary,
)
from actkit.kernel.exceptions import OperationCancelledError, ValidationError
from actkit.kernel.wcag import get_wcag_reference

if TYPE_CHECKING:
    from collections.abc import Callable

    from actkit.builtin.adapters.html import HtmlDocument


def _noop(ctx: RuleContext) -> None:
    return None


class TestCancellationToken:
    """Tests for cooperative cancellation."""

    def test_initial_state(self) -> None:
        token = CancellationToken()
        assert not token.cancelled
        assert token.reason is None
        token.raise_if_cancelled()

    def test_cancel_sets_reason_once(self) -> None:
        token = CancellationToken()
        token.cancel("timeout")
        token.cancel("second")
        assert token.cancelled
        assert token.reason == "timeout"
        with pytest.raises(OperationCancelledError, match="timeout"):
            token.raise_if_cancelled()

    def test_child_follows_parent(self) -> None:
        parent = CancellationToken()
        child = parent.child()
        parent.cancel("run aborted")
        assert child.cancelled
        assert child.reason == "run aborted"

    def test_cancelling_child_leaves_parent(self) -> None:
        parent = CancellationToken()
        child = parent.child()
        child.cancel("element budget")
        assert child.cancelled
        assert not parent.cancelled


class TestCreateActRule:
    """Tests for create_act_rule."""

    def test_metadata(self) -> None:
        rule = create_act_rule(
            "page-has-title",
            "Page has a title",
            "The document must have a title",
            categories=["structure"],
            wcag_requirements=get_wcag_reference("2.4.2"),
            execute=_noop,
            help_url="https://example.com/help",
        )
        assert rule.id == "page-has-title"
        assert rule.metadata.categories == frozenset({RuleCategory.STRUCTURE})
        assert rule.metadata.wcag_criteria == ("WCAG2.1:2.4.2",)
        assert rule.metadata.help_url == "https://example.com/help"

    def test_defaults_to_always_applicable(self, make_document: Callable[..., HtmlDocument]) -> None:
        rule = create_act_rule("r", "R", "d", execute=_noop)
        assert rule.is_applicable(make_document("<p>x</p>")) is True

    def test_empty_id_rejected(self) -> None:
        with pytest.raises(ValidationError):
            create_act_rule("  ", "R", "d", execute=_noop)

    def test_unknown_category_rejected(self) -> None:
        with pytest.raises(ValueError):
            create_act_rule("r", "R", "d", execute=_noop, categories=["weather"])

    def test_summary(self) -> None:
        rule = create_act_rule(
            "r",
            "R",
            "d",
            execute=_noop,
            categories=[RuleCategory.LINKS, RuleCategory.ARIA],
            wcag_requirements=get_wcag_reference("2.4.4"),
        )
        summary = rule_summary(rule)
        assert summary["categories"] == ["aria", "links"]
        assert summary["wcag"] == ["WCAG2.1:2.4.4"]


class TestRuleContext:
    """Tests for RuleContext reporting."""

    @pytest.fixture
    def collected(self) -> list[RuleResult]:
        return []

    @pytest.fixture
    def context(
        self, make_document: Callable[..., HtmlDocument], collected: list[RuleResult]
    ) -> RuleContext:
        rule = create_act_rule(
            "r",
            "Rule",
            "d",
            execute=_noop,
            wcag_requirements=get_wcag_reference("1.1.1"),
            help_url="https://example.com/r",
        )
        document = make_document('<img id="logo" src="a.png"><p>text</p>')
        return RuleContext(rule, document, collected.append)

    def test_report_uses_rule_defaults(
        self, context: RuleContext, collected: list[RuleResult]
    ) -> None:
        element = context.document.query("img")
        result = context.report(element, False, "Missing alt", impact=Severity.CRITICAL)
        assert collected == [result]
        assert result.outcome == Outcome.FAILED
        assert result.impact == Severity.CRITICAL
        assert result.wcag_criteria == ("WCAG2.1:1.1.1",)
        assert result.help_url == "https://example.com/r"
        assert result.selector == "#logo"
        assert context.emitted == 1

    def test_page_level_result(self, context: RuleContext) -> None:
        result = context.report(None, Outcome.PASSED, "Page ok")
        assert result.element is None
        assert result.impact is None

    def test_closed_context_drops_results(
        self, context: RuleContext, collected: list[RuleResult]
    ) -> None:
        context.close()
        context.report(None, True, "late")
        assert collected == []
        assert context.emitted == 0

    @pytest.mark.asyncio
    async def test_checkpoint_raises_when_cancelled(self, context: RuleContext) -> None:
        await context.checkpoint()
        context.token.cancel("stop")
        assert context.cancelled
        with pytest.raises(OperationCancelledError):
            await context.checkpoint()
