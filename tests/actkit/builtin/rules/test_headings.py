"""Tests for heading structure rules."""

from __future__ import annotations

import pytest

from actkit.builtin.rules.headings import (
    first_heading_is_h1_rule,
    has_h1_rule,
    heading_accessible_name_rule,
    heading_order_rule,
    single_h1_rule,
)
from actkit.kernel.domain.models import Outcome, Severity


def outcomes(results) -> list[Outcome]:
    return [r.outcome for r in results]


class TestHeadingOrder:
    """heading-order reports each heading after the first."""

    @pytest.mark.asyncio
    async def test_skipped_level_fails(self, run_rule) -> None:
        results = await run_rule(heading_order_rule, "<h1>A</h1><h3>B</h3>")
        [result] = results
        assert result.outcome == Outcome.FAILED
        assert "h1 is followed by h3" in result.message
        assert result.impact == Severity.SERIOUS
        assert result.wcag_criteria == ("WCAG2.1:1.3.1", "WCAG2.1:2.4.6")

    @pytest.mark.asyncio
    async def test_returning_to_higher_level_passes(self, run_rule) -> None:
        results = await run_rule(heading_order_rule, "<h1>A</h1><h2>B</h2><h1>C</h1><h2>D</h2>")
        assert outcomes(results) == [Outcome.PASSED] * 3

    @pytest.mark.asyncio
    async def test_decreasing_first_pair_passes(self, run_rule) -> None:
        results = await run_rule(heading_order_rule, "<h2>A</h2><h1>B</h1>")
        assert outcomes(results) == [Outcome.PASSED]

    @pytest.mark.asyncio
    async def test_nesting_under_skipped_level_fails(self, run_rule) -> None:
        results = await run_rule(
            heading_order_rule, "<h1>A</h1><h3>B</h3><h4>C</h4><h2>D</h2>"
        )
        assert outcomes(results) == [Outcome.FAILED, Outcome.FAILED, Outcome.PASSED]
        assert "expected at most h2" in results[1].message

    @pytest.mark.asyncio
    async def test_aria_level_is_used(self, run_rule) -> None:
        results = await run_rule(
            heading_order_rule, '<h1>A</h1><div role="heading" aria-level="4">B</div>'
        )
        assert outcomes(results) == [Outcome.FAILED]

    @pytest.mark.asyncio
    async def test_single_heading_is_inapplicable(self, run_rule) -> None:
        assert await run_rule(heading_order_rule, "<h1>A</h1>") == []


class TestFirstHeading:
    @pytest.mark.asyncio
    async def test_starts_with_h1(self, run_rule) -> None:
        [result] = await run_rule(first_heading_is_h1_rule, "<h1>A</h1><h2>B</h2>")
        assert result.outcome == Outcome.PASSED

    @pytest.mark.asyncio
    async def test_starts_with_h2(self, run_rule) -> None:
        [result] = await run_rule(first_heading_is_h1_rule, "<h2>A</h2><h1>B</h1>")
        assert result.outcome == Outcome.FAILED
        assert result.impact == Severity.CRITICAL
        assert result.message == "Document starts with h2 - should start with h1"

    @pytest.mark.asyncio
    async def test_no_headings_is_inapplicable(self, run_rule) -> None:
        assert await run_rule(first_heading_is_h1_rule, "<p>text</p>") == []


class TestHeadingNames:
    @pytest.mark.asyncio
    async def test_empty_heading_fails(self, run_rule) -> None:
        results = await run_rule(
            heading_accessible_name_rule, '<h1>Welcome</h1><h2 id="empty"> </h2>'
        )
        assert outcomes(results) == [Outcome.PASSED, Outcome.FAILED]
        assert results[1].selector == "#empty"
        assert results[1].remediation == "Give the heading visible text content or an aria-label."

    @pytest.mark.asyncio
    async def test_aria_label_names_heading(self, run_rule) -> None:
        [result] = await run_rule(heading_accessible_name_rule, '<h1 aria-label="Intro"></h1>')
        assert result.outcome == Outcome.PASSED


class TestH1Presence:
    @pytest.mark.asyncio
    async def test_missing_h1(self, run_rule) -> None:
        [result] = await run_rule(has_h1_rule, "<body><h2>Only</h2></body>")
        assert result.outcome == Outcome.FAILED
        assert result.element is not None
        assert result.element.html_snippet == "<body>"

    @pytest.mark.asyncio
    async def test_aria_h1_counts(self, run_rule) -> None:
        [result] = await run_rule(has_h1_rule, '<div role="heading" aria-level="1">Top</div>')
        assert result.outcome == Outcome.PASSED

    @pytest.mark.asyncio
    async def test_single_h1(self, run_rule) -> None:
        [result] = await run_rule(single_h1_rule, "<h1>A</h1><h2>B</h2>")
        assert result.outcome == Outcome.PASSED

    @pytest.mark.asyncio
    async def test_two_h1s(self, run_rule) -> None:
        [result] = await run_rule(single_h1_rule, "<h1>A</h1><h1>B</h1>")
        assert result.outcome == Outcome.FAILED
        assert result.message == "Page has 2 h1 headings - should have exactly one"

    @pytest.mark.asyncio
    async def test_no_h1_fails_single_check(self, run_rule) -> None:
        [result] = await run_rule(single_h1_rule, "<p>none</p>")
        assert result.outcome == Outcome.FAILED
