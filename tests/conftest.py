"""Configuration file for pytest containing shared fixtures.

This module provides fixtures that can be used across multiple test files:
- make_document: builds an HtmlDocument from a markup fragment
- run_rule: runs a single rule definition against markup and returns its results
- registry: an empty rule registry with the default duplicate policy
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

import pytest

from actkit.builtin.adapters.html import HtmlDocument
from actkit.kernel.domain.models import RuleResult
from actkit.kernel.domain.rule import RuleDefinition
from actkit.kernel.orchestration.runner import RuleRunner
from actkit.kernel.registry import RuleRegistry

RunRule = Callable[[RuleDefinition, str], Awaitable[list[RuleResult]]]


@pytest.fixture
def make_document() -> Callable[..., HtmlDocument]:
    """Fixture that parses markup into a document."""

    def _make(markup: str, url: str | None = "https://example.com/page") -> HtmlDocument:
        return HtmlDocument.from_string(markup, url=url)

    return _make


@pytest.fixture
def registry() -> RuleRegistry:
    return RuleRegistry()


@pytest.fixture
def run_rule(make_document: Callable[..., HtmlDocument]) -> RunRule:
    """Fixture that runs one rule through a runner and returns what it reported.

    Inapplicable rules return an empty list.
    """

    async def _run(rule: RuleDefinition, markup: str) -> list[RuleResult]:
        registry = RuleRegistry()
        registry.register(rule)
        runner = RuleRunner(registry, make_document(markup))
        await runner.run_rule(rule.id)
        return runner.get_results()

    return _run
