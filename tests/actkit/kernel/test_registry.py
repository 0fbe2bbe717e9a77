"""Tests for the rule registry and duplicate policies."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from actkit.kernel.domain.models import RuleCategory
from actkit.kernel.domain.rule import RuleContext, RuleDefinition, create_act_rule
from actkit.kernel.exceptions import DuplicateRuleError, ResourceNotFoundError
from actkit.kernel.registry import (
    KeepFirst,
    RejectDuplicates,
    RuleRegistry,
    WarnAndOverwrite,
    duplicate_policy_from_name,
    register_act_rule,
)
from actkit.kernel.wcag import get_wcag_references

if TYPE_CHECKING:
    from collections.abc import Callable

    from actkit.builtin.adapters.html import HtmlDocument


def _noop(ctx: RuleContext) -> None:
    return None


def make_rule(
    rule_id: str,
    name: str = "Rule",
    categories: tuple[RuleCategory, ...] = (),
    criteria: tuple[str, ...] = (),
    is_applicable=None,
) -> RuleDefinition:
    return create_act_rule(
        rule_id,
        name,
        "description",
        execute=_noop,
        categories=categories,
        wcag_requirements=get_wcag_references(*criteria),
        is_applicable=is_applicable,
    )


class TestRegistration:
    """Tests for register and lookups."""

    def test_register_and_get(self, registry: RuleRegistry) -> None:
        rule = register_act_rule(registry, make_rule("a"))
        assert registry.get_rule("a") is rule
        assert "a" in registry
        assert len(registry) == 1

    def test_unknown_rule(self, registry: RuleRegistry) -> None:
        assert registry.get_rule("missing") is None
        with pytest.raises(ResourceNotFoundError):
            registry.require_rule("missing")

    def test_registration_order(self, registry: RuleRegistry) -> None:
        registry.register_many([make_rule("b"), make_rule("a"), make_rule("c")])
        assert [rule.id for rule in registry] == ["b", "a", "c"]

    def test_clear(self, registry: RuleRegistry) -> None:
        registry.register(make_rule("a"))
        registry.clear()
        assert registry.get_all_rules() == []


class TestDuplicatePolicies:
    """Tests for the injectable duplicate policy."""

    def test_default_overwrites_in_place(self, registry: RuleRegistry) -> None:
        assert isinstance(registry.duplicate_policy, WarnAndOverwrite)
        registry.register(make_rule("a", name="First"))
        registry.register(make_rule("b"))
        registry.register(make_rule("a", name="Second"))
        assert registry.require_rule("a").name == "Second"
        assert [rule.id for rule in registry] == ["a", "b"]

    def test_keep_first(self) -> None:
        registry = RuleRegistry(KeepFirst())
        registry.register(make_rule("a", name="First"))
        registry.register(make_rule("a", name="Second"))
        assert registry.require_rule("a").name == "First"

    def test_reject(self) -> None:
        registry = RuleRegistry(RejectDuplicates())
        registry.register(make_rule("a"))
        with pytest.raises(DuplicateRuleError):
            registry.register(make_rule("a"))

    def test_policy_from_name(self) -> None:
        assert isinstance(duplicate_policy_from_name("keep"), KeepFirst)
        assert isinstance(duplicate_policy_from_name("reject"), RejectDuplicates)
        with pytest.raises(ResourceNotFoundError):
            duplicate_policy_from_name("explode")

    def test_registries_are_independent(self) -> None:
        first, second = RuleRegistry(), RuleRegistry()
        first.register(make_rule("a"))
        assert "a" not in second


class TestFiltering:
    """Tests for category, criterion and applicability lookups."""

    @pytest.fixture
    def populated(self, registry: RuleRegistry) -> RuleRegistry:
        registry.register(make_rule("lang", categories=(RuleCategory.LANGUAGE,), criteria=("3.1.1",)))
        registry.register(make_rule("parts", categories=(RuleCategory.LANGUAGE,), criteria=("3.1.2",)))
        registry.register(
            make_rule("headings", categories=(RuleCategory.HEADINGS,), criteria=("1.3.1", "2.4.6"))
        )
        return registry

    def test_by_category(self, populated: RuleRegistry) -> None:
        assert [r.id for r in populated.get_rules_by_category(RuleCategory.LANGUAGE)] == [
            "lang",
            "parts",
        ]
        assert [r.id for r in populated.get_rules_by_category("headings")] == ["headings"]

    def test_unknown_category_matches_nothing(self, populated: RuleRegistry) -> None:
        assert populated.get_rules_by_category("weather") == []

    def test_by_wcag_substring(self, populated: RuleRegistry) -> None:
        # plain substring match: "3.1" also hits the "1.3.1" in WCAG2.1:1.3.1
        assert [r.id for r in populated.get_rules_by_wcag_criteria("3.1")] == [
            "lang",
            "parts",
            "headings",
        ]
        assert [r.id for r in populated.get_rules_by_wcag_criteria(":3.1.")] == ["lang", "parts"]
        assert [r.id for r in populated.get_rules_by_wcag_criteria("3.1.2")] == ["parts"]
        assert [r.id for r in populated.get_rules_by_wcag_criteria("2.4.6")] == ["headings"]
        assert populated.get_rules_by_wcag_criteria("1.1.1") == []

    def test_applicable_rules(
        self, registry: RuleRegistry, make_document: Callable[..., HtmlDocument]
    ) -> None:
        def has_images(document) -> bool:
            return document.query("img") is not None

        def broken(document) -> bool:
            raise RuntimeError("boom")

        registry.register(make_rule("images", is_applicable=has_images))
        registry.register(make_rule("broken", is_applicable=broken))
        registry.register(make_rule("always"))

        document = make_document("<p>No images</p>")
        assert [r.id for r in registry.get_applicable_rules(document)] == ["always"]
