"""Legacy suite DSL, its rule adapter, and the suites shipped with actkit."""

from actkit.builtin.suites.adapter import convert_suite_to_act_rule, suite_rule_id
from actkit.builtin.suites.alt_text import alt_suite
from actkit.builtin.suites.dsl import CaseMeta, CaseVerdict, Signal, Suite, SuiteBuilder, suite
from actkit.builtin.suites.headings import heading_suite
from actkit.builtin.suites.interactive import interactive_suite
from actkit.kernel.domain.models import RuleCategory
from actkit.kernel.domain.rule import RuleDefinition
from actkit.kernel.registry import RuleRegistry, register_act_rule


def builtin_suite_rules() -> list[RuleDefinition]:
    """Convert the bundled suites into rule definitions."""
    return [
        convert_suite_to_act_rule(
            heading_suite,
            ["1.3.1", "2.4.6"],
            [RuleCategory.HEADINGS, RuleCategory.STRUCTURE],
            "https://www.w3.org/WAI/WCAG21/Understanding/info-and-relationships.html",
        ),
        convert_suite_to_act_rule(
            alt_suite,
            ["1.1.1"],
            [RuleCategory.IMAGES],
            "https://www.w3.org/WAI/WCAG21/Understanding/non-text-content.html",
        ),
        convert_suite_to_act_rule(
            interactive_suite,
            ["2.1.1", "4.1.2"],
            [RuleCategory.INTERACTIVE, RuleCategory.KEYBOARD],
            "https://www.w3.org/WAI/WCAG21/Understanding/keyboard.html",
        ),
    ]


def register_builtin_suites(registry: RuleRegistry) -> RuleRegistry:
    for rule in builtin_suite_rules():
        register_act_rule(registry, rule)
    return registry


__all__ = [
    "CaseMeta",
    "CaseVerdict",
    "Signal",
    "Suite",
    "SuiteBuilder",
    "alt_suite",
    "builtin_suite_rules",
    "convert_suite_to_act_rule",
    "heading_suite",
    "interactive_suite",
    "register_builtin_suites",
    "suite",
    "suite_rule_id",
]
