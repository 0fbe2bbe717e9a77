"""Built-in ACT rules.

Rules are plain :class:`~actkit.kernel.domain.rule.RuleDefinition` values;
nothing is registered on import. Call :func:`register_builtin_rules` with the
registry that should own them::

    registry = RuleRegistry()
    register_builtin_rules(registry)
"""

from actkit.builtin.rules.autocomplete import AUTOCOMPLETE_RULES, is_valid_autocomplete
from actkit.builtin.rules.focus import FOCUS_RULES
from actkit.builtin.rules.forms import FORM_RULES, find_label
from actkit.builtin.rules.headings import HEADING_RULES
from actkit.builtin.rules.images import IMAGE_RULES, alt_quality_problem
from actkit.builtin.rules.language import LANGUAGE_RULES, is_valid_language_tag
from actkit.builtin.rules.links import LINK_RULES
from actkit.builtin.rules.roles import ROLE_RULES
from actkit.kernel.domain.rule import RuleDefinition
from actkit.kernel.registry import RuleRegistry, register_act_rule

BUILTIN_RULES: tuple[RuleDefinition, ...] = (
    *HEADING_RULES,
    *LINK_RULES,
    *IMAGE_RULES,
    *FORM_RULES,
    *AUTOCOMPLETE_RULES,
    *ROLE_RULES,
    *LANGUAGE_RULES,
    *FOCUS_RULES,
)


def register_builtin_rules(registry: RuleRegistry) -> RuleRegistry:
    """Register every built-in rule on ``registry`` and return it."""
    for rule in BUILTIN_RULES:
        register_act_rule(registry, rule)
    return registry


__all__ = [
    "AUTOCOMPLETE_RULES",
    "BUILTIN_RULES",
    "FOCUS_RULES",
    "FORM_RULES",
    "HEADING_RULES",
    "IMAGE_RULES",
    "LANGUAGE_RULES",
    "LINK_RULES",
    "ROLE_RULES",
    "alt_quality_problem",
    "find_label",
    "is_valid_autocomplete",
    "is_valid_language_tag",
    "register_builtin_rules",
]
