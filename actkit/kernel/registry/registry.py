"""Rule registry: keyed storage of rule definitions with lookup helpers."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Protocol

from actkit.kernel.domain.models import RuleCategory
from actkit.kernel.domain.rule import RuleDefinition
from actkit.kernel.exceptions import DuplicateRuleError, ResourceNotFoundError
from actkit.kernel.logging import get_logger
from actkit.kernel.ports.document import DocumentPort

logger = get_logger(__name__)


# ============================================================================
# Duplicate Policies
# ============================================================================


class DuplicatePolicy(Protocol):
    """Decides what happens when a rule id is registered twice."""

    def on_duplicate(self, existing: RuleDefinition, incoming: RuleDefinition) -> bool:
        """Return True to replace ``existing`` with ``incoming``, False to keep it.

        Implementations may raise to reject the registration outright.
        """
        ...


class WarnAndOverwrite:
    """Last registration wins; a warning is logged."""

    def on_duplicate(self, existing: RuleDefinition, incoming: RuleDefinition) -> bool:
        logger.warning(
            "Rule with ID {rule_id} already registered. Overwriting.", rule_id=incoming.id
        )
        return True


class KeepFirst:
    """First registration wins; later ones are ignored with a warning."""

    def on_duplicate(self, existing: RuleDefinition, incoming: RuleDefinition) -> bool:
        logger.warning(
            "Rule with ID {rule_id} already registered. Keeping existing rule.",
            rule_id=incoming.id,
        )
        return False


class RejectDuplicates:
    """Duplicate registrations raise :class:`DuplicateRuleError`."""

    def on_duplicate(self, existing: RuleDefinition, incoming: RuleDefinition) -> bool:
        raise DuplicateRuleError(incoming.id)


DUPLICATE_POLICIES: dict[str, type[DuplicatePolicy]] = {
    "warn": WarnAndOverwrite,
    "keep": KeepFirst,
    "reject": RejectDuplicates,
}


def duplicate_policy_from_name(name: str) -> DuplicatePolicy:
    """Instantiate a duplicate policy by its config name."""
    try:
        return DUPLICATE_POLICIES[name]()
    except KeyError:
        raise ResourceNotFoundError("duplicate policy", name, list(DUPLICATE_POLICIES)) from None


# ============================================================================
# Registry
# ============================================================================


class RuleRegistry:
    """Keyed store of rule definitions owned by the host application.

    Rules are kept in registration order. Overwriting a rule keeps its
    original position.

    Parameters
    ----------
    duplicate_policy : DuplicatePolicy | None
        Strategy for repeated ids, defaults to :class:`WarnAndOverwrite`

    Examples
    --------
    Example usage::

        registry = RuleRegistry()
        registry.register(rule)
        registry.get_rules_by_wcag_criteria("3.1")
    """

    def __init__(self, duplicate_policy: DuplicatePolicy | None = None) -> None:
        self._rules: dict[str, RuleDefinition] = {}
        self._duplicate_policy = duplicate_policy or WarnAndOverwrite()

    @property
    def duplicate_policy(self) -> DuplicatePolicy:
        return self._duplicate_policy

    def register(self, rule: RuleDefinition) -> None:
        """Store ``rule`` under its id, consulting the duplicate policy on collision."""
        existing = self._rules.get(rule.id)
        if existing is not None and not self._duplicate_policy.on_duplicate(existing, rule):
            return
        self._rules[rule.id] = rule
        logger.debug("Registered ACT rule: {rule_id}", rule_id=rule.id)

    def register_many(self, rules: Iterable[RuleDefinition]) -> None:
        for rule in rules:
            self.register(rule)

    def get_rule(self, rule_id: str) -> RuleDefinition | None:
        return self._rules.get(rule_id)

    def require_rule(self, rule_id: str) -> RuleDefinition:
        """Like :meth:`get_rule` but raises when the id is unknown."""
        rule = self._rules.get(rule_id)
        if rule is None:
            raise ResourceNotFoundError("rule", rule_id, list(self._rules))
        return rule

    def get_all_rules(self) -> list[RuleDefinition]:
        return list(self._rules.values())

    def get_rules_by_category(self, category: RuleCategory | str) -> list[RuleDefinition]:
        """Rules whose categories contain ``category`` exactly.

        Unknown category names match nothing.
        """
        try:
            wanted = RuleCategory(category)
        except ValueError:
            logger.warning("Unknown rule category: {category}", category=category)
            return []
        return [rule for rule in self._rules.values() if wanted in rule.metadata.categories]

    def get_rules_by_wcag_criteria(self, criterion: str) -> list[RuleDefinition]:
        """Rules with a requirement key containing ``criterion``.

        Matching is by substring so ``"3.1"`` selects ``WCAG2.1:3.1.1`` and
        ``WCAG2.1:3.1.2``.
        """
        return [
            rule
            for rule in self._rules.values()
            if any(criterion in key for key in rule.metadata.wcag_requirements)
        ]

    def get_applicable_rules(self, document: DocumentPort) -> list[RuleDefinition]:
        """Rules whose applicability predicate holds for ``document``.

        A predicate that raises is logged and treated as not applicable.
        """
        applicable = []
        for rule in self._rules.values():
            try:
                if rule.is_applicable(document):
                    applicable.append(rule)
            except Exception as e:
                logger.error(
                    "Applicability check for rule {rule_id} failed: {error}",
                    rule_id=rule.id,
                    error=e,
                )
        return applicable

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._rules

    def __iter__(self) -> Iterator[RuleDefinition]:
        return iter(list(self._rules.values()))

    def __len__(self) -> int:
        return len(self._rules)

    def clear(self) -> None:
        """Remove every rule. Intended for tests and hot reload."""
        self._rules.clear()


def register_act_rule(registry: RuleRegistry, rule: RuleDefinition) -> RuleDefinition:
    """Register ``rule`` and return it, for use at rule-module level."""
    registry.register(rule)
    return rule
