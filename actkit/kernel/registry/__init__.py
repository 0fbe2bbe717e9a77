"""Rule registry and duplicate-registration policies."""

from actkit.kernel.registry.registry import (
    DuplicatePolicy,
    KeepFirst,
    RejectDuplicates,
    RuleRegistry,
    WarnAndOverwrite,
    duplicate_policy_from_name,
    register_act_rule,
)

__all__ = [
    "DuplicatePolicy",
    "KeepFirst",
    "RejectDuplicates",
    "RuleRegistry",
    "WarnAndOverwrite",
    "duplicate_policy_from_name",
    "register_act_rule",
]
