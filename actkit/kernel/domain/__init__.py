"""Domain layer exports."""

from actkit.kernel.domain.models import (
    ElementInfo,
    LegacySeverity,
    Outcome,
    Report,
    ReportSummary,
    RuleCategory,
    RuleRef,
    RuleResult,
    Severity,
    map_severity,
)

__all__ = [
    "ElementInfo",
    "LegacySeverity",
    "Outcome",
    "Report",
    "ReportSummary",
    "RuleCategory",
    "RuleRef",
    "RuleResult",
    "Severity",
    "map_severity",
]
