"""actkit kernel: the public API of the rule engine.

Code outside the kernel (``actkit.builtin``, ``actkit.cli`` and user
applications) should import from here rather than from kernel submodules.

The exports are grouped by concern:
- Rule definition and execution
- Domain types
- Port protocols
- Registry
- Reporting
- WCAG reference data
- Exceptions
- Logging
"""

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
from actkit.kernel.domain.rule import (
    CancellationToken,
    RuleContext,
    RuleDefinition,
    RuleMetadata,
    create_act_rule,
    rule_summary,
)
from actkit.kernel.exceptions import (
    ActKitError,
    ConfigurationError,
    DocumentLoadError,
    DuplicateRuleError,
    OperationCancelledError,
    ResourceNotFoundError,
    RuleExecutionError,
    RuleTimeoutError,
    SelectorSyntaxError,
    ValidationError,
)
from actkit.kernel.logging import configure_logging, get_logger
from actkit.kernel.orchestration.runner import DEFAULT_RULE_TIMEOUT, RuleRunner, RuleState
from actkit.kernel.ports import DocumentPort, ElementPort, EventBus
from actkit.kernel.registry import (
    DuplicatePolicy,
    KeepFirst,
    RejectDuplicates,
    RuleRegistry,
    WarnAndOverwrite,
    register_act_rule,
)
from actkit.kernel.reporting import create_report, format_act_result, log_results
from actkit.kernel.selectors import get_unique_selector, get_valid_selector
from actkit.kernel.wcag import WCAG_CRITERIA, get_wcag_reference, get_wcag_references

__all__ = [
    # Rule definition and execution
    "CancellationToken",
    "DEFAULT_RULE_TIMEOUT",
    "RuleContext",
    "RuleDefinition",
    "RuleMetadata",
    "RuleRunner",
    "RuleState",
    "create_act_rule",
    "rule_summary",
    # Domain types
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
    # Ports
    "DocumentPort",
    "ElementPort",
    "EventBus",
    # Registry
    "DuplicatePolicy",
    "KeepFirst",
    "RejectDuplicates",
    "RuleRegistry",
    "WarnAndOverwrite",
    "register_act_rule",
    # Reporting
    "create_report",
    "format_act_result",
    "log_results",
    "get_unique_selector",
    "get_valid_selector",
    # WCAG
    "WCAG_CRITERIA",
    "get_wcag_reference",
    "get_wcag_references",
    # Exceptions
    "ActKitError",
    "ConfigurationError",
    "DocumentLoadError",
    "DuplicateRuleError",
    "OperationCancelledError",
    "ResourceNotFoundError",
    "RuleExecutionError",
    "RuleTimeoutError",
    "SelectorSyntaxError",
    "ValidationError",
    # Logging
    "configure_logging",
    "get_logger",
]
