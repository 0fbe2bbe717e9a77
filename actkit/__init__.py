"""actkit: an ACT rule engine for WCAG accessibility audits.

Rules inspect a document through a small DOM port, report one result per
element, and are aggregated into a report with WCAG compliance flags.
"""

from typing import TYPE_CHECKING, Any

# Version is defined in pyproject.toml and read dynamically
try:
    from importlib.metadata import version

    __version__ = version("actkit")
except Exception:
    __version__ = "0.0.0.dev0"  # Fallback for development installs

from actkit.kernel import (
    CancellationToken,
    Outcome,
    Report,
    RuleCategory,
    RuleDefinition,
    RuleRegistry,
    RuleResult,
    RuleRunner,
    Severity,
    create_act_rule,
    register_act_rule,
)

if TYPE_CHECKING:
    from actkit.builtin.adapters.browser import load_live_document
    from actkit.builtin.adapters.html import HtmlDocument
    from actkit.builtin.adapters.local.local_event_bus import LocalEventBus
    from actkit.builtin.rules import register_builtin_rules
    from actkit.builtin.suites import register_builtin_suites


# Lazy loading for built-in adapters and rule sets
def __getattr__(name: str) -> Any:
    """Lazy import for built-in components.

    Raises
    ------
    AttributeError
        If the requested attribute does not exist
    """
    if name == "HtmlDocument":
        from actkit.builtin.adapters.html import HtmlDocument as _HtmlDocument

        return _HtmlDocument
    if name == "LocalEventBus":
        from actkit.builtin.adapters.local.local_event_bus import LocalEventBus as _LocalEventBus

        return _LocalEventBus
    if name == "load_live_document":
        from actkit.builtin.adapters.browser import load_live_document as _load_live_document

        return _load_live_document
    if name == "register_builtin_rules":
        from actkit.builtin.rules import register_builtin_rules as _register_builtin_rules

        return _register_builtin_rules
    if name == "register_builtin_suites":
        from actkit.builtin.suites import register_builtin_suites as _register_builtin_suites

        return _register_builtin_suites

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "__version__",
    # Core engine
    "CancellationToken",
    "RuleDefinition",
    "RuleRegistry",
    "RuleRunner",
    "create_act_rule",
    "register_act_rule",
    # Results
    "Outcome",
    "Report",
    "RuleCategory",
    "RuleResult",
    "Severity",
    # Built-ins (lazy)
    "HtmlDocument",
    "LocalEventBus",
    "load_live_document",
    "register_builtin_rules",
    "register_builtin_suites",
]
