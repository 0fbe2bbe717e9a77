"""Core exception hierarchy for actkit.

All actkit-specific exceptions inherit from ActKitError so callers can
handle every engine failure with a single ``except`` clause.
"""

from __future__ import annotations

# ============================================================================
# Base Exception
# ============================================================================


class ActKitError(Exception):
    """Base exception for all actkit errors."""

    pass


# ============================================================================
# Configuration & Validation Errors
# ============================================================================


class ConfigurationError(ActKitError):
    """Raised when configuration is invalid or missing.

    Examples
    --------
    Example usage::

        raise ConfigurationError("runner", "rule_timeout must be positive")
    """

    def __init__(self, component: str, reason: str) -> None:
        """Initialize configuration error.

        Args
        ----
            component: Name of the component with invalid configuration
            reason: Explanation of what's wrong
        """
        super().__init__(f"Configuration error in '{component}': {reason}")
        self.component = component
        self.reason = reason


class ValidationError(ActKitError):
    """Raised when data validation fails.

    Examples
    --------
    Example usage::

        raise ValidationError("severity", "unknown legacy severity", value="Urgent")
    """

    def __init__(self, field: str, constraint: str, value: object = None) -> None:
        """Initialize validation error.

        Args
        ----
            field: Name of the field that failed validation
            constraint: Description of the validation constraint
            value: The invalid value (optional)
        """
        if value is not None:
            msg = f"Validation failed for '{field}': {constraint} (got {value!r})"
        else:
            msg = f"Validation failed for '{field}': {constraint}"
        super().__init__(msg)
        self.field = field
        self.constraint = constraint
        self.value = value


# ============================================================================
# Resource & Registry Errors
# ============================================================================


class ResourceNotFoundError(ActKitError):
    """Raised when a required resource cannot be found.

    Examples
    --------
    Example usage::

        raise ResourceNotFoundError("rule", "heading-order", ["page-has-h1"])
    """

    def __init__(
        self, resource_type: str, resource_id: str, available: list[str] | None = None
    ) -> None:
        """Initialize resource not found error.

        Args
        ----
            resource_type: Type of resource (e.g., "rule", "document", "test type")
            resource_id: Identifier of the missing resource
            available: List of available resources (optional)
        """
        msg = f"{resource_type.title()} '{resource_id}' not found"
        if available:
            msg += f". Available: {', '.join(available[:5])}"
            if len(available) > 5:
                msg += f" ... and {len(available) - 5} more"
        super().__init__(msg)
        self.resource_type = resource_type
        self.resource_id = resource_id
        self.available = available


class DuplicateRuleError(ActKitError):
    """Raised by a rejecting registry when a rule id is registered twice."""

    def __init__(self, rule_id: str) -> None:
        super().__init__(f"Rule '{rule_id}' is already registered")
        self.rule_id = rule_id


# ============================================================================
# Execution Errors
# ============================================================================


class RuleExecutionError(ActKitError):
    """Raised when a rule's execute procedure fails.

    The runner never lets this escape a grouped run; it is logged and the
    rule transitions to the errored state.
    """

    def __init__(self, rule_id: str, reason: str) -> None:
        super().__init__(f"Rule '{rule_id}' failed: {reason}")
        self.rule_id = rule_id
        self.reason = reason


class RuleTimeoutError(RuleExecutionError):
    """Raised when a rule exceeds its wall-clock budget."""

    def __init__(self, rule_id: str, timeout: float) -> None:
        super().__init__(rule_id, f"timed out after {timeout}s")
        self.timeout = timeout


class OperationCancelledError(ActKitError):
    """Raised by ``CancellationToken.raise_if_cancelled`` once cancelled."""

    def __init__(self, reason: str = "cancelled") -> None:
        super().__init__(f"Operation cancelled: {reason}")
        self.reason = reason


# ============================================================================
# Document Errors
# ============================================================================


class SelectorSyntaxError(ActKitError):
    """Raised when a CSS selector cannot be parsed."""

    def __init__(self, selector: str, reason: str) -> None:
        super().__init__(f"Invalid selector {selector!r}: {reason}")
        self.selector = selector
        self.reason = reason


class DocumentLoadError(ActKitError):
    """Raised when a document source cannot be read or rendered."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"Could not load document '{source}': {reason}")
        self.source = source
        self.reason = reason


__all__ = [
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
]
