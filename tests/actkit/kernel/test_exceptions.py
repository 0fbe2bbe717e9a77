"""Tests for the actkit exception hierarchy."""

import pytest

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


class TestExceptionHierarchy:
    """Every engine error derives from ActKitError."""

    @pytest.mark.parametrize(
        "error",
        [
            ConfigurationError("runner", "bad"),
            ValidationError("field", "constraint"),
            ResourceNotFoundError("rule", "missing"),
            DuplicateRuleError("dup"),
            RuleExecutionError("r", "boom"),
            RuleTimeoutError("r", 30.0),
            OperationCancelledError(),
            SelectorSyntaxError("a[", "unterminated"),
            DocumentLoadError("page.html", "missing"),
        ],
    )
    def test_is_actkit_error(self, error: Exception) -> None:
        assert isinstance(error, ActKitError)

    def test_timeout_is_execution_error(self) -> None:
        error = RuleTimeoutError("heading-order", 30.0)
        assert isinstance(error, RuleExecutionError)
        assert error.timeout == 30.0
        assert "timed out after 30.0s" in str(error)


class TestMessages:
    """Tests for message formatting."""

    def test_configuration_error(self) -> None:
        error = ConfigurationError("runner", "rule_timeout must be positive")
        assert str(error) == "Configuration error in 'runner': rule_timeout must be positive"
        assert error.component == "runner"

    def test_validation_error_with_value(self) -> None:
        error = ValidationError("severity", "unknown", value="Urgent")
        assert str(error) == "Validation failed for 'severity': unknown (got 'Urgent')"

    def test_validation_error_without_value(self) -> None:
        assert str(ValidationError("id", "required")) == "Validation failed for 'id': required"

    def test_resource_not_found_truncates_available(self) -> None:
        error = ResourceNotFoundError("rule", "x", [f"r{i}" for i in range(8)])
        assert "Available: r0, r1, r2, r3, r4" in str(error)
        assert "... and 3 more" in str(error)

    def test_cancelled_reason(self) -> None:
        error = OperationCancelledError("timeout")
        assert error.reason == "timeout"
        assert str(error) == "Operation cancelled: timeout"
