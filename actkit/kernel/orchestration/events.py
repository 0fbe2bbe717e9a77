"""Event data classes published while rules run."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class Event:
    """Base class for all events - provides timestamp."""

    timestamp: datetime = field(default_factory=datetime.now, init=False)

    def log_message(self) -> str:
        """Get a formatted log message for this event.

        Returns
        -------
        str
            A formatted string suitable for logging
        """
        return f"{self.__class__.__name__} at {self.timestamp.isoformat()}"


# Rule lifecycle events
@dataclass(slots=True)
class RuleStarted(Event):
    """A rule has started executing."""

    rule_id: str

    def log_message(self) -> str:
        return f"Rule '{self.rule_id}' started"


@dataclass(slots=True)
class RuleCompleted(Event):
    """A rule finished and its results are recorded."""

    rule_id: str
    result_count: int
    duration_ms: float

    def log_message(self) -> str:
        return (
            f"Rule '{self.rule_id}' completed with {self.result_count} results "
            f"in {self.duration_ms:.1f}ms"
        )


@dataclass(slots=True)
class RuleFailed(Event):
    """A rule raised while executing."""

    rule_id: str
    error: str

    def log_message(self) -> str:
        return f"Rule '{self.rule_id}' failed: {self.error}"


@dataclass(slots=True)
class RuleTimedOut(Event):
    """A rule exceeded its time budget; results emitted so far are kept."""

    rule_id: str
    timeout: float
    result_count: int

    def log_message(self) -> str:
        return (
            f"Rule '{self.rule_id}' timed out after {self.timeout}s "
            f"({self.result_count} results kept)"
        )


# Output events consumed by the UI layer
@dataclass(slots=True)
class HighlightRequested(Event):
    """Ask the host UI to highlight (or clear highlights on) an element.

    ``selector="*"`` together with ``clear=True`` clears all highlights.
    """

    selector: str
    message: str
    is_valid: bool
    severity: str | None = None
    style: dict[str, str] = field(default_factory=dict)
    clear: bool = False

    def log_message(self) -> str:
        if self.clear:
            return f"Clear highlights ({self.message})"
        return f"Highlight {self.selector}: {self.message}"


@dataclass(slots=True)
class AnalysisCompleted(Event):
    """A test-type audit finished."""

    test_type: str
    summary: dict[str, Any]
    details: list[dict[str, Any]]
    url: str | None = None

    def log_message(self) -> str:
        return f"Analysis '{self.test_type}' completed with {len(self.details)} results"
