"""Result model shared by the registry, runner, reporting and rules."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from actkit.kernel.exceptions import ValidationError


class Outcome(StrEnum):
    """Outcome of evaluating one rule against one target."""

    PASSED = "passed"
    FAILED = "failed"
    INAPPLICABLE = "inapplicable"
    CANT_TELL = "cantTell"


class Severity(StrEnum):
    """Impact of a failed result, ordered ``minor < moderate < serious < critical``."""

    MINOR = "minor"
    MODERATE = "moderate"
    SERIOUS = "serious"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank

    def to_legacy(self) -> LegacySeverity:
        return _SEVERITY_TO_LEGACY[self]


class LegacySeverity(StrEnum):
    """Severity scale used by the legacy suite DSL."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"

    def to_severity(self) -> Severity:
        return _LEGACY_TO_SEVERITY[self]


_SEVERITY_RANK = {
    Severity.MINOR: 0,
    Severity.MODERATE: 1,
    Severity.SERIOUS: 2,
    Severity.CRITICAL: 3,
}

_LEGACY_TO_SEVERITY = {
    LegacySeverity.LOW: Severity.MINOR,
    LegacySeverity.MEDIUM: Severity.MODERATE,
    LegacySeverity.HIGH: Severity.SERIOUS,
    LegacySeverity.CRITICAL: Severity.CRITICAL,
}

_SEVERITY_TO_LEGACY = {v: k for k, v in _LEGACY_TO_SEVERITY.items()}


def map_severity(value: LegacySeverity | Severity | str) -> Severity:
    """Translate a legacy or modern severity value into :class:`Severity`.

    Raises
    ------
    ValidationError
        If ``value`` belongs to neither scale
    """
    if isinstance(value, Severity):
        return value
    if isinstance(value, LegacySeverity):
        return value.to_severity()
    try:
        return LegacySeverity(value).to_severity()
    except ValueError:
        pass
    try:
        return Severity(value)
    except ValueError:
        raise ValidationError("severity", "unknown severity", value=value) from None


class RuleCategory(StrEnum):
    """Topic categories used to group rules."""

    ARIA = "aria"
    FORMS = "forms"
    HEADINGS = "headings"
    STRUCTURE = "structure"
    IMAGES = "images"
    LINKS = "links"
    TABLES = "tables"
    LANGUAGE = "language"
    LANDMARKS = "landmarks"
    COLOR = "color"
    CONTRAST = "contrast"
    FOCUS = "focus"
    KEYBOARD = "keyboard"
    BUTTONS = "buttons"
    INTERACTIVE = "interactive"


class RuleRef(BaseModel):
    """Identity of the rule that produced a result."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str


class ElementInfo(BaseModel):
    """Serializable description of the element a result refers to."""

    model_config = ConfigDict(frozen=True)

    selector: str
    html_snippet: str
    xpath: str | None = None
    attributes: dict[str, str] = Field(default_factory=dict)


class RuleResult(BaseModel):
    """One outcome recorded by a rule.

    Attributes
    ----------
    rule : RuleRef
        Rule id and name
    outcome : Outcome
        Verdict for the target
    element : ElementInfo | None
        Target element, ``None`` for page-level results
    message : str
        Human-readable explanation
    impact : Severity | None
        Set on failed results only
    remediation : str | None
        Suggested fix for failed results
    wcag_criteria : tuple[str, ...]
        Criterion keys such as ``"WCAG2.1:2.4.6"``
    help_url : str | None
        Link to further guidance
    """

    model_config = ConfigDict(frozen=True)

    rule: RuleRef
    outcome: Outcome
    element: ElementInfo | None = None
    message: str
    impact: Severity | None = None
    remediation: str | None = None
    wcag_criteria: tuple[str, ...] = ()
    help_url: str | None = None

    @property
    def passed(self) -> bool:
        return self.outcome == Outcome.PASSED

    @property
    def failed(self) -> bool:
        return self.outcome == Outcome.FAILED

    @property
    def selector(self) -> str | None:
        return self.element.selector if self.element else None


class RuleCounts(BaseModel):
    total: int = 0
    passed: int = 0
    failed: int = 0
    inapplicable: int = 0
    cant_tell: int = 0


class ElementCounts(BaseModel):
    total: int = 0
    passed: int = 0
    failed: int = 0


class WcagCompliance(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    level_a: bool = Field(default=True, alias="A")
    level_aa: bool = Field(default=True, alias="AA")
    level_aaa: bool = Field(default=True, alias="AAA")


class ReportSummary(BaseModel):
    """Page-level roll-up derived from a result list."""

    rules: RuleCounts = Field(default_factory=RuleCounts)
    elements: ElementCounts = Field(default_factory=ElementCounts)
    wcag_compliance: WcagCompliance = Field(default_factory=WcagCompliance)
    wcag_violations: tuple[str, ...] = ()


class Report(BaseModel):
    """Summary plus the raw results of one audit."""

    summary: ReportSummary
    results: tuple[RuleResult, ...] = ()
    metadata: dict[str, Any] = Field(default_factory=dict)

    def to_json(self, indent: int | None = 2) -> str:
        return self.model_dump_json(indent=indent, by_alias=True)
