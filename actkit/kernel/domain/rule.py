"""Rule definitions and the context a rule executes in."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from actkit.kernel.domain.models import LegacySeverity, Outcome, RuleCategory, RuleResult, Severity
from actkit.kernel.exceptions import OperationCancelledError, ValidationError
from actkit.kernel.ports.document import DocumentPort, ElementPort
from actkit.kernel.reporting.formatter import format_act_result
from actkit.kernel.selectors import get_unique_selector, get_valid_selector
from actkit.kernel.wcag import WcagRequirement

DEFAULT_INPUT_ASPECTS = frozenset({"DOM Tree"})

ApplicabilityFunc = Callable[[DocumentPort], bool]
ExecuteFunc = Callable[["RuleContext"], Awaitable[None] | None]
ResultSink = Callable[[RuleResult], None]


class CancellationToken:
    """Cooperative cancellation flag shared by a run and its rules.

    Rules call :meth:`raise_if_cancelled` between units of work (typically
    once per element). Cancelling never interrupts code that is running; it
    only stops the next check from passing.

    A child token created with ``parent=`` also reports cancellation when its
    parent is cancelled, while cancelling the child leaves the parent alone.
    """

    __slots__ = ("_cancelled", "_reason", "_parent")

    def __init__(self, parent: CancellationToken | None = None) -> None:
        self._cancelled = False
        self._reason: str | None = None
        self._parent = parent

    @property
    def cancelled(self) -> bool:
        return self._cancelled or (self._parent is not None and self._parent.cancelled)

    @property
    def reason(self) -> str | None:
        if self._cancelled:
            return self._reason
        return self._parent.reason if self._parent is not None else None

    def cancel(self, reason: str = "cancelled") -> None:
        if not self._cancelled:
            self._reason = reason
            self._cancelled = True

    def child(self) -> CancellationToken:
        return CancellationToken(parent=self)

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise OperationCancelledError(self.reason or "cancelled")


@dataclass(frozen=True, slots=True)
class RuleMetadata:
    """Static description of a rule.

    Attributes
    ----------
    id : str
        Unique rule identifier
    name : str
        Short human-readable title
    description : str
        What the rule checks
    categories : frozenset[RuleCategory]
        Topic categories the rule belongs to
    wcag_requirements : Mapping[str, WcagRequirement]
        Requirements keyed by ``WCAG2.1:<id>``
    input_aspects : frozenset[str]
        Parts of the page the rule inspects
    help_url : str | None
        Link to guidance for the rule
    """

    id: str
    name: str
    description: str
    categories: frozenset[RuleCategory] = frozenset()
    wcag_requirements: Mapping[str, WcagRequirement] = field(default_factory=dict)
    input_aspects: frozenset[str] = DEFAULT_INPUT_ASPECTS
    help_url: str | None = None

    def __post_init__(self) -> None:
        if not self.id or not self.id.strip():
            raise ValidationError("id", "rule id must be a non-empty string", value=self.id)
        object.__setattr__(self, "categories", frozenset(RuleCategory(c) for c in self.categories))
        object.__setattr__(
            self, "wcag_requirements", MappingProxyType(dict(self.wcag_requirements))
        )
        object.__setattr__(self, "input_aspects", frozenset(self.input_aspects))

    @property
    def wcag_criteria(self) -> tuple[str, ...]:
        """Requirement keys in declaration order."""
        return tuple(self.wcag_requirements)


def _always_applicable(document: DocumentPort) -> bool:
    return True


@dataclass(frozen=True, slots=True)
class RuleDefinition:
    """A named unit of conformance logic.

    ``execute`` may be a coroutine function or a plain function. It reports
    through ``context.emit``/``context.report`` rather than returning a value,
    so one rule can record one result per matched element.
    """

    metadata: RuleMetadata
    execute: ExecuteFunc
    is_applicable: ApplicabilityFunc = _always_applicable

    @property
    def id(self) -> str:
        return self.metadata.id

    @property
    def name(self) -> str:
        return self.metadata.name


class RuleContext:
    """Everything a rule's ``execute`` needs during one run.

    Parameters
    ----------
    rule : RuleDefinition
        The rule being executed
    document : DocumentPort
        Document under audit
    sink : ResultSink
        Callback that records results (the runner's result list)
    token : CancellationToken | None
        Cancellation token for this execution
    """

    def __init__(
        self,
        rule: RuleDefinition,
        document: DocumentPort,
        sink: ResultSink,
        token: CancellationToken | None = None,
    ) -> None:
        self.rule = rule
        self.document = document
        self.token = token or CancellationToken()
        self._sink = sink
        self._closed = False
        self.emitted = 0

    @property
    def cancelled(self) -> bool:
        return self.token.cancelled

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Stop accepting results. Results emitted before closing are kept."""
        self._closed = True

    def check_cancelled(self) -> None:
        self.token.raise_if_cancelled()

    async def checkpoint(self) -> None:
        """Raise if cancelled, then yield to the event loop.

        Rules call this between elements so that sibling rules interleave and
        the runner timeout can take effect.
        """
        self.token.raise_if_cancelled()
        await asyncio.sleep(0)
        self.token.raise_if_cancelled()

    def emit(self, result: RuleResult) -> None:
        """Record a prepared result; ignored once the context is closed."""
        if self._closed:
            return
        self._sink(result)
        self.emitted += 1

    def selector_for(self, element: ElementPort) -> str:
        """Return a round-tripping selector, falling back to the structural path."""
        return get_valid_selector(element, self.document) or get_unique_selector(element)

    def report(
        self,
        element: ElementPort | None,
        outcome: Outcome | bool,
        message: str,
        impact: Severity | LegacySeverity | str = Severity.MODERATE,
        wcag_criteria: Sequence[str] | None = None,
        selector: str | None = None,
        help_url: str | None = None,
    ) -> RuleResult:
        """Build a result for this rule and record it.

        Criteria default to the rule's own WCAG requirements and the help URL
        to the rule's ``help_url``.
        """
        metadata = self.rule.metadata
        if element is not None and selector is None:
            selector = self.selector_for(element)
        result = format_act_result(
            metadata.id,
            metadata.name,
            element,
            selector,
            outcome,
            message,
            impact,
            wcag_criteria if wcag_criteria is not None else metadata.wcag_criteria,
            help_url or metadata.help_url,
        )
        self.emit(result)
        return result


def create_act_rule(
    id: str,
    name: str,
    description: str,
    *,
    execute: ExecuteFunc,
    categories: Iterable[RuleCategory | str] = (),
    wcag_requirements: Mapping[str, WcagRequirement] | None = None,
    is_applicable: ApplicabilityFunc | None = None,
    input_aspects: Iterable[str] | None = None,
    help_url: str | None = None,
) -> RuleDefinition:
    """Create a rule definition.

    Examples
    --------
    Example usage::

        rule = create_act_rule(
            "page-has-title",
            "Page has a title",
            "The document must have a non-empty title element",
            categories=[RuleCategory.STRUCTURE],
            wcag_requirements=get_wcag_reference("2.4.2"),
            execute=check_title,
        )
        registry.register(rule)
    """
    metadata = RuleMetadata(
        id=id,
        name=name,
        description=description,
        categories=frozenset(RuleCategory(c) for c in categories),
        wcag_requirements=wcag_requirements or {},
        input_aspects=frozenset(input_aspects) if input_aspects else DEFAULT_INPUT_ASPECTS,
        help_url=help_url,
    )
    return RuleDefinition(
        metadata=metadata,
        execute=execute,
        is_applicable=is_applicable or _always_applicable,
    )


def rule_summary(rule: RuleDefinition) -> dict[str, Any]:
    """Plain-data view of a rule for listings and JSON output."""
    metadata = rule.metadata
    return {
        "id": metadata.id,
        "name": metadata.name,
        "description": metadata.description,
        "categories": sorted(c.value for c in metadata.categories),
        "wcag": list(metadata.wcag_criteria),
        "help_url": metadata.help_url,
    }
