"""Rule runner: executes registered rules against a document.

Each rule moves through ``idle -> running -> completed | errored | timed_out``.
A rule that is running or has completed in the current session is not run
again until :meth:`RuleRunner.clear_results` resets the session.
"""

from __future__ import annotations

import asyncio
import inspect
import time
from collections.abc import Iterable, Sequence
from enum import StrEnum

from actkit.kernel.domain.models import Report, RuleCategory, RuleResult
from actkit.kernel.domain.rule import CancellationToken, RuleContext, RuleDefinition
from actkit.kernel.exceptions import (
    ConfigurationError,
    OperationCancelledError,
    RuleExecutionError,
    RuleTimeoutError,
)
from actkit.kernel.logging import get_logger
from actkit.kernel.orchestration.events import (
    Event,
    RuleCompleted,
    RuleFailed,
    RuleStarted,
    RuleTimedOut,
)
from actkit.kernel.ports.document import DocumentPort
from actkit.kernel.ports.event_bus import EventBus
from actkit.kernel.registry.registry import RuleRegistry
from actkit.kernel.reporting.aggregator import DEFAULT_TOOL_NAME, create_report
from actkit.kernel.reporting.formatter import log_results

logger = get_logger(__name__)

DEFAULT_RULE_TIMEOUT = 30.0


class RuleState(StrEnum):
    """Lifecycle state of a rule within one runner session."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    ERRORED = "errored"
    TIMED_OUT = "timed_out"


class RuleRunner:
    """Runs rules from a registry and collects their results.

    Parameters
    ----------
    registry : RuleRegistry
        Source of rule definitions
    document : DocumentPort
        Document under audit
    rule_timeout : float, default=30.0
        Wall-clock budget in seconds for each rule execution
    event_bus : EventBus | None
        Optional bus receiving rule lifecycle events
    tool_name : str
        Tool name recorded in report metadata
    tool_version : str | None
        Tool version recorded in report metadata (defaults to the package version)

    Examples
    --------
    Example usage::

        runner = RuleRunner(registry, HtmlDocument.from_path("index.html"))
        await runner.run_all_applicable_rules()
        report = runner.get_report()
    """

    def __init__(
        self,
        registry: RuleRegistry,
        document: DocumentPort,
        rule_timeout: float = DEFAULT_RULE_TIMEOUT,
        event_bus: EventBus | None = None,
        tool_name: str = DEFAULT_TOOL_NAME,
        tool_version: str | None = None,
    ) -> None:
        if rule_timeout <= 0:
            raise ConfigurationError(
                "runner", f"rule_timeout must be positive, got {rule_timeout}"
            )
        self.registry = registry
        self._document = document
        self.rule_timeout = rule_timeout
        self.event_bus = event_bus
        self.tool_name = tool_name
        self.tool_version = tool_version

        self._results: list[RuleResult] = []
        self._running: set[str] = set()
        self._completed: set[str] = set()
        self._states: dict[str, RuleState] = {}
        self._errors: dict[str, RuleExecutionError] = {}

    # ========================================================================
    # Session state
    # ========================================================================

    @property
    def document(self) -> DocumentPort:
        return self._document

    def set_document(self, document: DocumentPort) -> None:
        """Point the runner at a new document and start a fresh session."""
        self._document = document
        self.clear_results()

    def add_result(self, result: RuleResult) -> None:
        self._results.append(result)

    def get_results(self) -> list[RuleResult]:
        return list(self._results)

    def clear_results(self) -> None:
        """Drop collected results and forget which rules completed.

        Rules currently running keep their state; errored and timed out rules
        return to idle.
        """
        self._results.clear()
        self._completed.clear()
        self._states = {
            rule_id: state for rule_id, state in self._states.items() if rule_id in self._running
        }
        self._errors = {
            rule_id: error for rule_id, error in self._errors.items() if rule_id in self._running
        }

    def state_of(self, rule_id: str) -> RuleState:
        return self._states.get(rule_id, RuleState.IDLE)

    def is_running(self, rule_id: str) -> bool:
        return rule_id in self._running

    def is_completed(self, rule_id: str) -> bool:
        return rule_id in self._completed

    def get_errors(self) -> dict[str, RuleExecutionError]:
        """Why each errored or timed out rule of this session did not complete."""
        return dict(self._errors)

    # ========================================================================
    # Execution
    # ========================================================================

    async def run_rule(
        self, rule_id: str, token: CancellationToken | None = None
    ) -> RuleState | None:
        """Run one rule if it is known, idle and applicable.

        Parameters
        ----------
        rule_id : str
            Id of the registered rule
        token : CancellationToken | None
            Parent token; cancelling it cancels this rule cooperatively

        Returns
        -------
        RuleState | None
            The state the rule ended in, or ``None`` when the rule is unknown.
            Skipped rules report their current state.
        """
        rule = self.registry.get_rule(rule_id)
        if rule is None:
            logger.warning("Rule {rule_id} not found", rule_id=rule_id)
            return None
        if rule_id in self._running:
            logger.warning("Rule {rule_id} is already running", rule_id=rule_id)
            return RuleState.RUNNING
        if rule_id in self._completed:
            logger.warning("Rule {rule_id} has already been run", rule_id=rule_id)
            return RuleState.COMPLETED

        try:
            applicable = rule.is_applicable(self._document)
        except Exception as e:
            logger.error(
                "Applicability check for rule {rule_id} failed: {error}", rule_id=rule_id, error=e
            )
            self._states[rule_id] = RuleState.ERRORED
            self._errors[rule_id] = RuleExecutionError(
                rule_id, f"applicability check failed: {e}"
            )
            await self._publish(RuleFailed(rule_id=rule_id, error=str(e)))
            return RuleState.ERRORED

        if not applicable:
            logger.info("Rule {rule_id} is not applicable, skipping", rule_id=rule_id)
            return self.state_of(rule_id)

        return await self._execute(rule, token)

    async def _execute(self, rule: RuleDefinition, parent: CancellationToken | None) -> RuleState:
        rule_id = rule.id
        token = CancellationToken(parent=parent)
        context = RuleContext(rule, self._document, self.add_result, token)

        self._running.add(rule_id)
        self._states[rule_id] = RuleState.RUNNING
        logger.debug("Running rule {rule_id}", rule_id=rule_id)
        await self._publish(RuleStarted(rule_id=rule_id))
        start = time.perf_counter()

        try:
            async with asyncio.timeout(self.rule_timeout) as deadline:
                outcome = rule.execute(context)
                if inspect.isawaitable(outcome):
                    await outcome
        except TimeoutError as e:
            context.close()
            if deadline.expired():
                token.cancel("timeout")
                self._states[rule_id] = RuleState.TIMED_OUT
                self._errors[rule_id] = RuleTimeoutError(rule_id, self.rule_timeout)
                logger.error(
                    "Rule {rule_id} timed out after {timeout}s",
                    rule_id=rule_id,
                    timeout=self.rule_timeout,
                )
                await self._publish(
                    RuleTimedOut(
                        rule_id=rule_id,
                        timeout=self.rule_timeout,
                        result_count=context.emitted,
                    )
                )
            else:
                await self._record_error(rule_id, e)
        except OperationCancelledError as e:
            context.close()
            self._states[rule_id] = RuleState.ERRORED
            self._errors[rule_id] = RuleExecutionError(rule_id, f"cancelled: {e.reason}")
            logger.warning("Rule {rule_id} cancelled: {reason}", rule_id=rule_id, reason=e.reason)
            await self._publish(RuleFailed(rule_id=rule_id, error=str(e)))
        except Exception as e:
            context.close()
            await self._record_error(rule_id, e)
        else:
            context.close()
            self._completed.add(rule_id)
            self._states[rule_id] = RuleState.COMPLETED
            duration_ms = (time.perf_counter() - start) * 1000
            await self._publish(
                RuleCompleted(
                    rule_id=rule_id, result_count=context.emitted, duration_ms=duration_ms
                )
            )
        finally:
            self._running.discard(rule_id)

        return self._states[rule_id]

    async def _record_error(self, rule_id: str, error: Exception) -> None:
        self._states[rule_id] = RuleState.ERRORED
        self._errors[rule_id] = RuleExecutionError(rule_id, str(error) or type(error).__name__)
        logger.error("Error running rule {rule_id}: {error}", rule_id=rule_id, error=error)
        await self._publish(RuleFailed(rule_id=rule_id, error=str(error)))

    async def run_rules(
        self, rule_ids: Iterable[str], token: CancellationToken | None = None
    ) -> dict[str, RuleState | None]:
        """Start every rule before awaiting any and wait for all to settle."""
        ids = list(dict.fromkeys(rule_ids))
        outcomes = await asyncio.gather(
            *(self.run_rule(rule_id, token) for rule_id in ids), return_exceptions=True
        )
        states: dict[str, RuleState | None] = {}
        for rule_id, outcome in zip(ids, outcomes, strict=True):
            if isinstance(outcome, BaseException):
                if isinstance(outcome, asyncio.CancelledError):
                    raise outcome
                logger.error(
                    "Rule {rule_id} crashed the runner: {error}", rule_id=rule_id, error=outcome
                )
                self._errors.setdefault(rule_id, RuleExecutionError(rule_id, str(outcome)))
                states[rule_id] = RuleState.ERRORED
            else:
                states[rule_id] = outcome
        return states

    async def run_all_applicable_rules(
        self, token: CancellationToken | None = None
    ) -> dict[str, RuleState | None]:
        rules = self.registry.get_applicable_rules(self._document)
        logger.info("Running {count} applicable rules", count=len(rules))
        return await self.run_rules((rule.id for rule in rules), token)

    async def run_rules_by_category(
        self, category: RuleCategory | str, token: CancellationToken | None = None
    ) -> dict[str, RuleState | None]:
        rules = self.registry.get_rules_by_category(category)
        logger.info(
            "Running {count} rules in category {category}", count=len(rules), category=category
        )
        return await self.run_rules((rule.id for rule in rules), token)

    async def run_rules_by_categories(
        self, categories: Sequence[RuleCategory | str], token: CancellationToken | None = None
    ) -> dict[str, RuleState | None]:
        """Run the union of several categories as one concurrent group."""
        ids: list[str] = []
        for category in categories:
            ids.extend(rule.id for rule in self.registry.get_rules_by_category(category))
        return await self.run_rules(ids, token)

    async def run_rules_by_wcag_criteria(
        self, criterion: str, token: CancellationToken | None = None
    ) -> dict[str, RuleState | None]:
        rules = self.registry.get_rules_by_wcag_criteria(criterion)
        logger.info(
            "Running {count} rules for WCAG criterion {criterion}",
            count=len(rules),
            criterion=criterion,
        )
        return await self.run_rules((rule.id for rule in rules), token)

    # ========================================================================
    # Reporting
    # ========================================================================

    def get_report(self, url: str | None = None) -> Report:
        return create_report(
            self._results,
            url=url or self._document.url,
            tool_name=self.tool_name,
            tool_version=self.tool_version,
        )

    def log_results(self, show_passes: bool = False) -> Report:
        report = self.get_report()
        log_results(report, show_passes=show_passes)
        return report

    async def _publish(self, event: Event) -> None:
        if self.event_bus is None:
            return
        try:
            await self.event_bus.publish(event)
        except Exception as e:
            logger.warning(
                "Failed to publish {event}: {error}", event=type(event).__name__, error=e
            )
