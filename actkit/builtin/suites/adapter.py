"""Bridge DSL suites into ACT rules."""

from __future__ import annotations

import asyncio
import inspect
import re
from collections.abc import Iterable, Sequence

from actkit.builtin.suites.dsl import CaseVerdict, Signal, Suite, SuiteCase
from actkit.kernel.domain.models import Outcome, RuleCategory, map_severity
from actkit.kernel.domain.rule import RuleContext, RuleDefinition, create_act_rule
from actkit.kernel.exceptions import OperationCancelledError
from actkit.kernel.logging import get_logger
from actkit.kernel.ports.document import DocumentPort, ElementPort
from actkit.kernel.reporting.formatter import format_act_result
from actkit.kernel.wcag import get_wcag_references

logger = get_logger(__name__)

DEFAULT_ELEMENT_TIMEOUT = 5.0
_WHITESPACE = re.compile(r"\s+")


def suite_rule_id(suite: Suite) -> str:
    return _WHITESPACE.sub("-", suite.name.lower())


def _as_verdict(value: object) -> CaseVerdict:
    if isinstance(value, CaseVerdict):
        return value
    if isinstance(value, tuple) and len(value) == 2:
        return CaseVerdict(bool(value[0]), str(value[1]))
    raise TypeError(f"evaluation must return (passed, message), got {type(value).__name__}")


async def _evaluate(
    case: SuiteCase, element: ElementPort, signal: Signal, remaining: float
) -> CaseVerdict:
    value = case.evaluate(element, signal)
    if inspect.isawaitable(value):
        value = await asyncio.wait_for(value, timeout=max(remaining, 0.0))
    return _as_verdict(value)


def convert_suite_to_act_rule(
    suite: Suite,
    wcag_criteria: Sequence[str] = (),
    categories: Iterable[RuleCategory | str] = (),
    help_url: str | None = None,
    element_timeout: float = DEFAULT_ELEMENT_TIMEOUT,
) -> RuleDefinition:
    """Wrap ``suite`` in a rule definition.

    Parameters
    ----------
    suite : Suite
        Suite to convert
    wcag_criteria : Sequence[str]
        Criteria ids (``"1.1.1"``) attached to every result
    categories : Iterable[RuleCategory | str]
        Categories of the produced rule
    help_url : str | None
        Guidance link for the rule and its results
    element_timeout : float
        Seconds allowed for all cases on one element

    Returns
    -------
    RuleDefinition
        Rule whose id is the suite name lowercased and hyphenated. Each case
        reports under ``<rule-id>-<case-id>``.

    Notes
    -----
    An evaluation that raises, or that starts after the element's time budget
    is spent, becomes a failed result carrying the error message. Cancelling
    the run itself still propagates.
    """
    rule_id = suite_rule_id(suite)
    criteria = list(wcag_criteria)
    description = next(
        (c.meta.description for c in suite.cases if c.meta.description),
        f"Tests for {suite.name}",
    )

    def is_applicable(document: DocumentPort) -> bool:
        return document.query(suite.applicability) is not None

    async def execute(ctx: RuleContext) -> None:
        loop = asyncio.get_running_loop()
        for element in ctx.document.query_all(suite.applicability):
            await ctx.checkpoint()
            selector = ctx.selector_for(element)
            element_token = ctx.token.child()
            signal = Signal(element_token, ctx.document)
            deadline = loop.time() + element_timeout

            for case in suite.cases:
                ctx.check_cancelled()
                remaining = deadline - loop.time()
                if remaining <= 0 and not element_token.cancelled:
                    element_token.cancel(f"evaluation exceeded {element_timeout:g}s")
                try:
                    element_token.raise_if_cancelled()
                    verdict = await _evaluate(case, element, signal, remaining)
                except OperationCancelledError as exc:
                    if ctx.cancelled:
                        raise
                    verdict = CaseVerdict(False, f"Test cancelled: {exc.reason}")
                except TimeoutError:
                    element_token.cancel(f"evaluation exceeded {element_timeout:g}s")
                    verdict = CaseVerdict(False, f"Test timed out after {element_timeout:g}s")
                except Exception as exc:
                    logger.error("Error running test '{}': {}", case.name, exc)
                    verdict = CaseVerdict(False, f"Error running test: {exc}")

                ctx.emit(
                    format_act_result(
                        f"{rule_id}-{case.id}",
                        case.name,
                        element,
                        selector,
                        Outcome.PASSED if verdict.passed else Outcome.FAILED,
                        verdict.message,
                        map_severity(case.meta.severity),
                        criteria,
                        help_url,
                    )
                )

    return create_act_rule(
        rule_id,
        suite.name,
        description,
        categories=categories,
        wcag_requirements=get_wcag_references(*criteria),
        is_applicable=is_applicable,
        execute=execute,
        help_url=help_url,
    )


__all__ = ["DEFAULT_ELEMENT_TIMEOUT", "convert_suite_to_act_rule", "suite_rule_id"]
